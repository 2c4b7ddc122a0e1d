"""
Run the API server. From project root:
  python -m app
Host, port, keep-alive and shutdown grace period come from settings.
"""

import uvicorn

from app.core.config import settings


def main() -> None:
    # On SIGTERM uvicorn stops accepting connections, waits up to the grace
    # period for in-flight requests, then runs the lifespan shutdown (pool close).
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        timeout_keep_alive=settings.SERVER_READ_TIMEOUT_SEC,
        timeout_graceful_shutdown=settings.SERVER_SHUTDOWN_GRACE_SEC,
        log_config=None,
        reload=False,
    )


if __name__ == "__main__":
    main()
