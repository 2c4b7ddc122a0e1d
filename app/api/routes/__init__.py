"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import auth, projects

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
