"""
Insert randomly generated sample projects for local development. Run from project root:
  python -m app.scripts.seed_projects [--count 100] [--seed 42]
"""

import argparse
import logging
import random
import sys
from datetime import UTC, datetime, timedelta

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import AppError
from app.core.logging import configure_logging
from app.schemas.project import ProjectCreate
from app.services.projects import create_project

logger = logging.getLogger(__name__)

CITIES = (
    ("New York", "NY"),
    ("Los Angeles", "CA"),
    ("Chicago", "IL"),
    ("Houston", "TX"),
    ("Phoenix", "AZ"),
    ("Philadelphia", "PA"),
    ("San Antonio", "TX"),
    ("San Diego", "CA"),
    ("Dallas", "TX"),
    ("Austin", "TX"),
    ("Jacksonville", "FL"),
    ("Columbus", "OH"),
    ("Charlotte", "NC"),
    ("Seattle", "WA"),
    ("Denver", "CO"),
    ("Washington", "DC"),
)
STATUSES = ("planning", "active", "completed", "on-hold", "cancelled")
FIRST_NAMES = ("John", "Jane", "Robert", "Sarah", "Michael", "Emily", "David", "Jessica", "James", "Ashley")
LAST_NAMES = ("Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Wilson", "Moore")
PROJECT_KINDS = ("Residence", "Townhomes", "Lofts", "Apartments", "Villas", "Commons")
STREETS = ("Main St", "Oak Ave", "Maple Dr", "Cedar Ln", "Park Blvd", "Lakeview Rd")


def generate_project(rng: random.Random, now: datetime) -> ProjectCreate:
    """Build one plausible project; dates span up to two years."""
    city, state = rng.choice(CITIES)
    owner = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
    start = now - timedelta(days=rng.randint(0, 365))
    end = start + timedelta(days=rng.randint(30, 730))
    return ProjectCreate(
        name=f"{rng.choice(LAST_NAMES)} {rng.choice(PROJECT_KINDS)}",
        address=f"{rng.randint(100, 9999)} {rng.choice(STREETS)}",
        city=city,
        state=state,
        postal_code=f"{rng.randint(10000, 99999)}",
        owner_name=owner,
        status=rng.choice(STATUSES),
        budget=round(rng.uniform(50_000, 5_000_000), 2),
        start_date=start,
        end_date=end,
        metadata={
            "bedrooms": rng.randint(1, 6),
            "bathrooms": rng.randint(1, 4),
            "square_feet": rng.randint(600, 6000),
        },
        documents={"permits": [], "contracts": []},
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed sample projects.")
    parser.add_argument("--count", type=int, default=100, help="Number of projects (1-10000)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args(argv)
    if args.count < 1 or args.count > 10_000:
        print("--count must be between 1 and 10000.", file=sys.stderr)
        return 1

    configure_logging(get_settings())
    rng = random.Random(args.seed)
    now = datetime.now(UTC)
    inserted = 0
    db = SessionLocal()
    try:
        for i in range(args.count):
            try:
                create_project(db, generate_project(rng, now))
                inserted += 1
            except AppError as e:
                logger.warning("Failed to insert project %d: %s", i + 1, e.message)
    finally:
        db.close()
    logger.info("Seeding completed: projects_inserted=%s", inserted)
    return 0 if inserted else 1


if __name__ == "__main__":
    sys.exit(main())
