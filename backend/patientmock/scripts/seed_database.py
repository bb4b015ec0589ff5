"""Seed the configured database with random mock patients.

Usage:
    python -m patientmock.scripts.seed_database --count 50
    python -m patientmock.scripts.seed_database --clear --count 200

Uses the same generator as ``POST /api/v1/admin/generate``.
"""

import argparse
import asyncio

from patientmock.config import settings
from patientmock.constants import DEFAULT_GENERATE_COUNT
from patientmock.database import Database
from patientmock.services.patients import PatientService


async def seed_database(database_url: str, count: int, clear: bool = False) -> dict[str, int]:
    """Generate ``count`` patients, optionally clearing existing ones first.

    Args:
        database_url: SQLAlchemy async URL of the target database.
        count: Number of patients to generate (1-1000).
        clear: Delete all patients before generating.

    Returns:
        Dictionary with counts: deleted, generated.
    """
    database = Database(database_url)
    await database.connect()
    try:
        async with database.session() as session:
            service = PatientService(session)
            deleted = await service.clear_patients() if clear else 0
            generated = await service.generate_patients(count)
    finally:
        await database.dispose()

    return {"deleted": deleted, "generated": generated}


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the database with mock patients")
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_GENERATE_COUNT,
        help=f"Number of patients to generate (default: {DEFAULT_GENERATE_COUNT})",
    )
    parser.add_argument("--clear", action="store_true", help="Delete existing patients first")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="Database URL (default: from DATABASE_URL)",
    )
    args = parser.parse_args()

    print("=" * 60)
    print("Patient Mock Database Seeder")
    print("=" * 60)
    print(f"\nDatabase: {args.database_url}")

    stats = asyncio.run(seed_database(args.database_url, args.count, args.clear))

    if args.clear:
        print(f"  Deleted:   {stats['deleted']} patient(s)")
    print(f"  Generated: {stats['generated']} patient(s)")


if __name__ == "__main__":
    main()
