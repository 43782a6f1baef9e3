"""Seed script to populate the database with sample data."""

from powersplit.core.database import Base, SessionLocal, engine
from powersplit.core.logging import setup_logging
from powersplit.main import app  # noqa: F401  # registers all models
from powersplit.services.seed import seed_database


def main() -> None:
    """Create tables and seed the database."""
    setup_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        property_obj = seed_database(db)
        if property_obj is None:
            print("Database already has data. Skipping seed.")
            return

        print("Seed data created successfully!")
        print(f"\nProperty ID: {property_obj.id}")
        print(f"Owners: {', '.join(o.name for o in property_obj.owners)}")
    finally:
        db.close()

    print("\nTry GET /api/properties/{id}/calculations to see the bill splits.")


if __name__ == "__main__":
    main()
