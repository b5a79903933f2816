#!/usr/bin/env python3
"""
Create (or drop) All Database Tables Script

Creates every table of the Bookshelf API from the SQLAlchemy models on the
database configured by ``DATABASE_URL``.

Usage:
    python scripts/create_tables.py
    python scripts/create_tables.py --drop    # WARNING: removes all data
"""

import argparse
import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from bookshelf.core.config import settings
from bookshelf.core.database import Base, engine

# Import all models to register them with Base.metadata
from bookshelf.models import Book, ReadingSession, User, UserSettings  # noqa: F401


def create_all_tables() -> bool:
    """Create all database tables."""
    print("Creating all database tables")
    print("=" * 40)
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Database: {settings.DATABASE_URL[:50]}...")
    print()

    try:
        # Test connection first
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            print("Database connection successful")

        Base.metadata.create_all(bind=engine)

        table_names = sorted(inspect(engine).get_table_names())
        print(f"Tables present ({len(table_names)}):")
        for table in table_names:
            print(f"  - {table}")
        return True

    except SQLAlchemyError as e:
        print(f"Database error: {e}")
        return False
    finally:
        engine.dispose()


def drop_all_tables() -> bool:
    """Drop all database tables."""
    print("Dropping all database tables")
    print("=" * 40)
    print(f"Environment: {settings.ENVIRONMENT}")

    try:
        Base.metadata.drop_all(bind=engine)
        print("All tables dropped")
        return True
    except SQLAlchemyError as e:
        print(f"Database error: {e}")
        return False
    finally:
        engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create or drop the Bookshelf tables")
    parser.add_argument(
        "--drop", action="store_true", help="drop every table instead of creating them"
    )
    args = parser.parse_args()

    success = drop_all_tables() if args.drop else create_all_tables()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
