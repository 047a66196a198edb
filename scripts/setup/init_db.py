"""
Initialize database — creates the documents table.
Run once before first launch.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from hostel_gate.database import create_tables, engine
from hostel_gate.config import settings
from sqlalchemy import inspect, text


def main():
    print("Hostel Gate DB Initialization")
    print("=" * 40)
    print(f"Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()

    tables = inspect(engine).get_table_names()
    print(f"\nTables in database ({len(tables)} total):")
    for t in tables:
        print(f"   - {t}")

    print("\nDatabase ready! Seed students, then start the backend:")
    print("   python scripts/setup/seed_students.py students.csv")
    print("   uvicorn hostel_gate.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
