"""
Load student records into the store. Students are never created by the gate
itself; run this whenever the hostel roster changes.

CSV columns: registration_no,name,branch[,image_url]
Existing students keep their embedded log; only profile fields are updated.

Usage: python scripts/setup/seed_students.py students.csv
"""

import sys
import os
import csv
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from pydantic import ValidationError
from hostel_gate.config import settings
from hostel_gate.database import SessionLocal, create_tables
from hostel_gate.schemas.student import Student, StudentCreate
from hostel_gate.services.document_store import SqlDocumentStore
from hostel_gate.services.identifier_resolver import normalize_identifier


def seed(store, rows) -> tuple[int, int]:
    created = updated = 0
    for row in rows:
        body = StudentCreate(**row)
        reg_no = normalize_identifier(body.registration_no)
        profile = {"name": body.name, "branch": body.branch, "imageUrl": body.image_url or None}
        existing = store.get(settings.STUDENTS_COLLECTION, reg_no)
        if existing is None:
            student = Student(registration_no=reg_no, name=body.name, branch=body.branch,
                              image_url=profile["imageUrl"])
            store.set(settings.STUDENTS_COLLECTION, reg_no, student.to_document())
            created += 1
        else:
            store.update(settings.STUDENTS_COLLECTION, reg_no, profile)
            updated += 1
    return created, updated


def main():
    parser = argparse.ArgumentParser(description="Seed student records from CSV")
    parser.add_argument("csv_path")
    args = parser.parse_args()

    create_tables()
    store = SqlDocumentStore(SessionLocal)
    with open(args.csv_path, newline="", encoding="utf-8") as fh:
        rows = [{k: v for k, v in row.items() if v} for row in csv.DictReader(fh)]
    try:
        created, updated = seed(store, rows)
    except ValidationError as e:
        print(f"Invalid row: {e}")
        sys.exit(1)
    print(f"Students created: {created}, updated: {updated}")


if __name__ == "__main__":
    main()
