# hostel_gate/services/student_lookup.py
"""
Resolves a registration number to a student record.
Never raises: not-found and store failures become outcomes + notifications.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from pydantic import ValidationError
from hostel_gate.config import settings
from hostel_gate.exceptions import StoreError
from hostel_gate.schemas.student import Student
from hostel_gate.services.document_store import DocumentStore
from hostel_gate.services.notification_service import NotificationFeed, Severity, MESSAGES
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class LookupResult:
    status: LookupStatus
    registration_no: str
    student: Optional[Student] = None


class StudentLookup:
    def __init__(self, store: DocumentStore, notifier: NotificationFeed, collection: str = None):
        self.store = store
        self.notifier = notifier
        self.collection = collection or settings.STUDENTS_COLLECTION

    async def lookup(self, reg_no: str) -> LookupResult:
        try:
            snapshot = self.store.get(self.collection, reg_no)
        except StoreError as e:
            logger.error(f"Lookup failed for {reg_no}: {e}", exc_info=True)
            self.notifier.notify(MESSAGES["lookup_failed"], Severity.ERROR)
            return LookupResult(LookupStatus.ERROR, reg_no)

        if snapshot is None:
            logger.info(f"No student with registration number {reg_no}")
            self.notifier.notify(MESSAGES["not_found"], Severity.WARNING)
            return LookupResult(LookupStatus.NOT_FOUND, reg_no)

        try:
            student = Student.from_document(snapshot.key, snapshot.data)
        except ValidationError as e:
            logger.error(f"Malformed student record {reg_no}: {e}")
            self.notifier.notify(MESSAGES["lookup_failed"], Severity.ERROR)
            return LookupResult(LookupStatus.ERROR, reg_no)

        logger.info(f"Resolved {reg_no} → {student.name} ({student.branch})")
        return LookupResult(LookupStatus.FOUND, reg_no, student)
