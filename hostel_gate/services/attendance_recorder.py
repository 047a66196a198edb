# hostel_gate/services/attendance_recorder.py
"""
Records entry/exit for a resolved student.

Each action is a dual write, issued in order:
  1. append {action, time, timestamp} to the student's embedded `logs`
  2. entry → create a global event (exit/exitTimestamp = null)
     exit  → set exit/exitTimestamp on the matching open entry

There is no transaction between the two writes. If (1) succeeds and (2)
fails the outcome is PARTIAL_WRITE: logged with both keys and surfaced to the
operator. Nothing is rolled back; reconciliation_service repairs it later.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
from hostel_gate.config import settings
from hostel_gate.exceptions import StoreError
from hostel_gate.schemas.log_event import GlobalLogEvent
from hostel_gate.schemas.student import Action, LogEntry, Student
from hostel_gate.services.document_store import ArrayAppend, DocumentStore
from hostel_gate.services.haptic_service import HapticFeedback, SUCCESS_PATTERN, FAILURE_PATTERN
from hostel_gate.services.notification_service import NotificationFeed, Severity, MESSAGES
from hostel_gate.services.open_entry_finder import make_open_entry_finder
from hostel_gate.utils.logger import get_logger
from hostel_gate.utils.time_utils import utc_now, to_display_time, to_machine_timestamp, parse_machine_timestamp

logger = get_logger(__name__)


class RecordStatus(str, Enum):
    RECORDED = "recorded"
    NO_STUDENT = "no_student"
    NO_OPEN_ENTRY = "no_open_entry"
    FAILED = "failed"
    PARTIAL_WRITE = "partial_write"


@dataclass
class RecordResult:
    status: RecordStatus
    action: Action
    registration_no: Optional[str] = None
    event_key: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == RecordStatus.RECORDED


def make_event_key(reg_no: str, moment: datetime) -> str:
    """regNo + creation instant + random suffix; unique even within one clock tick."""
    return f"{reg_no}_{moment.strftime('%Y%m%dT%H%M%S%f')}_{uuid.uuid4().hex[:8]}"


class AttendanceRecorder:
    def __init__(
        self,
        store: DocumentStore,
        notifier: NotificationFeed,
        haptics: Optional[HapticFeedback] = None,
        finder=None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.notifier = notifier
        self.haptics = haptics or HapticFeedback(supported=False)
        self.finder = finder or make_open_entry_finder(store)
        self.clock = clock
        self.students = settings.STUDENTS_COLLECTION
        self.global_log = settings.GLOBAL_LOG_COLLECTION

    def _stamp(self, action: Action) -> LogEntry:
        now = self.clock()
        return LogEntry(action=action, time=to_display_time(now), timestamp=to_machine_timestamp(now))

    def _finish(self, result: RecordResult, severity: Severity) -> RecordResult:
        self.notifier.notify(result.message, severity)
        self.haptics.vibrate(SUCCESS_PATTERN if result.ok else FAILURE_PATTERN)
        return result

    def _no_student(self, action: Action) -> RecordResult:
        result = RecordResult(RecordStatus.NO_STUDENT, action, message=MESSAGES["no_student"])
        self.notifier.notify(result.message, Severity.WARNING)
        return result

    async def record_entry(self, student: Optional[Student]) -> RecordResult:
        if student is None:
            return self._no_student(Action.ENTRY)

        reg_no = student.registration_no
        entry = self._stamp(Action.ENTRY)

        try:
            self.store.update(self.students, reg_no, {"logs": ArrayAppend(entry.model_dump(mode="json"))})
        except StoreError as e:
            logger.error(f"Entry for {reg_no} not recorded: {e}", exc_info=True)
            return self._finish(RecordResult(RecordStatus.FAILED, Action.ENTRY, reg_no,
                                             message=MESSAGES["entry_failed"]), Severity.ERROR)

        event_key = make_event_key(reg_no, parse_machine_timestamp(entry.timestamp))
        event = GlobalLogEvent(
            name=student.name,
            reg_no=reg_no,
            action=Action.ENTRY.value,
            time=entry.time,
            timestamp=entry.timestamp,
        )
        try:
            self.store.set(self.global_log, event_key, event.to_document())
        except StoreError as e:
            logger.warning(
                f"[PARTIAL_WRITE] Entry {entry.timestamp} appended to {self.students}/{reg_no} "
                f"but {self.global_log}/{event_key} was not created: {e}"
            )
            return self._finish(RecordResult(RecordStatus.PARTIAL_WRITE, Action.ENTRY, reg_no, event_key,
                                             MESSAGES["partial_write"]), Severity.ERROR)

        logger.info(f"[ENTRY] {reg_no} ({student.name}) at {entry.time} → {event_key}")
        return self._finish(RecordResult(RecordStatus.RECORDED, Action.ENTRY, reg_no, event_key,
                                         MESSAGES["entry_recorded"]), Severity.SUCCESS)

    async def record_exit(self, student: Optional[Student]) -> RecordResult:
        if student is None:
            return self._no_student(Action.EXIT)

        reg_no = student.registration_no
        try:
            open_entry = self.finder.find_open_entry(reg_no)
        except StoreError as e:
            logger.error(f"Open entry search failed for {reg_no}: {e}", exc_info=True)
            return self._finish(RecordResult(RecordStatus.FAILED, Action.EXIT, reg_no,
                                             message=MESSAGES["exit_failed"]), Severity.ERROR)

        if open_entry is None:
            logger.warning(f"[EXIT] No active entry found for {reg_no} — nothing written")
            return self._finish(RecordResult(RecordStatus.NO_OPEN_ENTRY, Action.EXIT, reg_no,
                                             message=MESSAGES["no_open_entry"]), Severity.WARNING)

        exit_entry = self._stamp(Action.EXIT)
        try:
            self.store.update(self.students, reg_no, {"logs": ArrayAppend(exit_entry.model_dump(mode="json"))})
        except StoreError as e:
            logger.error(f"Exit for {reg_no} not recorded: {e}", exc_info=True)
            return self._finish(RecordResult(RecordStatus.FAILED, Action.EXIT, reg_no, open_entry.key,
                                             MESSAGES["exit_failed"]), Severity.ERROR)

        try:
            self.store.update(self.global_log, open_entry.key,
                              {"exit": exit_entry.time, "exitTimestamp": exit_entry.timestamp})
        except StoreError as e:
            logger.warning(
                f"[PARTIAL_WRITE] Exit {exit_entry.timestamp} appended to {self.students}/{reg_no} "
                f"but {self.global_log}/{open_entry.key} was not closed: {e}"
            )
            return self._finish(RecordResult(RecordStatus.PARTIAL_WRITE, Action.EXIT, reg_no, open_entry.key,
                                             MESSAGES["partial_write"]), Severity.ERROR)

        logger.info(f"[EXIT] {reg_no} ({student.name}) at {exit_entry.time} closes {open_entry.key}")
        return self._finish(RecordResult(RecordStatus.RECORDED, Action.EXIT, reg_no, open_entry.key,
                                         MESSAGES["exit_recorded"]), Severity.SUCCESS)
