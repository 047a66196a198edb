# hostel_gate/services/reconciliation_service.py
"""
Detects and repairs dual-write drift between a student's embedded log and the
global log (see attendance_recorder.py for how drift happens).

  missing_entries  embedded Entry with no global event at the same timestamp
  orphan_exits     embedded Exit whose timestamp closes no global event

repair=True recreates the missing global entries, then lets each orphan exit
close the latest still-open entry that precedes it. A recreated entry whose
next embedded element is not an orphan exit is recreated already closed at
that element's time, so only a trailing entry comes back open.
"""

from dataclasses import dataclass, field
from typing import Optional
from hostel_gate.config import settings
from hostel_gate.schemas.log_event import GlobalLogEvent
from hostel_gate.schemas.student import Action, LogEntry, Student
from hostel_gate.services.attendance_recorder import make_event_key
from hostel_gate.services.document_store import DocumentStore
from hostel_gate.utils.logger import get_logger
from hostel_gate.utils.time_utils import parse_machine_timestamp

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    registration_no: str
    missing_entries: list[LogEntry] = field(default_factory=list)
    orphan_exits: list[LogEntry] = field(default_factory=list)
    created_events: int = 0
    closed_events: int = 0

    @property
    def consistent(self) -> bool:
        return not self.missing_entries and not self.orphan_exits

    def to_dict(self) -> dict:
        return {
            "registration_no": self.registration_no,
            "missing_entries": [e.timestamp for e in self.missing_entries],
            "orphan_exits": [e.timestamp for e in self.orphan_exits],
            "created_events": self.created_events,
            "closed_events": self.closed_events,
            "consistent": self.consistent,
        }


async def reconcile_student(store: DocumentStore, reg_no: str, repair: bool = False) -> Optional[ReconciliationReport]:
    """Returns None if the student does not exist. StoreError propagates."""
    snapshot = store.get(settings.STUDENTS_COLLECTION, reg_no)
    if snapshot is None:
        return None
    student = Student.from_document(snapshot.key, snapshot.data)

    events = [
        GlobalLogEvent.from_document(s.key, s.data)
        for s in store.query(settings.GLOBAL_LOG_COLLECTION, where=[("regNo", reg_no)], order_by="timestamp")
    ]
    entry_stamps = {e.timestamp for e in events if e.action == Action.ENTRY.value}
    exit_stamps = {e.exit_timestamp for e in events if e.exit_timestamp}

    report = ReconciliationReport(registration_no=reg_no)
    followers = {}
    for item, follower in zip(student.logs, student.logs[1:] + [None]):
        if item.action == Action.ENTRY.value and item.timestamp not in entry_stamps:
            report.missing_entries.append(item)
            followers[item.timestamp] = follower
        elif item.action == Action.EXIT.value and item.timestamp not in exit_stamps:
            report.orphan_exits.append(item)

    if report.consistent:
        logger.info(f"[RECONCILE] {reg_no}: embedded and global logs agree")
        return report
    logger.warning(
        f"[RECONCILE] {reg_no}: {len(report.missing_entries)} missing global entries, "
        f"{len(report.orphan_exits)} orphan exits"
    )
    if not repair:
        return report

    for item in report.missing_entries:
        key = make_event_key(reg_no, parse_machine_timestamp(item.timestamp))
        event = GlobalLogEvent(key=key, name=student.name, reg_no=reg_no,
                               action=Action.ENTRY.value, time=item.time, timestamp=item.timestamp)
        follower = followers.get(item.timestamp)
        if follower is not None and follower not in report.orphan_exits:
            # A later element ended this stay; an orphan exit right after closes it below
            event.exit = follower.time
            event.exit_timestamp = follower.timestamp
        store.set(settings.GLOBAL_LOG_COLLECTION, key, event.to_document())
        events.append(event)
        report.created_events += 1

    open_entries = sorted((e for e in events if e.is_open_entry), key=lambda e: e.timestamp)
    for item in report.orphan_exits:
        preceding = [e for e in open_entries if e.timestamp < item.timestamp]
        if not preceding:
            logger.warning(f"[RECONCILE] {reg_no}: exit {item.timestamp} has no earlier open entry")
            continue
        target = preceding[-1]
        store.update(settings.GLOBAL_LOG_COLLECTION, target.key,
                     {"exit": item.time, "exitTimestamp": item.timestamp})
        open_entries.remove(target)
        report.closed_events += 1

    logger.info(f"[RECONCILE] {reg_no}: created {report.created_events}, closed {report.closed_events}")
    return report
