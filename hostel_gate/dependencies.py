# hostel_gate/dependencies.py
"""
Process-wide service handles, built once and injected into routers with
FastAPI Depends(). Tests swap them via app.dependency_overrides.
"""

from hostel_gate.database import SessionLocal
from hostel_gate.services.attendance_recorder import AttendanceRecorder
from hostel_gate.services.document_store import DocumentStore, SqlDocumentStore
from hostel_gate.services.gate_session import GateSession
from hostel_gate.services.haptic_service import HapticFeedback
from hostel_gate.services.identifier_resolver import IdentifierResolver
from hostel_gate.services.notification_service import NotificationFeed
from hostel_gate.services.student_lookup import StudentLookup

_store = None
_notifier = None
_gate_session = None


def get_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = SqlDocumentStore(SessionLocal)
    return _store


def get_notifier() -> NotificationFeed:
    global _notifier
    if _notifier is None:
        _notifier = NotificationFeed()
    return _notifier


def build_gate_session(store: DocumentStore, notifier: NotificationFeed) -> GateSession:
    return GateSession(
        resolver=IdentifierResolver(),
        lookup=StudentLookup(store, notifier),
        recorder=AttendanceRecorder(store, notifier, haptics=HapticFeedback()),
    )


def get_gate_session() -> GateSession:
    global _gate_session
    if _gate_session is None:
        _gate_session = build_gate_session(get_store(), get_notifier())
    return _gate_session
