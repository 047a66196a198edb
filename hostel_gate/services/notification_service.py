# hostel_gate/services/notification_service.py
"""
User-facing notifications (toasts) for the gate screen.
Every notification is logged and kept in a bounded feed that the front end polls.
"""

from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional
from hostel_gate.config import settings
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# One message per outcome so the operator can tell them apart at a glance
MESSAGES = {
    "not_found": "No student found with this registration number.",
    "lookup_failed": "Error fetching student details. Please try again.",
    "no_student": "Scan or enter a registration number first.",
    "no_open_entry": "No active entry found for this student.",
    "entry_recorded": "Entry recorded successfully!",
    "exit_recorded": "Exit recorded successfully!",
    "entry_failed": "Could not record entry. Please try again.",
    "exit_failed": "Could not record exit. Please try again.",
    "partial_write": "Saved to the student log, but the global log was not updated. Run reconciliation.",
}

_LOG_LEVELS = {
    Severity.SUCCESS: "info",
    Severity.INFO: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}


@dataclass
class Notification:
    message: str
    severity: Severity
    position: str = "top-right"
    duration_ms: int = 3000
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        data["created_at"] = self.created_at.isoformat()
        return data


class NotificationFeed:
    def __init__(self, maxlen: int = None, position: str = None, duration_ms: int = None):
        self._items = deque(maxlen=maxlen or settings.NOTIFICATION_FEED_SIZE)
        self.position = position or settings.TOAST_POSITION
        self.duration_ms = duration_ms or settings.TOAST_DURATION_MS

    def notify(self, message: str, severity: Severity,
               position: Optional[str] = None, duration_ms: Optional[int] = None) -> Notification:
        note = Notification(
            message=message,
            severity=severity,
            position=position or self.position,
            duration_ms=duration_ms or self.duration_ms,
        )
        self._items.append(note)
        getattr(logger, _LOG_LEVELS[severity])(f"[TOAST][{severity.value.upper()}] {message}")
        return note

    def recent(self, limit: int = 20) -> list[Notification]:
        """Newest first."""
        return list(reversed(self._items))[:limit]

    @property
    def last(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None
