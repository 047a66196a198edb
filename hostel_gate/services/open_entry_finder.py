# hostel_gate/services/open_entry_finder.py
"""
Locates the open entry an exit should close.

  window   scan the RECENT_EVENTS_WINDOW newest global events (all students)
           and take the first open entry for this student. An open entry
           older than the window is not seen and the exit is refused.
  indexed  filtered query on regNo / action / exit, newest first. No window.

Both return the most recent open entry when several exist.
"""

from typing import Optional
from pydantic import ValidationError
from hostel_gate.config import settings
from hostel_gate.schemas.log_event import GlobalLogEvent
from hostel_gate.schemas.student import Action
from hostel_gate.services.document_store import DocumentStore
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)


def _decode(snapshot) -> Optional[GlobalLogEvent]:
    """Undecodable events (legacy or hand-edited documents) are skipped, not fatal."""
    try:
        return GlobalLogEvent.from_document(snapshot.key, snapshot.data)
    except ValidationError as e:
        logger.warning(f"Skipping malformed global event {snapshot.key}: {e.error_count()} errors")
        return None


class RecentWindowFinder:
    def __init__(self, store: DocumentStore, collection: str = None, window: int = None):
        self.store = store
        self.collection = collection or settings.GLOBAL_LOG_COLLECTION
        self.window = window or settings.RECENT_EVENTS_WINDOW

    def find_open_entry(self, reg_no: str) -> Optional[GlobalLogEvent]:
        recent = self.store.query(self.collection, order_by="timestamp", descending=True, limit=self.window)
        for snapshot in recent:
            event = _decode(snapshot)
            if event is not None and event.reg_no == reg_no and event.is_open_entry:
                return event
        logger.debug(f"No open entry for {reg_no} in the last {self.window} events")
        return None


class IndexedFinder:
    def __init__(self, store: DocumentStore, collection: str = None):
        self.store = store
        self.collection = collection or settings.GLOBAL_LOG_COLLECTION

    def find_open_entry(self, reg_no: str) -> Optional[GlobalLogEvent]:
        matches = self.store.query(
            self.collection,
            where=[("regNo", reg_no), ("action", Action.ENTRY.value), ("exit", None)],
            order_by="timestamp",
            descending=True,
            limit=1,
        )
        if not matches:
            return None
        return _decode(matches[0])


def make_open_entry_finder(store: DocumentStore, strategy: str = None):
    strategy = (strategy or settings.OPEN_ENTRY_STRATEGY).lower()
    if strategy == "window":
        return RecentWindowFinder(store)
    if strategy == "indexed":
        return IndexedFinder(store)
    raise ValueError(f"Unknown OPEN_ENTRY_STRATEGY '{strategy}' (expected window | indexed)")
