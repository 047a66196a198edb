# hostel_gate/routers/logs.py
"""Recent activity across all students, from the global log."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from hostel_gate.config import settings
from hostel_gate.dependencies import get_store
from hostel_gate.exceptions import StoreError
from hostel_gate.schemas.log_event import GlobalLogEvent, GlobalLogEventOut
from hostel_gate.services.document_store import DocumentStore
from hostel_gate.services.identifier_resolver import normalize_identifier

router = APIRouter()


@router.get("/logs", response_model=list[GlobalLogEventOut], summary="Recent entry/exit events")
def get_recent_logs(limit: int = Query(50, ge=1, le=500), reg_no: Optional[str] = None, open_only: bool = False,
                    store: DocumentStore = Depends(get_store)):
    """Newest first. Filter by registration number and/or still-open entries."""
    where = []
    if reg_no:
        where.append(("regNo", normalize_identifier(reg_no)))
    if open_only:
        where += [("action", "Entry"), ("exit", None)]
    try:
        snapshots = store.query(settings.GLOBAL_LOG_COLLECTION, where=where or None,
                                order_by="timestamp", descending=True, limit=limit)
    except StoreError:
        raise HTTPException(status_code=503, detail="Log store unavailable")
    events = [GlobalLogEvent.from_document(s.key, s.data) for s in snapshots]
    return [GlobalLogEventOut(**e.model_dump()) for e in events]
