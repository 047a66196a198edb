# hostel_gate/routers/health.py
"""
System health check endpoint.
Returns status of backend + document store.
"""

from fastapi import APIRouter, Depends
from datetime import datetime
from hostel_gate.config import settings
from hostel_gate.dependencies import get_store
from hostel_gate.exceptions import StoreError
from hostel_gate.services.document_store import DocumentStore

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(store: DocumentStore = Depends(get_store)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "open_entry_strategy": settings.OPEN_ENTRY_STRATEGY,
    }

    try:
        store.ping()
        result["database"] = "ok"
    except StoreError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
