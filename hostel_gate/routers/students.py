# hostel_gate/routers/students.py
"""Student lookup, embedded log view, and dual-write reconciliation."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from hostel_gate.config import settings
from hostel_gate.dependencies import get_store
from hostel_gate.exceptions import StoreError
from hostel_gate.schemas.log_event import ReconciliationOut
from hostel_gate.schemas.student import Student, StudentOut, StudentLogsOut
from hostel_gate.services.document_store import DocumentStore
from hostel_gate.services.identifier_resolver import normalize_identifier
from hostel_gate.services.reconciliation_service import reconcile_student
from hostel_gate.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _load_student(reg_no: str, store: DocumentStore) -> Student:
    reg_no = normalize_identifier(reg_no)
    try:
        snapshot = store.get(settings.STUDENTS_COLLECTION, reg_no)
    except StoreError as e:
        logger.error(f"Student fetch failed for {reg_no}: {e}")
        raise HTTPException(status_code=503, detail="Student store unavailable")
    if snapshot is None:
        raise HTTPException(status_code=404, detail=f"Student '{reg_no}' not found")
    try:
        return Student.from_document(snapshot.key, snapshot.data)
    except ValidationError as e:
        logger.error(f"Malformed student record {reg_no}: {e}")
        raise HTTPException(status_code=500, detail=f"Student '{reg_no}' record is malformed")


@router.get("/students/{reg_no}", response_model=StudentOut, summary="Look up a student")
def get_student(reg_no: str, store: DocumentStore = Depends(get_store)):
    student = _load_student(reg_no, store)
    return StudentOut(
        registration_no=student.registration_no,
        name=student.name,
        branch=student.branch,
        image_url=student.image_url,
        state=student.session_state,
    )


@router.get("/students/{reg_no}/logs", response_model=StudentLogsOut, summary="Embedded entry/exit log")
def get_student_logs(reg_no: str, store: DocumentStore = Depends(get_store)):
    student = _load_student(reg_no, store)
    return StudentLogsOut(registration_no=student.registration_no, state=student.session_state, logs=student.logs)


@router.post("/students/{reg_no}/reconcile", response_model=ReconciliationOut,
             summary="Compare embedded and global logs; optionally repair")
async def reconcile(reg_no: str, repair: bool = False, store: DocumentStore = Depends(get_store)):
    reg_no = normalize_identifier(reg_no)
    try:
        report = await reconcile_student(store, reg_no, repair=repair)
    except StoreError as e:
        logger.error(f"Reconciliation failed for {reg_no}: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Student store unavailable")
    if report is None:
        raise HTTPException(status_code=404, detail=f"Student '{reg_no}' not found")
    return report.to_dict()
