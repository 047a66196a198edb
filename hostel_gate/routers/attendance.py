# hostel_gate/routers/attendance.py
"""Entry/exit actions for the student currently on the gate screen."""

from fastapi import APIRouter, Depends
from hostel_gate.dependencies import get_gate_session
from hostel_gate.schemas.gate import RecordOut
from hostel_gate.services.gate_session import GateSession, GateOutcome

router = APIRouter()


def _record_out(result, gate: GateSession) -> dict:
    if isinstance(result, GateOutcome):
        return {"status": result.value, "message": "A request is already in progress.", "gate": gate.snapshot()}
    return {
        "status": result.status.value,
        "action": result.action.value,
        "registration_no": result.registration_no,
        "event_key": result.event_key,
        "message": result.message,
        "haptic": gate.recorder.haptics.take(),
        "gate": gate.snapshot(),
    }


@router.post("/attendance/entry", response_model=RecordOut, summary="Mark entry")
async def mark_entry(gate: GateSession = Depends(get_gate_session)):
    return _record_out(await gate.mark_entry(), gate)


@router.post("/attendance/exit", response_model=RecordOut, summary="Mark exit")
async def mark_exit(gate: GateSession = Depends(get_gate_session)):
    return _record_out(await gate.mark_exit(), gate)
