# hostel_gate/routers/scan.py
"""
Identifier input endpoints.
POST /scan          — one decoded frame from the gate camera
POST /scan/manual   — operator-typed registration number (wins over the scan)
POST /scanner/pause | /scanner/resume — camera toggle, manual entry unaffected
GET  /gate          — what the gate screen should show right now
"""

from fastapi import APIRouter, Depends
from hostel_gate.dependencies import get_gate_session
from hostel_gate.schemas.gate import ScanIn, ManualIn, GateStateOut, ResolveOut
from hostel_gate.services.gate_session import GateSession, GateOutcome
from hostel_gate.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _resolve_out(result, gate: GateSession) -> dict:
    outcome = result.value if isinstance(result, GateOutcome) else result.status.value
    return {"outcome": outcome, "gate": gate.snapshot()}


@router.post("/scan", response_model=ResolveOut, summary="Scanner frame")
async def scan(body: ScanIn, gate: GateSession = Depends(get_gate_session)):
    result = await gate.on_scan(body.payload, body.error)
    return _resolve_out(result, gate)


@router.post("/scan/manual", response_model=ResolveOut, summary="Manual registration number")
async def manual_entry(body: ManualIn, gate: GateSession = Depends(get_gate_session)):
    result = await gate.on_manual_input(body.text)
    return _resolve_out(result, gate)


@router.post("/scanner/pause", response_model=GateStateOut, summary="Pause camera input")
def pause_scanner(gate: GateSession = Depends(get_gate_session)):
    gate.pause_camera()
    logger.info("Camera input paused")
    return gate.snapshot()


@router.post("/scanner/resume", response_model=GateStateOut, summary="Resume camera input")
def resume_scanner(gate: GateSession = Depends(get_gate_session)):
    gate.resume_camera()
    logger.info("Camera input resumed")
    return gate.snapshot()


@router.get("/gate", response_model=GateStateOut, summary="Current gate screen state")
def gate_state(gate: GateSession = Depends(get_gate_session)):
    return gate.snapshot()


@router.post("/gate/reset", response_model=GateStateOut, summary="Clear the gate screen")
def reset_gate(gate: GateSession = Depends(get_gate_session)):
    gate.reset()
    return gate.snapshot()
