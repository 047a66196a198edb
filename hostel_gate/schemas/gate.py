# hostel_gate/schemas/gate.py
from pydantic import BaseModel
from typing import Optional


class ScanIn(BaseModel):
    payload: Optional[str] = None     # decoded QR/barcode text
    error: Optional[str] = None       # decoder error / no result for this frame


class ManualIn(BaseModel):
    text: str = ""


class GateStudentOut(BaseModel):
    registration_no: str
    name: str
    branch: str
    image_url: Optional[str]
    state: str


class GateStateOut(BaseModel):
    scanned_input: str
    manual_input: str
    candidate: str
    loading: bool
    camera_paused: bool
    student: Optional[GateStudentOut]
    actions_enabled: bool


class ResolveOut(BaseModel):
    outcome: str                      # ignored | found | not_found | error
    gate: GateStateOut


class RecordOut(BaseModel):
    status: str                       # recorded | no_student | no_open_entry | failed | partial_write | busy
    action: Optional[str] = None
    registration_no: Optional[str] = None
    event_key: Optional[str] = None
    message: str = ""
    haptic: Optional[list[int]] = None
    gate: GateStateOut


class NotificationOut(BaseModel):
    message: str
    severity: str
    position: str
    duration_ms: int
    created_at: str
