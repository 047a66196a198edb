# hostel_gate/services/gate_session.py
"""
State of one gate kiosk: what the scanner last read, what the operator typed,
which student is on screen, whether a request is in flight, camera paused or not.

Flow: on_scan / on_manual_input → IdentifierResolver → StudentLookup,
then mark_entry / mark_exit → AttendanceRecorder → reset on success.
"""

from enum import Enum
from typing import Optional
from hostel_gate.schemas.student import Action, Student
from hostel_gate.services.attendance_recorder import AttendanceRecorder, RecordResult, RecordStatus
from hostel_gate.services.identifier_resolver import IdentifierResolver
from hostel_gate.services.student_lookup import StudentLookup, LookupStatus
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)


class GateOutcome(str, Enum):
    IGNORED = "ignored"          # no lookup fired
    BUSY = "busy"                # another request in flight


class GateSession:
    def __init__(self, resolver: IdentifierResolver, lookup: StudentLookup, recorder: AttendanceRecorder):
        self.resolver = resolver
        self.lookup = lookup
        self.recorder = recorder
        self.scanned_input = ""
        self.manual_input = ""
        self.student: Optional[Student] = None
        self.loading = False
        self.camera_paused = False

    # ── Input ─────────────────────────────────────────────────────────────
    async def on_scan(self, payload: Optional[str], error: Optional[str] = None):
        """One decoded scanner frame. Frames without a payload are ignored."""
        if self.camera_paused:
            return GateOutcome.IGNORED
        if error or not payload:
            if error:
                logger.debug(f"Scanner frame without result: {error}")
            return GateOutcome.IGNORED
        self.scanned_input = payload
        return await self._resolve()

    async def on_manual_input(self, text: Optional[str]):
        self.manual_input = text or ""
        return await self._resolve()

    async def _resolve(self):
        reg_no = self.resolver.resolve(scanned=self.scanned_input, typed=self.manual_input)
        if reg_no is None:
            return GateOutcome.IGNORED
        self.student = None
        self.loading = True
        try:
            result = await self.lookup.lookup(reg_no)
        finally:
            self.loading = False
        if result.status == LookupStatus.ERROR:
            # Same card can be scanned again after a failed lookup
            self.resolver.reset()
        self.student = result.student
        return result

    # ── Actions ───────────────────────────────────────────────────────────
    async def mark_entry(self):
        return await self._record(Action.ENTRY)

    async def mark_exit(self):
        return await self._record(Action.EXIT)

    async def _record(self, action: Action):
        if self.loading:
            return GateOutcome.BUSY
        self.loading = True
        try:
            if action == Action.ENTRY:
                result: RecordResult = await self.recorder.record_entry(self.student)
            else:
                result = await self.recorder.record_exit(self.student)
        finally:
            self.loading = False
        if result.status == RecordStatus.RECORDED:
            self.reset()
        return result

    # ── Camera / reset ────────────────────────────────────────────────────
    def pause_camera(self):
        self.camera_paused = True

    def resume_camera(self):
        self.camera_paused = False

    def reset(self):
        self.scanned_input = ""
        self.manual_input = ""
        self.student = None
        self.resolver.reset()

    @property
    def actions_enabled(self) -> bool:
        return self.student is not None and not self.loading

    def snapshot(self) -> dict:
        student = None
        if self.student is not None:
            student = {
                "registration_no": self.student.registration_no,
                "name": self.student.name,
                "branch": self.student.branch,
                "image_url": self.student.image_url,
                "state": self.student.session_state.value,
            }
        return {
            "scanned_input": self.scanned_input,
            "manual_input": self.manual_input,
            "candidate": self.resolver.candidate(self.scanned_input, self.manual_input),
            "loading": self.loading,
            "camera_paused": self.camera_paused,
            "student": student,
            "actions_enabled": self.actions_enabled,
        }
