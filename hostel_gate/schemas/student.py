# hostel_gate/schemas/student.py
"""
Student record as stored in the `students` collection.
Field aliases are the stored (camelCase) document names.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


class Action(str, Enum):
    ENTRY = "Entry"
    EXIT = "Exit"


class SessionState(str, Enum):
    OPEN = "open"       # inside the hostel
    CLOSED = "closed"   # outside, or never scanned


class LogEntry(BaseModel):
    action: Action
    time: str           # display time
    timestamp: str      # ISO-8601 UTC

    class Config:
        use_enum_values = True


class Student(BaseModel):
    registration_no: str
    name: str
    branch: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    logs: list[LogEntry] = []

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, key: str, data: dict) -> "Student":
        return cls(registration_no=key, **data)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"registration_no"}, mode="json")

    @property
    def session_state(self) -> SessionState:
        """Open if the last embedded log element is an entry."""
        if self.logs and self.logs[-1].action == Action.ENTRY.value:
            return SessionState.OPEN
        return SessionState.CLOSED


class StudentOut(BaseModel):
    registration_no: str
    name: str
    branch: str
    image_url: Optional[str]
    state: SessionState


class StudentLogsOut(BaseModel):
    registration_no: str
    state: SessionState
    logs: list[LogEntry]


class StudentCreate(BaseModel):
    registration_no: str
    name: str
    branch: str
    image_url: Optional[str] = None
