# hostel_gate/schemas/log_event.py
"""Global log event as stored in the `allLogged` collection."""

from pydantic import BaseModel, Field
from typing import Optional


class GlobalLogEvent(BaseModel):
    key: Optional[str] = None
    name: str
    reg_no: str = Field(alias="regNo")
    action: str
    time: str
    timestamp: str
    exit: Optional[str] = None
    exit_timestamp: Optional[str] = Field(default=None, alias="exitTimestamp")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, key: str, data: dict) -> "GlobalLogEvent":
        return cls(key=key, **data)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"key"})

    @property
    def is_open_entry(self) -> bool:
        return self.action == "Entry" and self.exit is None


class GlobalLogEventOut(BaseModel):
    key: str
    name: str
    reg_no: str
    action: str
    time: str
    timestamp: str
    exit: Optional[str]
    exit_timestamp: Optional[str]


class ReconciliationOut(BaseModel):
    registration_no: str
    missing_entries: list[str]      # embedded Entry timestamps with no global event
    orphan_exits: list[str]         # embedded Exit timestamps not closing any global event
    created_events: int
    closed_events: int
    consistent: bool
