# hostel_gate/utils/time_utils.py
"""
Timestamp helpers.

Every log event carries two timestamps: a machine one (ISO-8601 UTC with
microseconds, so string order == time order in every store backend) and a
human-readable one shown on the gate screen.
"""

from datetime import datetime, timezone

DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_machine_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def to_display_time(moment: datetime) -> str:
    """Local wall-clock time, e.g. '19/10/2026, 14:03:22'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone().strftime(DISPLAY_FORMAT)


def parse_machine_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)
