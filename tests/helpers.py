# tests/helpers.py
"""Shared builders for the gate tests."""

from datetime import datetime, timedelta, timezone
from hostel_gate.services.document_store import InMemoryDocumentStore
from hostel_gate.utils.time_utils import to_machine_timestamp

STUDENTS = "students"
GLOBAL_LOG = "allLogged"
START = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


def make_store(*students):
    """students: (reg_no, name, branch) tuples."""
    store = InMemoryDocumentStore()
    for reg_no, name, branch in students:
        store.set(STUDENTS, reg_no, {"name": name, "branch": branch, "imageUrl": None, "logs": []})
    return store


def ticking_clock(start=START, step=timedelta(seconds=1)):
    state = {"now": start}

    def clock():
        state["now"] += step
        return state["now"]
    return clock


def frozen_clock(moment=START):
    return lambda: moment


def add_global_event(store, key, reg_no, moment, action="Entry", name="Someone", exit_at=None):
    store.set(GLOBAL_LOG, key, {
        "name": name,
        "regNo": reg_no,
        "action": action,
        "time": moment.strftime("%d/%m/%Y, %H:%M:%S"),
        "timestamp": to_machine_timestamp(moment),
        "exit": exit_at.strftime("%d/%m/%Y, %H:%M:%S") if exit_at else None,
        "exitTimestamp": to_machine_timestamp(exit_at) if exit_at else None,
    })
