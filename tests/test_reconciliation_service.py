# tests/test_reconciliation_service.py
"""Unit tests for dual-write drift detection and repair."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from hostel_gate.schemas.student import Student
from hostel_gate.services.attendance_recorder import AttendanceRecorder
from hostel_gate.services.document_store import ArrayAppend
from hostel_gate.services.notification_service import NotificationFeed
from hostel_gate.services.open_entry_finder import RecentWindowFinder
from hostel_gate.services.reconciliation_service import reconcile_student
from hostel_gate.utils.time_utils import to_machine_timestamp
from tests.helpers import make_store, ticking_clock, add_global_event, STUDENTS, GLOBAL_LOG, START


def load_student(store, reg_no):
    snap = store.get(STUDENTS, reg_no)
    return Student.from_document(snap.key, snap.data)


def embedded(store, reg_no, action, moment):
    store.update(STUDENTS, reg_no, {"logs": ArrayAppend({
        "action": action, "time": "t", "timestamp": to_machine_timestamp(moment)})})


class TestReconciliation:
    @pytest.mark.asyncio
    async def test_unknown_student(self):
        assert await reconcile_student(make_store(), "ZZ999") is None

    @pytest.mark.asyncio
    async def test_clean_history_is_consistent(self):
        store = make_store(("AB123", "Asha", "CSE"))
        recorder = AttendanceRecorder(store, NotificationFeed(), finder=RecentWindowFinder(store),
                                      clock=ticking_clock())
        await recorder.record_entry(load_student(store, "AB123"))
        await recorder.record_exit(load_student(store, "AB123"))
        await recorder.record_entry(load_student(store, "AB123"))

        report = await reconcile_student(store, "AB123")
        assert report.consistent
        assert report.to_dict()["missing_entries"] == []

    @pytest.mark.asyncio
    async def test_missing_global_entry_detected_and_repaired(self):
        store = make_store(("AB123", "Asha", "CSE"))
        embedded(store, "AB123", "Entry", START)

        report = await reconcile_student(store, "AB123")
        assert not report.consistent
        assert [e.timestamp for e in report.missing_entries] == [to_machine_timestamp(START)]
        assert store.query(GLOBAL_LOG) == []          # detection alone writes nothing

        repaired = await reconcile_student(store, "AB123", repair=True)
        assert repaired.created_events == 1
        events = store.query(GLOBAL_LOG, where=[("regNo", "AB123")])
        assert len(events) == 1
        assert events[0].data["name"] == "Asha"
        assert events[0].data["exit"] is None
        assert (await reconcile_student(store, "AB123")).consistent

    @pytest.mark.asyncio
    async def test_orphan_exit_closes_preceding_open_entry(self):
        store = make_store(("AB123", "Asha", "CSE"))
        embedded(store, "AB123", "Entry", START)
        embedded(store, "AB123", "Exit", START + timedelta(hours=2))
        add_global_event(store, "AB123_a", "AB123", START, name="Asha")

        report = await reconcile_student(store, "AB123", repair=True)

        assert len(report.orphan_exits) == 1
        assert report.closed_events == 1
        event = store.get(GLOBAL_LOG, "AB123_a").data
        assert event["exitTimestamp"] == to_machine_timestamp(START + timedelta(hours=2))
        assert (await reconcile_student(store, "AB123")).consistent

    @pytest.mark.asyncio
    async def test_missing_entry_and_orphan_exit_together(self):
        store = make_store(("AB123", "Asha", "CSE"))
        embedded(store, "AB123", "Entry", START)
        embedded(store, "AB123", "Exit", START + timedelta(hours=1))

        report = await reconcile_student(store, "AB123", repair=True)

        assert report.created_events == 1
        assert report.closed_events == 1
        events = store.query(GLOBAL_LOG, where=[("regNo", "AB123")])
        assert events[0].data["exitTimestamp"] == to_machine_timestamp(START + timedelta(hours=1))

    @pytest.mark.asyncio
    async def test_orphan_exit_without_earlier_entry_is_left_alone(self):
        store = make_store(("AB123", "Asha", "CSE"))
        embedded(store, "AB123", "Exit", START)
        add_global_event(store, "AB123_later", "AB123", START + timedelta(hours=1), name="Asha")

        report = await reconcile_student(store, "AB123", repair=True)

        assert report.closed_events == 0
        assert store.get(GLOBAL_LOG, "AB123_later").data["exit"] is None

    @pytest.mark.asyncio
    async def test_recreated_entry_followed_by_another_entry_comes_back_closed(self):
        store = make_store(("AB123", "Asha", "CSE"))
        t1, t2, t3 = START, START + timedelta(hours=1), START + timedelta(hours=2)
        # t1 entry lost its global event; t2 entry / t3 exit were written normally
        embedded(store, "AB123", "Entry", t1)
        embedded(store, "AB123", "Entry", t2)
        embedded(store, "AB123", "Exit", t3)
        add_global_event(store, "AB123_t2", "AB123", t2, name="Asha", exit_at=t3)

        report = await reconcile_student(store, "AB123", repair=True)

        assert report.created_events == 1
        open_events = store.query(GLOBAL_LOG, where=[("regNo", "AB123"), ("exit", None)])
        assert open_events == []
        recreated = [s for s in store.query(GLOBAL_LOG, where=[("regNo", "AB123")])
                     if s.data["timestamp"] == to_machine_timestamp(t1)]
        assert recreated[0].data["exitTimestamp"] == to_machine_timestamp(t2)
        assert load_student(store, "AB123").session_state.value == "closed"
        assert (await reconcile_student(store, "AB123")).consistent
