from __future__ import annotations

import threading

import pytest

from gcpv_lynx.core.emitter import LaneRecord, RaceRecord
from gcpv_lynx.core.scheduler import PollingScheduler
from gcpv_lynx.core.snapshot import EMPTY_BODY, SnapshotStore, build_snapshot


def _record(name: str) -> RaceRecord:
    lane = LaneRecord(start_position=1, helmet_id=4, name="Alice Tremblay", affiliation_url="logos/.png")
    return RaceRecord(
        name=name,
        title=f"{name} - 500m   (100m)",
        event=name[:-1],
        heat=1,
        group=None,
        length=500,
        track=100,
        header_group="",
        header_length=500,
        lanes=(lane,),
    )


def test_store_is_empty_until_first_publish() -> None:
    store = SnapshotStore()
    assert store.current() is None
    assert store.body() == EMPTY_BODY


def test_publish_swaps_whole_snapshot() -> None:
    store = SnapshotStore()
    first = build_snapshot(7, [_record("1A")])
    second = build_snapshot(7, [_record("1A"), _record("2A")])

    store.publish(first)
    held = store.current()
    store.publish(second)

    assert held is first
    assert held.race_count == 1
    assert store.current() is second
    assert store.current().lane_count == 2
    assert store.body().startswith(b'[{"name":"1A"')


def test_snapshot_records_are_immutable() -> None:
    snapshot = build_snapshot(7, [_record("1A")])
    assert isinstance(snapshot.records, tuple)
    with pytest.raises(AttributeError):
        snapshot.records = ()  # type: ignore[misc]


def test_trigger_records_success_and_failure() -> None:
    outcomes = iter([None, RuntimeError("database locked")])

    def job() -> None:
        outcome = next(outcomes)
        if outcome is not None:
            raise outcome

    scheduler = PollingScheduler(job, interval=60)
    assert scheduler.trigger() is True
    assert scheduler.last_error is None
    assert scheduler.last_success_utc is not None

    assert scheduler.trigger() is True
    status = scheduler.status()
    assert status.runs == 2
    assert status.failures == 1
    assert status.last_error == "RuntimeError: database locked"


def test_overlapping_trigger_is_skipped() -> None:
    started = threading.Event()
    release = threading.Event()

    def slow_job() -> None:
        started.set()
        release.wait(5)

    scheduler = PollingScheduler(slow_job, interval=60)
    worker = threading.Thread(target=scheduler.trigger)
    worker.start()
    assert started.wait(5)

    assert scheduler.busy is True
    assert scheduler.trigger() is False
    release.set()
    worker.join(5)

    assert scheduler.busy is False
    assert scheduler.runs == 1
    assert scheduler.skipped == 1


def test_background_loop_runs_until_stopped() -> None:
    ran = threading.Event()
    scheduler = PollingScheduler(ran.set, interval=0.05)
    scheduler.start()
    try:
        assert ran.wait(5)
        assert scheduler.running is True
    finally:
        scheduler.stop(timeout=5)
    assert scheduler.running is False
    assert scheduler.runs >= 1


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PollingScheduler(lambda: None, interval=0)


def test_restart_after_timed_out_stop_keeps_a_single_loop() -> None:
    entered = threading.Event()
    release = threading.Event()

    def slow_job() -> None:
        entered.set()
        release.wait(5)

    scheduler = PollingScheduler(slow_job, interval=0.05)
    scheduler.start()
    try:
        assert entered.wait(5)
        first_thread = scheduler._thread
        scheduler.stop(timeout=0.05)
        assert scheduler.running is True

        scheduler.start()
        assert scheduler._thread is first_thread
    finally:
        release.set()
        scheduler.stop(timeout=5)
    assert scheduler.running is False
    assert scheduler._thread is None
