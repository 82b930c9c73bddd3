from __future__ import annotations

import threading

import pytest

from scheduler import IntervalScheduler


def test_scheduler_invokes_callback_repeatedly() -> None:
    calls: list[int] = []
    done = threading.Event()

    def tick() -> None:
        calls.append(1)
        if len(calls) >= 2:
            done.set()

    scheduler = IntervalScheduler(tick, 0.01)
    scheduler.start()
    try:
        assert done.wait(timeout=2.0)
    finally:
        scheduler.stop()

    assert not scheduler.running


def test_scheduler_survives_failing_tick() -> None:
    attempts: list[int] = []
    recovered = threading.Event()

    def tick() -> None:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("cycle blew up")
        recovered.set()

    scheduler = IntervalScheduler(tick, 0.01)
    scheduler.start()
    try:
        assert recovered.wait(timeout=2.0)
    finally:
        scheduler.stop()


def test_start_is_idempotent() -> None:
    scheduler = IntervalScheduler(lambda: None, 60)
    scheduler.start()
    first_thread = scheduler._thread
    scheduler.start()
    try:
        assert scheduler._thread is first_thread
    finally:
        scheduler.stop()


def test_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        IntervalScheduler(lambda: None, 0)
