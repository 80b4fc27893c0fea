from __future__ import annotations

import threading
import time

import pytest

from subcraw.crawler.phase import PhaseTracker


def test_enter_leave_cycle() -> None:
    phase = PhaseTracker("page")
    assert phase.is_idle()
    phase.enter()
    phase.enter()
    assert phase.in_flight == 2
    assert not phase.wait_idle(timeout=0.01)
    phase.leave()
    phase.leave()
    assert phase.is_idle()
    assert phase.wait_idle(timeout=0.01)
    assert phase.entered_total == 2


def test_leave_without_enter_raises() -> None:
    phase = PhaseTracker("product")
    with pytest.raises(RuntimeError):
        phase.leave()


def test_track_leaves_on_error() -> None:
    phase = PhaseTracker("product")
    with pytest.raises(ValueError):
        with phase.track():
            assert phase.in_flight == 1
            raise ValueError("boom")
    assert phase.is_idle()


def test_wait_idle_wakes_up_after_last_leave() -> None:
    phase = PhaseTracker("page")
    phase.enter()
    woke: list[bool] = []

    def waiter() -> None:
        woke.append(phase.wait_idle(timeout=5))

    thread = threading.Thread(target=waiter)
    thread.start()
    time.sleep(0.05)
    assert woke == []
    phase.leave()
    thread.join(timeout=5)
    assert woke == [True]


def test_max_in_flight_blocks_extra_enter() -> None:
    phase = PhaseTracker("page", max_in_flight=1)
    phase.enter()
    entered = threading.Event()

    def second() -> None:
        phase.enter()
        entered.set()

    thread = threading.Thread(target=second, daemon=True)
    thread.start()
    assert not entered.wait(0.05)
    phase.leave()
    assert entered.wait(5)
    assert phase.in_flight == 1
    phase.leave()


def test_max_in_flight_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PhaseTracker("page", max_in_flight=0)
