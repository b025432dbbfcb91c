from __future__ import annotations

from adapters.frames.manual_frame_scheduler import ManualFrameScheduler


def test_runs_requested_callbacks_once() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[int] = []

    scheduler.request_frame(lambda: calls.append(1))
    scheduler.request_frame(lambda: calls.append(2))

    assert scheduler.run_pending() == 2
    assert scheduler.run_pending() == 0
    assert calls == [1, 2]


def test_cancelled_callback_does_not_run() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[int] = []

    handle = scheduler.request_frame(lambda: calls.append(1))
    scheduler.cancel_frame(handle)
    scheduler.cancel_frame(handle)

    assert scheduler.run_pending() == 0
    assert calls == []


def test_callbacks_requested_during_a_tick_wait_for_the_next_one() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[str] = []

    def first() -> None:
        calls.append("first")
        scheduler.request_frame(lambda: calls.append("second"))

    scheduler.request_frame(first)
    scheduler.run_pending()
    assert calls == ["first"]
    scheduler.run_pending()
    assert calls == ["first", "second"]
