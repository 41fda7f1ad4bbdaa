"""Tests for Lane ordering, delays, pause/resume and run-loop lifecycle."""

import asyncio
import logging

import pytest

from overlayqueue.core.queue.lane import Lane, Priority, QueueElement


class StopRecorder:
    """Lane delegate that records on_stop notifications."""

    def __init__(self):
        self.stopped: list[Lane] = []

    def on_stop(self, lane: Lane) -> None:
        self.stopped.append(lane)


@pytest.mark.asyncio
async def test_burst_is_presented_in_priority_partition_order(recorder, wait_until):
    """Pushes inside one settle window pop as high ++ default ++ low, each in push order."""
    lane = Lane("burst")
    lane.push(recorder.element("low-1", Priority.LOW, auto_release=True))
    lane.push(recorder.element("default-1", auto_release=True))
    lane.push(recorder.element("high-1", Priority.HIGH, auto_release=True))
    lane.push(recorder.element("default-2", auto_release=True))
    lane.push(recorder.element("low-2", Priority.LOW, auto_release=True))
    lane.push(recorder.element("high-2", Priority.HIGH, auto_release=True))

    await wait_until(lambda: len(recorder.presented) == 6)

    assert recorder.presented == ["high-1", "high-2", "default-1", "default-2", "low-1", "low-2"]


@pytest.mark.asyncio
async def test_high_pushed_within_window_overtakes_default(recorder, wait_until):
    """A then B(high) inside the window: B presents first."""
    lane = Lane("window")
    lane.push(recorder.element("A"))
    lane.push(recorder.element("B", Priority.HIGH))

    await wait_until(lambda: recorder.presented == ["B"])
    recorder.release("B")
    await wait_until(lambda: recorder.presented == ["B", "A"])
    recorder.release("A")


@pytest.mark.asyncio
async def test_push_only_reorders_pending_elements(recorder, wait_until):
    """An element already popped is never affected by later pushes."""
    lane = Lane("popped")
    lane.push(recorder.element("A", Priority.LOW))
    await wait_until(lambda: recorder.presented == ["A"])

    lane.push(recorder.element("B", Priority.LOW))
    lane.push(recorder.element("C", Priority.HIGH))
    assert [e.priority for e in lane.pending] == [Priority.HIGH, Priority.LOW]
    assert recorder.presented == ["A"]

    recorder.release("A")
    await wait_until(lambda: recorder.presented == ["A", "C"])
    recorder.release("C")
    await wait_until(lambda: recorder.presented == ["A", "C", "B"])
    recorder.release("B")


@pytest.mark.asyncio
async def test_at_most_one_element_in_flight_under_concurrent_pushes():
    """Concurrent producers never get two elements presented at once in one lane."""
    lane = Lane("serial")
    loop = asyncio.get_running_loop()
    active = 0
    max_active = 0
    finished = 0

    def make_element() -> QueueElement:
        def present(release):
            nonlocal active, max_active

            def done():
                nonlocal active, finished
                active -= 1
                finished += 1
                release()

            active += 1
            max_active = max(max_active, active)
            loop.call_later(0.005, done)

        return QueueElement(present=present)

    async def producer(count: int) -> None:
        for _ in range(count):
            lane.push(make_element())
            await asyncio.sleep(0.002)

    await asyncio.gather(producer(4), producer(4), producer(4))
    deadline = loop.time() + 3.0
    while finished < 12 and loop.time() < deadline:
        await asyncio.sleep(0.01)

    assert finished == 12
    assert max_active == 1


@pytest.mark.asyncio
async def test_minimum_delay_is_applied_before_present(recorder, wait_until):
    """Lane minimum delay of 200ms holds back an element with no delay of its own."""
    lane = Lane("slow", minimum_delay_ms=200)
    pushed_at = asyncio.get_running_loop().time()
    lane.push(recorder.element("A", auto_release=True))

    await wait_until(lambda: recorder.presented == ["A"])

    assert recorder.present_times["A"] - pushed_at >= 0.195


@pytest.mark.asyncio
async def test_element_delay_wins_over_smaller_minimum(recorder, wait_until):
    lane = Lane("delayed", minimum_delay_ms=10)
    pushed_at = asyncio.get_running_loop().time()
    lane.push(recorder.element("A", delay_ms=100, auto_release=True))

    await wait_until(lambda: recorder.presented == ["A"])

    assert recorder.present_times["A"] - pushed_at >= 0.095


@pytest.mark.asyncio
async def test_paused_lane_does_not_start(recorder, wait_until):
    lane = Lane("paused")
    lane.pause()
    lane.push(recorder.element("A", auto_release=True))

    await asyncio.sleep(0.05)
    assert recorder.presented == []
    assert not lane.running

    lane.resume()
    await wait_until(lambda: recorder.presented == ["A"])


@pytest.mark.asyncio
async def test_pause_lets_current_element_finish(recorder, wait_until):
    """Pausing never interrupts the element on screen; clearing the flag alone does not wake the lane."""
    stops = StopRecorder()
    lane = Lane("pausing", delegate=stops)
    lane.push(recorder.element("A"))
    lane.push(recorder.element("B"))
    await wait_until(lambda: recorder.presented == ["A"])

    lane.pause()
    recorder.release("A")
    await wait_until(lambda: stops.stopped == [lane])

    assert not lane.running
    assert len(lane) == 1

    lane.paused = False
    await asyncio.sleep(0.05)
    assert recorder.presented == ["A"]

    lane.resume()
    await wait_until(lambda: recorder.presented == ["A", "B"])
    recorder.release("B")
    await wait_until(lambda: len(stops.stopped) == 2)


@pytest.mark.asyncio
async def test_resume_on_empty_lane_is_noop():
    stops = StopRecorder()
    lane = Lane("idle", delegate=stops)
    lane.pause()
    lane.resume()

    await asyncio.sleep(0.03)
    assert stops.stopped == []
    assert not lane.paused


@pytest.mark.asyncio
async def test_failing_presenter_is_skipped(recorder, wait_until, caplog):
    """An exception inside present is logged and the lane moves on."""

    def explode(release):
        raise RuntimeError("boom")

    lane = Lane("faulty")
    lane.push(QueueElement(present=explode, priority=Priority.HIGH))
    lane.push(recorder.element("after", auto_release=True))

    with caplog.at_level(logging.ERROR):
        await wait_until(lambda: recorder.presented == ["after"])

    assert "presenter failed" in caplog.text


@pytest.mark.asyncio
async def test_duplicate_release_is_ignored(recorder, wait_until):
    def present_twice(release):
        release()
        release()

    lane = Lane("dup")
    lane.push(QueueElement(present=present_twice))
    lane.push(recorder.element("next", auto_release=True))

    await wait_until(lambda: recorder.presented == ["next"])
    assert recorder.presented == ["next"]


@pytest.mark.asyncio
async def test_fire_on_empty_lane_does_not_notify():
    stops = StopRecorder()
    lane = Lane("empty", delegate=stops)

    await lane.fire()

    assert stops.stopped == []
    assert not lane.running


@pytest.mark.asyncio
async def test_fire_can_be_awaited_directly(recorder):
    """fire() drains the lane inline and reports the stop afterwards."""
    stops = StopRecorder()
    lane = Lane("inline", delegate=stops)
    lane.push(recorder.element("A", auto_release=True))
    lane.push(recorder.element("B", Priority.HIGH, auto_release=True))
    lane.close()

    await lane.fire()

    assert recorder.presented == ["B", "A"]
    assert lane.is_empty
    assert stops.stopped == [lane]


@pytest.mark.asyncio
async def test_close_cancels_pending_wake(recorder):
    lane = Lane("closed")
    lane.push(recorder.element("A", auto_release=True))
    lane.close()

    await asyncio.sleep(0.05)

    assert recorder.presented == []
    assert len(lane) == 1


@pytest.mark.asyncio
async def test_settle_window_is_configurable(recorder, wait_until):
    lane = Lane("settle", delay_before_firing_ms=80)
    pushed_at = asyncio.get_running_loop().time()
    lane.push(recorder.element("A", auto_release=True))

    await wait_until(lambda: recorder.presented == ["A"])

    assert recorder.present_times["A"] - pushed_at >= 0.075


def test_negative_delay_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        QueueElement(present=lambda release: None, delay_ms=-1)


def test_new_lane_defaults():
    lane = Lane("fresh")

    assert lane.is_empty
    assert not lane.running
    assert not lane.paused
    assert not lane.preserve_when_empty
    assert lane.minimum_delay_ms == 0
    assert lane.delay_before_firing_ms == 10
