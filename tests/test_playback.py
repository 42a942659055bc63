import pytest

from models import TimelineEntry
from playback import Playback, start_playback

TIMELINE = [
    TimelineEntry(0, "A", 4, "a", 2),
    TimelineEntry(2, "B", 2, "b", 2),
    TimelineEntry(4, "A", 2, "a", 2),
]


def test_run_visits_every_entry_in_order():
    seen, sleeps = [], []
    pb = Playback(TIMELINE, interval=0.5)
    shown = pb.run(seen.append, sleep=sleeps.append)
    assert shown == 3
    assert seen == TIMELINE
    # no pause after the last entry
    assert sleeps == [0.5, 0.5]
    assert pb.finished
    assert pb.current_time == 4


def test_cancel_stops_playback():
    pb = Playback(TIMELINE, interval=0)
    seen = []

    def on_tick(entry):
        seen.append(entry)
        pb.cancel()

    assert pb.run(on_tick, sleep=lambda s: None) == 1
    assert pb.cancelled
    assert not pb.finished
    assert list(pb.ticks()) == []


def test_restart_replays_from_start():
    pb = Playback(TIMELINE, interval=0)
    list(pb.ticks())
    pb.restart()
    assert pb.cursor == 0
    assert pb.current is None
    assert pb.current_time == 0
    assert list(pb.ticks()) == TIMELINE


def test_empty_timeline_finishes_immediately():
    pb = Playback([], interval=0)
    assert pb.finished
    assert pb.run(lambda e: None, sleep=lambda s: None) == 0


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        Playback(TIMELINE, interval=-1)


def test_start_playback_cancels_previous():
    state = {}
    first = start_playback(state, TIMELINE, interval=0)
    second = start_playback(state, TIMELINE[:1], interval=0)
    assert first.cancelled
    assert not second.cancelled
    assert state["playback"] is second
    assert second.timeline == tuple(TIMELINE[:1])


def test_playback_does_not_touch_timeline():
    timeline = list(TIMELINE)
    pb = Playback(timeline, interval=0)
    pb.run(lambda e: None, sleep=lambda s: None)
    assert timeline == TIMELINE
