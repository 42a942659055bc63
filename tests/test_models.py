import pytest

from models import (PageFrame, Process, add_process, empty_frames, move_process, new_process,
                    remove_process, update_process)


def procs(*names):
    return [Process(id=n, name=n, color="red") for n in names]


def test_new_process_defaults():
    p = new_process(procs("P1", "P2"))
    assert p.name == "P3"
    assert (p.arrival_time, p.burst_time, p.priority, p.remaining_time) == (0, 4, 1, 4)
    assert p.color.startswith("hsl(")


def test_new_processes_get_unique_ids():
    items = []
    for _ in range(5):
        items = add_process(items)
    assert len({p.id for p in items}) == 5
    assert [p.name for p in items] == ["P1", "P2", "P3", "P4", "P5"]


def test_update_burst_resets_remaining_time():
    original = procs("A")
    original[0].remaining_time = 1
    updated = update_process(original, 0, "burst_time", "7")
    assert (updated[0].burst_time, updated[0].remaining_time) == (7, 7)
    assert original[0].burst_time == 4
    assert original[0].remaining_time == 1


@pytest.mark.parametrize("field_name,value", [
    ("burst_time", 0),
    ("burst_time", "abc"),
    ("arrival_time", -2),
    ("priority", ""),
])
def test_invalid_edits_are_ignored(field_name, value):
    original = procs("A")
    assert update_process(original, 0, field_name, value) == original


def test_update_name_and_priority():
    items = update_process(procs("A", "B"), 1, "name", "worker")
    items = update_process(items, 1, "priority", 5)
    assert (items[1].name, items[1].priority) == ("worker", 5)
    assert items[0].name == "A"


def test_update_rejects_unknown_field():
    with pytest.raises(KeyError):
        update_process(procs("A"), 0, "remaining_time", 2)


def test_move_and_remove():
    items = procs("A", "B", "C")
    assert [p.name for p in move_process(items, 0, 2)] == ["B", "C", "A"]
    assert [p.name for p in move_process(items, 2, 0)] == ["C", "A", "B"]
    assert [p.name for p in remove_process(items, 1)] == ["A", "C"]
    assert [p.name for p in items] == ["A", "B", "C"]


def test_empty_frames():
    frames = empty_frames(3)
    assert [f.id for f in frames] == ["0", "1", "2"]
    assert all(f.empty for f in frames)


def test_page_frame_is_immutable():
    frame = PageFrame("0", 3)
    with pytest.raises(AttributeError):
        frame.page = 4
