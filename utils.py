# utils.py

import random

HIT_COLOR = "lightgreen"
FAULT_COLOR = "salmon"
EMPTY_COLOR = "lightgray"


def get_color(rng=None):
    """Return a random saturated color for a process row."""
    rng = rng or random
    return f"hsl({rng.randint(0, 360)}, 70%, 50%)"


def step_color(is_hit):
    """Color for a page reference cell: green on hit, red on fault."""
    return HIT_COLOR if is_hit else FAULT_COLOR


def frame_label(frame):
    """Short label for a frame cell, e.g. 'F0: P3' or 'F1: Free'."""
    return f"F{frame.id}: " + (f"P{frame.page}" if frame.page is not None else "Free")


def process_rows(processes):
    """Rows for st.table showing a process list with its statistics."""
    return [
        {
            "name": p.name,
            "arrival": p.arrival_time,
            "burst": p.burst_time,
            "priority": p.priority,
            "waiting": p.waiting_time,
            "turnaround": p.turnaround_time,
        }
        for p in processes
    ]


def step_rows(history):
    """Rows for st.table: one row per reference with each frame's content."""
    rows = []
    for s in history:
        row = {"step": s.step + 1, "page": s.page, "result": "HIT" if s.is_hit else "FAULT"}
        for f in s.frames:
            row[f"F{f.id}"] = "" if f.page is None else f.page
        rows.append(row)
    return rows
