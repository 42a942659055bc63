"""
Data model shared by the scheduling and page-replacement simulators.

Contains:
    - Process records and the session operations over a process list
    - PageFrame snapshots used by the page-replacement trace
    - Trace records (TimelineEntry, PageStep) and run results
    - Input validation errors raised at the simulator boundary
"""

# =============================================================================
# IMPORTS
# =============================================================================

import uuid
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union

import config
from utils import get_color


# =============================================================================
# ERRORS
# =============================================================================

class SimulationInputError(ValueError):
    """Base class for inputs a simulator refuses to run with."""


class InvalidQuantumError(SimulationInputError):
    """Round-robin time quantum is not a positive integer."""


class InvalidFrameCountError(SimulationInputError):
    """Frame count is outside the supported range."""


# =============================================================================
# PROCESSES
# =============================================================================

@dataclass
class Process:
    """
    One schedulable unit of work.

    Attributes:
        id (str): Unique identifier, stable for the session
        name (str): Display label, not required to be unique
        arrival_time (int): Time unit at which the process becomes eligible
        burst_time (int): Total CPU time required (positive)
        priority (Optional[int]): Lower number = higher priority
        remaining_time (int): CPU time still owed, 0 <= remaining <= burst
        waiting_time (int): Filled in after a simulation run
        turnaround_time (int): Filled in after a simulation run
        color (str): Display color for charts
    """
    id: str
    name: str
    arrival_time: int = config.DEFAULT_ARRIVAL_TIME
    burst_time: int = config.DEFAULT_BURST_TIME
    priority: Optional[int] = config.DEFAULT_PRIORITY
    remaining_time: Optional[int] = None
    waiting_time: int = 0
    turnaround_time: int = 0
    color: str = field(default_factory=get_color)

    def __post_init__(self):
        if self.remaining_time is None:
            self.remaining_time = self.burst_time


# Fields a user may edit from the process table
EDITABLE_FIELDS = ("name", "arrival_time", "burst_time", "priority")


def new_process(existing: List[Process]) -> Process:
    """Create a process with default timings, named after its list position."""
    return Process(id=uuid.uuid4().hex, name=f"P{len(existing) + 1}")


def add_process(processes: List[Process]) -> List[Process]:
    return [*processes, new_process(processes)]


def update_process(processes: List[Process], index: int, field_name: str,
                   value: Union[int, str]) -> List[Process]:
    """
    Return a new list with one field of one process edited.

    Numeric fields take ints or numeric strings. Values that do not parse,
    or that break a field's range (burst must be positive, arrival must not
    be negative), are ignored and the list comes back unchanged. Editing
    the burst time also resets the remaining time.

    Raises:
        KeyError: If field_name is not an editable field
    """
    if field_name not in EDITABLE_FIELDS:
        raise KeyError(f"Field '{field_name}' is not editable")

    updated = list(processes)
    current = updated[index]

    if field_name == "name":
        updated[index] = replace(current, name=str(value))
        return updated

    try:
        number = int(value)
    except (TypeError, ValueError):
        return updated

    if field_name == "burst_time":
        if number <= 0:
            return updated
        updated[index] = replace(current, burst_time=number, remaining_time=number)
    elif field_name == "arrival_time":
        if number < 0:
            return updated
        updated[index] = replace(current, arrival_time=number)
    else:
        updated[index] = replace(current, priority=number)
    return updated


def move_process(processes: List[Process], source: int, destination: int) -> List[Process]:
    """Move one process to a new position (manual reordering)."""
    items = list(processes)
    moved = items.pop(source)
    items.insert(destination, moved)
    return items


def remove_process(processes: List[Process], index: int) -> List[Process]:
    return [p for i, p in enumerate(processes) if i != index]


# =============================================================================
# PAGE FRAMES
# =============================================================================

@dataclass(frozen=True)
class PageFrame:
    """
    One physical memory slot at a single step of a page simulation.

    Frames are never edited in place; a new PageFrame replaces the old one
    in the frame array whenever its content changes.

    Attributes:
        id (str): Frame index as a string
        page (Optional[int]): Resident page, None if the frame is empty
        last_used (Optional[int]): Logical timestamp of last access (LRU)
        reference_bit (bool): Second-chance bit (clock policy)
    """
    id: str
    page: Optional[int] = None
    last_used: Optional[int] = None
    reference_bit: bool = False

    @property
    def empty(self) -> bool:
        return self.page is None

    def to_dict(self) -> dict:
        data = {"id": self.id, "page": self.page}
        if self.last_used is not None:
            data["lastUsed"] = self.last_used
        if self.reference_bit:
            data["referenceBit"] = True
        return data


def empty_frames(frame_count: int) -> List[PageFrame]:
    return [PageFrame(str(i)) for i in range(frame_count)]


# =============================================================================
# TRACE RECORDS
# =============================================================================

@dataclass(frozen=True)
class TimelineEntry:
    """
    One dispatch of a process onto the CPU.

    remaining_time is the CPU time the process still needed when it was
    dispatched; duration is how long it ran before leaving the CPU.
    """
    time: int
    process: str
    remaining_time: int
    process_id: str = ""
    duration: int = 0

    @property
    def end(self) -> int:
        return self.time + self.duration

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "process": self.process,
            "remainingTime": self.remaining_time,
            "processId": self.process_id,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class PageStep:
    """
    One processed page reference.

    Attributes:
        step (int): Zero-based index into the reference sequence
        frames (Tuple[PageFrame, ...]): Frame array after this reference
        is_hit (bool): True if the page was already resident
        page (int): The referenced page
        frame_index (Optional[int]): Frame that holds the page afterwards
        evicted (Optional[int]): Page removed to make room, if any
    """
    step: int
    frames: Tuple[PageFrame, ...]
    is_hit: bool
    page: int
    frame_index: Optional[int] = None
    evicted: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "frames": [f.to_dict() for f in self.frames],
            "isHit": self.is_hit,
            "page": self.page,
            "frameIndex": self.frame_index,
            "evicted": self.evicted,
        }


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    timeline: Tuple[TimelineEntry, ...]
    processes: Tuple[Process, ...]
    average_waiting_time: float
    average_turnaround_time: float


@dataclass(frozen=True)
class PageReplacementResult:
    """
    Full trace of a page-replacement run plus its summary.

    hit_rate is a percentage. It is 0.0 for an empty reference sequence,
    where the ratio is undefined.
    """
    policy: str
    frame_count: int
    history: Tuple[PageStep, ...]
    hits: int
    faults: int
    hit_rate: float

    @property
    def total_refs(self) -> int:
        return self.hits + self.faults

    def summary(self) -> dict:
        return {"hits": self.hits, "faults": self.faults, "hitRate": self.hit_rate}
