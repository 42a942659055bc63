# scheduling.py
"""
CPU scheduling simulator.

Every function here is pure: it reads the caller's process list, works on
its own copies, and returns newly built timelines and process records.
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence

import config
from models import InvalidQuantumError, Process, ScheduleResult, TimelineEntry

logger = logging.getLogger(__name__)


class SchedulingAlgorithm(str, Enum):
    """
    Scheduling disciplines offered by the selector.

    MLFQ is listed so the selector can offer it, but it has no
    implementation and runs as FCFS.
    """
    FCFS = "FCFS"
    SJF = "SJF"
    PRIORITY = "Priority"
    ROUND_ROBIN = "RoundRobin"
    MLFQ = "MLFQ"

    @classmethod
    def from_selector(cls, value) -> "SchedulingAlgorithm":
        """Resolve a selector value; anything unrecognised becomes FCFS."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for algo in cls:
            if text in (algo.value.lower(), algo.name.lower()):
                return algo
        logger.warning("Unknown scheduling algorithm %r, using FCFS", value)
        return cls.FCFS


TITLES = {
    SchedulingAlgorithm.FCFS: "First Come First Serve (FCFS)",
    SchedulingAlgorithm.SJF: "Shortest Job First (SJF)",
    SchedulingAlgorithm.PRIORITY: "Priority Scheduling",
    SchedulingAlgorithm.ROUND_ROBIN: "Round Robin",
    SchedulingAlgorithm.MLFQ: "Multi-Level Feedback Queue",
}


def validate_quantum(quantum) -> int:
    """
    Check a round-robin time quantum.

    Returns:
        int: The quantum as an int

    Raises:
        InvalidQuantumError: If quantum is not an integer >= 1
    """
    if isinstance(quantum, bool):
        raise InvalidQuantumError(f"Time quantum must be an integer, got {quantum!r}")
    try:
        value = int(quantum)
    except (TypeError, ValueError):
        raise InvalidQuantumError(f"Time quantum must be an integer, got {quantum!r}") from None
    if value != quantum and not isinstance(quantum, str):
        raise InvalidQuantumError(f"Time quantum must be an integer, got {quantum!r}")
    if value < 1:
        raise InvalidQuantumError(f"Time quantum must be at least 1, got {value}")
    return value


# -----------------------------
# Algorithms
# -----------------------------
def simulate_fcfs(processes: Sequence[Process]) -> List[TimelineEntry]:
    """Non-preemptive, in arrival order; equal arrivals keep list order."""
    clock = 0
    timeline = []

    for p in sorted(processes, key=lambda p: p.arrival_time):
        clock = max(clock, p.arrival_time)
        timeline.append(_entry(clock, p, p.burst_time, p.burst_time))
        clock += p.burst_time

    return timeline


def simulate_sjf(processes: Sequence[Process]) -> List[TimelineEntry]:
    """Non-preemptive shortest burst among arrived processes."""
    return _run_non_preemptive(processes, key=lambda p: p.burst_time)


def simulate_priority(processes: Sequence[Process]) -> List[TimelineEntry]:
    """Non-preemptive; lowest priority number among arrived processes runs next."""
    return _run_non_preemptive(processes, key=_priority_of)


def simulate_round_robin(processes: Sequence[Process], quantum: int) -> List[TimelineEntry]:
    """
    Preemptive time slicing with a fixed quantum.

    Arrived processes join the back of the ready queue in list order. A
    process that still needs CPU after its slice goes to the back of the
    queue right away, ahead of anything that arrives during the slice.
    """
    quantum = validate_quantum(quantum)
    pool = [_Job(p, p.burst_time) for p in processes]
    queue = deque()
    clock = 0
    timeline = []

    while pool or queue:
        arrived = [j for j in pool if j.process.arrival_time <= clock]
        if arrived:
            queue.extend(arrived)
            pool = [j for j in pool if j.process.arrival_time > clock]

        if not queue:
            # Idle CPU: nothing changes until the next arrival
            clock = min(j.process.arrival_time for j in pool)
            continue

        job = queue.popleft()
        execute_time = min(quantum, job.remaining)
        timeline.append(_entry(clock, job.process, job.remaining, execute_time))
        clock += execute_time
        job.remaining -= execute_time

        if job.remaining > 0:
            queue.append(job)

    return timeline


# -----------------------------
# Dispatcher
# -----------------------------
def simulate_schedule(processes: Sequence[Process], algorithm=SchedulingAlgorithm.FCFS,
                      quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    Run the selected algorithm and return its timeline.

    Args:
        processes: Process records, never modified
        algorithm: SchedulingAlgorithm or selector string
        quantum: Time slice, used (and required) by round robin only

    Returns:
        List[TimelineEntry]: Dispatches in time order, empty for no processes
    """
    algo = SchedulingAlgorithm.from_selector(algorithm)

    if algo is SchedulingAlgorithm.ROUND_ROBIN:
        if quantum is None:
            quantum = config.DEFAULT_QUANTUM
        timeline = simulate_round_robin(processes, quantum)
    elif algo in _DISPATCH:
        timeline = _DISPATCH[algo](processes)
    else:
        logger.warning("%s has no implementation, running FCFS", algo.value)
        timeline = simulate_fcfs(processes)

    logger.info("%s: %d processes -> %d timeline entries", algo.value, len(processes), len(timeline))
    return timeline


_DISPATCH = {
    SchedulingAlgorithm.FCFS: simulate_fcfs,
    SchedulingAlgorithm.SJF: simulate_sjf,
    SchedulingAlgorithm.PRIORITY: simulate_priority,
}


# -----------------------------
# Statistics
# -----------------------------
def compute_statistics(processes: Sequence[Process],
                       timeline: Sequence[TimelineEntry]) -> List[Process]:
    """
    Return copies of the processes with waiting and turnaround filled in.

    turnaround = completion - arrival, waiting = turnaround - burst.
    Processes that never appear in the timeline are copied unchanged.
    """
    completion: Dict[str, int] = {}
    for entry in timeline:
        completion[entry.process_id] = max(completion.get(entry.process_id, 0), entry.end)

    result = []
    for p in processes:
        if p.id not in completion:
            result.append(replace(p))
            continue
        turnaround = completion[p.id] - p.arrival_time
        result.append(replace(
            p,
            remaining_time=0,
            turnaround_time=turnaround,
            waiting_time=turnaround - p.burst_time,
        ))
    return result


def average_times(processes: Sequence[Process]):
    """Mean (waiting, turnaround) over the processes; (0.0, 0.0) when empty."""
    if not processes:
        return 0.0, 0.0
    n = len(processes)
    return (
        sum(p.waiting_time for p in processes) / n,
        sum(p.turnaround_time for p in processes) / n,
    )


def run_schedule(processes: Sequence[Process], algorithm=SchedulingAlgorithm.FCFS,
                 quantum: Optional[int] = None) -> ScheduleResult:
    """Simulate and collect timeline plus per-process statistics."""
    algo = SchedulingAlgorithm.from_selector(algorithm)
    if algo is SchedulingAlgorithm.ROUND_ROBIN and quantum is None:
        quantum = config.DEFAULT_QUANTUM

    timeline = simulate_schedule(processes, algo, quantum)
    stats = compute_statistics(processes, timeline)
    avg_wait, avg_tat = average_times(stats)

    return ScheduleResult(
        algorithm=algo.value,
        quantum=quantum if algo is SchedulingAlgorithm.ROUND_ROBIN else None,
        timeline=tuple(timeline),
        processes=tuple(stats),
        average_waiting_time=avg_wait,
        average_turnaround_time=avg_tat,
    )


# -----------------------------
# Helpers
# -----------------------------
@dataclass
class _Job:
    process: Process
    remaining: int


def _entry(clock, process, remaining, duration):
    logger.debug("t=%d dispatch %s (remaining=%d, runs %d)", clock, process.name, remaining, duration)
    return TimelineEntry(
        time=clock,
        process=process.name,
        remaining_time=remaining,
        process_id=process.id,
        duration=duration,
    )


def _priority_of(process):
    return process.priority if process.priority is not None else config.DEFAULT_PRIORITY


def _run_non_preemptive(processes, key):
    """
    Shared loop for SJF and priority: at each decision point pick the
    arrived process with the smallest key; ties go to the earliest in the
    list. Each pick runs to completion.
    """
    pool = list(processes)
    clock = 0
    timeline = []

    while pool:
        eligible = [p for p in pool if p.arrival_time <= clock]
        if not eligible:
            clock = min(p.arrival_time for p in pool)
            continue

        chosen = min(eligible, key=key)
        timeline.append(_entry(clock, chosen, chosen.burst_time, chosen.burst_time))
        clock += chosen.burst_time
        pool = [p for p in pool if p is not chosen]

    return timeline
