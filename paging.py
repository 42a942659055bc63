# paging.py
"""
Page replacement simulator.

Given a page reference sequence, a frame count and a policy, produce a
step-by-step trace of the frame array with hit/fault classification.
Each run allocates its own frame array; callers' sequences are only read.
"""

import logging
import re
from collections import defaultdict, deque
from dataclasses import replace
from enum import Enum
from typing import Dict, Iterable, List, Sequence

import config
from models import (InvalidFrameCountError, PageFrame, PageReplacementResult,
                    PageStep, empty_frames)

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[,\s]+")


class ReplacementPolicy(str, Enum):
    """
    Page replacement algorithms.

    FIFO:  First-In-First-Out - replaces the oldest loaded page
    LRU:   Least Recently Used - replaces the page unused for longest
    OPT:   Optimal - replaces the page needed furthest in the future
    CLOCK: Second chance - FIFO that skips recently referenced pages
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPT = "OPT"
    CLOCK = "Clock"

    @classmethod
    def from_selector(cls, value) -> "ReplacementPolicy":
        """Resolve a selector value; anything unrecognised becomes FIFO."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for policy in cls:
            if text in (policy.value.lower(), policy.name.lower()):
                return policy
        logger.warning("Unknown replacement policy %r, using FIFO", value)
        return cls.FIFO


TITLES = {
    ReplacementPolicy.FIFO: "First In First Out (FIFO)",
    ReplacementPolicy.LRU: "Least Recently Used (LRU)",
    ReplacementPolicy.OPT: "Optimal",
    ReplacementPolicy.CLOCK: "Clock",
}


# -----------------------------
# Boundary helpers
# -----------------------------
def parse_reference_string(text: str) -> List[int]:
    """
    Parse '1, 2 3,4' into [1, 2, 3, 4].

    Tokens are split on commas and whitespace. Anything that is not a
    non-negative integer is dropped without error.
    """
    pages = []
    for token in _TOKEN_SPLIT.split(text or ""):
        if not token:
            continue
        try:
            page = int(token)
        except ValueError:
            logger.debug("Dropping non-numeric token %r", token)
            continue
        if page < 0:
            logger.debug("Dropping negative page %r", token)
            continue
        pages.append(page)
    return pages


def validate_frame_count(frame_count) -> int:
    """
    Check a frame count against the supported range.

    Raises:
        InvalidFrameCountError: If not an integer in [MIN_FRAMES, MAX_FRAMES]
    """
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise InvalidFrameCountError(f"Frame count must be an integer, got {frame_count!r}")
    if not config.MIN_FRAMES <= frame_count <= config.MAX_FRAMES:
        raise InvalidFrameCountError(
            f"Frame count must be between {config.MIN_FRAMES} and {config.MAX_FRAMES}, got {frame_count}"
        )
    return frame_count


# -----------------------------
# Algorithms
# -----------------------------
def simulate_fifo(sequence: Sequence[int], frame_count: int) -> List[PageStep]:
    """
    Evict strictly in load order using a circular cursor.

    Hits do not move the cursor, so a heavily used page is evicted as
    soon as its turn comes. This is what produces Belady's anomaly.
    """
    frame_count = validate_frame_count(frame_count)
    frames = empty_frames(frame_count)
    cursor = 0
    history = []

    for step, page in enumerate(sequence):
        index = _find(frames, page)
        if index is not None:
            history.append(_step(step, frames, True, page, index))
            continue

        evicted = frames[cursor].page
        frames[cursor] = PageFrame(str(cursor), page)
        history.append(_step(step, frames, False, page, cursor, evicted))
        cursor = (cursor + 1) % frame_count

    return history


def simulate_lru(sequence: Sequence[int], frame_count: int) -> List[PageStep]:
    """
    Evict the frame with the oldest last_used stamp.

    The stamp counter advances once per reference. Empty frames are taken
    before any occupied one, and ties go to the lowest frame index.
    """
    frame_count = validate_frame_count(frame_count)
    frames = empty_frames(frame_count)
    counter = 0
    history = []

    for step, page in enumerate(sequence):
        counter += 1
        index = _find(frames, page)
        if index is not None:
            frames[index] = replace(frames[index], last_used=counter)
            history.append(_step(step, frames, True, page, index))
            continue

        victim = min(range(frame_count), key=lambda i: _lru_key(frames[i]))
        evicted = frames[victim].page
        frames[victim] = PageFrame(str(victim), page, last_used=counter)
        history.append(_step(step, frames, False, page, victim, evicted))

    return history


def simulate_optimal(sequence: Sequence[int], frame_count: int) -> List[PageStep]:
    """
    Evict the resident page whose next use is furthest away.

    Pages never referenced again count as infinitely far. Ties go to the
    lowest frame index.
    """
    frame_count = validate_frame_count(frame_count)
    frames = empty_frames(frame_count)
    history = []

    future: Dict[int, deque] = defaultdict(deque)
    for position, page in enumerate(sequence):
        future[page].append(position)

    for step, page in enumerate(sequence):
        future[page].popleft()
        index = _find(frames, page)
        if index is not None:
            history.append(_step(step, frames, True, page, index))
            continue

        victim = _first_empty(frames)
        if victim is None:
            victim = max(range(frame_count), key=lambda i: (_next_use(future, frames[i].page), -i))
        evicted = frames[victim].page
        frames[victim] = PageFrame(str(victim), page)
        history.append(_step(step, frames, False, page, victim, evicted))

    return history


def simulate_clock(sequence: Sequence[int], frame_count: int) -> List[PageStep]:
    """
    Second-chance replacement.

    A hit sets the frame's reference bit. On a fault with no empty frame,
    the hand sweeps forward clearing set bits and replaces the first frame
    whose bit is already clear, then moves one past it.
    """
    frame_count = validate_frame_count(frame_count)
    frames = empty_frames(frame_count)
    hand = 0
    history = []

    for step, page in enumerate(sequence):
        index = _find(frames, page)
        if index is not None:
            frames[index] = replace(frames[index], reference_bit=True)
            history.append(_step(step, frames, True, page, index))
            continue

        victim = _first_empty(frames)
        if victim is None:
            while frames[hand].reference_bit:
                frames[hand] = replace(frames[hand], reference_bit=False)
                hand = (hand + 1) % frame_count
            victim = hand
            hand = (hand + 1) % frame_count
        evicted = frames[victim].page
        frames[victim] = PageFrame(str(victim), page, reference_bit=True)
        history.append(_step(step, frames, False, page, victim, evicted))

    return history


# -----------------------------
# Dispatcher
# -----------------------------
_DISPATCH = {
    ReplacementPolicy.FIFO: simulate_fifo,
    ReplacementPolicy.LRU: simulate_lru,
    ReplacementPolicy.OPT: simulate_optimal,
    ReplacementPolicy.CLOCK: simulate_clock,
}


def simulate_page_replacement(sequence: Sequence[int],
                              frame_count: int = config.DEFAULT_FRAME_COUNT,
                              policy=ReplacementPolicy.FIFO) -> PageReplacementResult:
    """
    Run one policy over a reference sequence.

    Args:
        sequence: Page numbers, already parsed
        frame_count: Number of frames, 1 to 10
        policy: ReplacementPolicy or selector string; unknown values run FIFO

    Returns:
        PageReplacementResult: Trace plus hits, faults and hit rate (percent,
        0.0 when the sequence is empty)
    """
    chosen = ReplacementPolicy.from_selector(policy)
    history = _DISPATCH.get(chosen, simulate_fifo)(list(sequence), frame_count)

    hits = sum(1 for s in history if s.is_hit)
    faults = len(history) - hits
    hit_rate = (hits / len(history) * 100) if history else 0.0

    logger.info("%s with %d frames: %d refs, %d hits, %d faults",
                chosen.value, frame_count, len(history), hits, faults)

    return PageReplacementResult(
        policy=chosen.value,
        frame_count=frame_count,
        history=tuple(history),
        hits=hits,
        faults=faults,
        hit_rate=hit_rate,
    )


def fault_counts(sequence: Sequence[int], policy=ReplacementPolicy.FIFO,
                 frame_counts: Iterable[int] = range(config.MIN_FRAMES, config.MAX_FRAMES + 1)) -> Dict[int, int]:
    """Fault count per frame count, for plotting Belady's anomaly."""
    return {n: simulate_page_replacement(sequence, n, policy).faults for n in frame_counts}


def describe_step(step: PageStep) -> List[str]:
    """Event log lines for one reference."""
    if step.is_hit:
        return [f"Hit: Page {step.page} in Frame {step.frame_index}"]

    events = [f"Fault: Page {step.page} not in memory"]
    if step.evicted is not None:
        events.append(f"Evicting: Page {step.evicted} from Frame {step.frame_index}")
        events.append(f"Loaded: Page {step.page} -> Frame {step.frame_index} (replaced)")
    else:
        events.append(f"Loaded: Page {step.page} -> Frame {step.frame_index}")
    return events


# -----------------------------
# Helpers
# -----------------------------
def _find(frames, page):
    for i, f in enumerate(frames):
        if f.page == page:
            return i
    return None


def _first_empty(frames):
    return next((i for i, f in enumerate(frames) if f.empty), None)


def _lru_key(frame):
    return -1 if frame.empty else frame.last_used


def _next_use(future, page):
    upcoming = future.get(page)
    return upcoming[0] if upcoming else float("inf")


def _step(step, frames, is_hit, page, frame_index, evicted=None):
    logger.debug("step %d page %d %s frame=%s", step, page, "HIT" if is_hit else "FAULT", frame_index)
    return PageStep(
        step=step,
        frames=tuple(frames),
        is_hit=is_hit,
        page=page,
        frame_index=frame_index,
        evicted=evicted,
    )
