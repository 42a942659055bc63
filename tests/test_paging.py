import random

import pytest

from models import InvalidFrameCountError
from paging import (ReplacementPolicy, describe_step, fault_counts, parse_reference_string,
                    simulate_clock, simulate_fifo, simulate_lru, simulate_optimal,
                    simulate_page_replacement, validate_frame_count)

BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
TEXTBOOK = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2, 1, 2, 0, 1, 7, 0, 1]


def pages(step):
    return [f.page for f in step.frames]


# -----------------------------
# Parsing
# -----------------------------
def test_parse_splits_on_commas_and_whitespace():
    assert parse_reference_string("1, 2 3,4\n5\t6") == [1, 2, 3, 4, 5, 6]


def test_parse_drops_invalid_tokens():
    assert parse_reference_string("1,,x, -4, 5.5 6, ") == [1, 6]


def test_parse_empty():
    assert parse_reference_string("") == []
    assert parse_reference_string("   ") == []
    assert parse_reference_string(None) == []


# -----------------------------
# FIFO
# -----------------------------
def test_fifo_evicts_in_insertion_order():
    history = simulate_fifo([1, 2, 3, 4], 3)
    assert [s.is_hit for s in history] == [False] * 4
    assert history[3].evicted == 1
    assert pages(history[3]) == [4, 2, 3]


def test_fifo_hit_does_not_protect_page():
    history = simulate_fifo([1, 2, 3, 1, 4], 3)
    assert history[3].is_hit
    assert history[4].evicted == 1


def test_fifo_belady_anomaly():
    assert simulate_page_replacement(BELADY, 3, "FIFO").faults == 9
    assert simulate_page_replacement(BELADY, 4, "FIFO").faults == 10
    assert fault_counts(BELADY, ReplacementPolicy.FIFO, [3, 4]) == {3: 9, 4: 10}


def test_fifo_textbook_faults():
    assert simulate_page_replacement(TEXTBOOK, 3, "FIFO").faults == 15


# -----------------------------
# LRU
# -----------------------------
def test_lru_evicts_least_recently_used():
    history = simulate_lru([1, 2, 1, 3], 2)
    assert history[2].is_hit
    assert history[3].evicted == 2
    assert pages(history[3]) == [1, 3]


def test_lru_fills_empty_frames_first_in_order():
    history = simulate_lru([5, 6, 7], 3)
    assert pages(history[-1]) == [5, 6, 7]
    assert [f.last_used for f in history[-1].frames] == [1, 2, 3]


def test_lru_snapshots_are_not_changed_by_later_hits():
    history = simulate_lru([1, 1], 1)
    assert history[0].frames[0].last_used == 1
    assert history[1].frames[0].last_used == 2


def test_lru_textbook_faults():
    assert simulate_page_replacement(TEXTBOOK, 3, "LRU").faults == 12


# -----------------------------
# Optimal / Clock
# -----------------------------
def test_optimal_evicts_page_not_needed_again():
    history = simulate_optimal([1, 2, 3, 1], 2)
    assert history[2].evicted == 2
    assert history[3].is_hit


def test_optimal_textbook_faults():
    assert simulate_page_replacement(TEXTBOOK, 3, "OPT").faults == 9


def test_clock_gives_referenced_page_second_chance():
    seq = [1, 2, 3, 4, 2, 5]
    clock = simulate_clock(seq, 3)
    assert clock[3].evicted == 1
    assert clock[5].evicted == 3
    assert pages(clock[5]) == [4, 2, 5]

    fifo = simulate_fifo(seq, 3)
    assert fifo[5].evicted == 2


def test_optimal_never_worse_than_others():
    rng = random.Random(7)
    for _ in range(20):
        seq = [rng.randint(0, 6) for _ in range(30)]
        for frames in (1, 2, 3, 4):
            best = simulate_page_replacement(seq, frames, "OPT").faults
            for policy in ("FIFO", "LRU", "Clock"):
                assert best <= simulate_page_replacement(seq, frames, policy).faults


# -----------------------------
# Shared properties
# -----------------------------
@pytest.mark.parametrize("policy", list(ReplacementPolicy))
def test_hits_plus_faults_is_sequence_length(policy):
    rng = random.Random(42)
    for _ in range(10):
        seq = [rng.randint(0, 9) for _ in range(rng.randint(0, 40))]
        frames = rng.randint(1, 10)
        result = simulate_page_replacement(seq, frames, policy)
        assert result.hits + result.faults == len(seq)
        assert result.faults <= len(seq)
        assert len(result.history) == len(seq)
        assert all(len(s.frames) == frames for s in result.history)


@pytest.mark.parametrize("policy", list(ReplacementPolicy))
def test_empty_sequence(policy):
    result = simulate_page_replacement([], 3, policy)
    assert result.history == ()
    assert (result.hits, result.faults, result.hit_rate) == (0, 0, 0.0)


def test_hit_rate_is_percentage():
    result = simulate_page_replacement([1, 1, 1, 2], 2, "LRU")
    assert result.hit_rate == 50.0
    assert result.summary() == {"hits": 2, "faults": 2, "hitRate": 50.0}


def test_unknown_policy_falls_back_to_fifo():
    fallback = simulate_page_replacement(BELADY, 3, "nonsense")
    assert fallback.policy == "FIFO"
    assert fallback.history == simulate_page_replacement(BELADY, 3, "FIFO").history


def test_input_sequence_not_mutated():
    seq = [3, 1, 3, 2]
    simulate_page_replacement(seq, 2, "OPT")
    assert seq == [3, 1, 3, 2]


@pytest.mark.parametrize("bad", [0, 11, -1, "3", 2.0, True])
def test_invalid_frame_count(bad):
    with pytest.raises(InvalidFrameCountError):
        validate_frame_count(bad)
    with pytest.raises(InvalidFrameCountError):
        simulate_page_replacement([1, 2], bad, "FIFO")


def test_describe_step():
    history = simulate_fifo([1, 1, 2, 3], 2)
    assert describe_step(history[0]) == ["Fault: Page 1 not in memory", "Loaded: Page 1 -> Frame 0"]
    assert describe_step(history[1]) == ["Hit: Page 1 in Frame 0"]
    assert describe_step(history[3]) == [
        "Fault: Page 3 not in memory",
        "Evicting: Page 1 from Frame 0",
        "Loaded: Page 3 -> Frame 0 (replaced)",
    ]


def test_step_wire_shape():
    step = simulate_lru([4], 2)[0]
    assert step.to_dict() == {
        "step": 0,
        "frames": [{"id": "0", "page": 4, "lastUsed": 1}, {"id": "1", "page": None}],
        "isHit": False,
        "page": 4,
        "frameIndex": 0,
        "evicted": None,
    }
