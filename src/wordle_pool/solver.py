"""
solver.py

Guess evaluation and candidate filtering for the expected-pool-size strategy.

A guess is scored by the expected number of candidates left after seeing its
feedback, assuming every remaining candidate is equally likely to be the answer:

    score(g) = sum over patterns p of count[p]^2 / total

Lower is better. Scoring every guess against every candidate is the expensive
part, so the scan is split across a multiprocessing pool.
"""

from __future__ import annotations

import heapq
import multiprocessing as mp
import os
import re
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import tqdm


WORD_LENGTH = 5
OPENING_COUNT = 5

# scans with fewer (guess, candidate) pairs than this stay in-process
PARALLEL_MIN_WORK = 250_000

LogFn = Callable[[str], None]


class SolverError(Exception):
    """Base class for solver failures."""


class InvalidArgumentError(SolverError, ValueError):
    """Caller passed something the solver cannot work with."""


class InvalidStateError(SolverError, RuntimeError):
    """Scoring was asked for with no candidates left."""


class Mark(IntEnum):
    ABSENT = 0
    PRESENT = 1
    CORRECT = 2


Pattern = Tuple[Mark, ...]

ALL_CORRECT: Pattern = (Mark.CORRECT,) * WORD_LENGTH

_SYMBOLS = {
    "g": Mark.CORRECT,
    "2": Mark.CORRECT,
    "y": Mark.PRESENT,
    "1": Mark.PRESENT,
    "x": Mark.ABSENT,
    "b": Mark.ABSENT,
    "0": Mark.ABSENT,
}
_RENDER = {Mark.CORRECT: "G", Mark.PRESENT: "Y", Mark.ABSENT: "X"}


@dataclass(frozen=True)
class GuessRecommendation:
    word: str
    expected_pool_size: float
    is_candidate: bool


# parse_pattern converts a string like 'GYXXG', 'gybbg' or '21002' into a Pattern tuple
def parse_pattern(s: str) -> Pattern:
    s = s.strip().lower()
    if re.fullmatch(rf"[gyxb012]{{{WORD_LENGTH}}}", s):
        return tuple(_SYMBOLS[ch] for ch in s)
    raise ValueError(
        f"Feedback must be {WORD_LENGTH} chars of G (green), Y (yellow), X (gray), "
        "or digits 2/1/0. Example: GYXXG"
    )


def format_pattern(pattern: Sequence[Mark]) -> str:
    return "".join(_RENDER[m] for m in pattern)


def _check_word(word: str, what: str) -> None:
    if len(word) != WORD_LENGTH:
        raise InvalidArgumentError(f"{what} must be {WORD_LENGTH} letters, got {word!r}")


# compute feedback for guess against a hypothetical solution
def evaluate(guess: str, solution: str) -> Pattern:
    """
    Greens first, each one consuming that letter of the solution. Yellows are
    then handed out left to right, only while unconsumed copies of the letter
    remain, so repeated letters in the guess are never double counted.
    """
    _check_word(guess, "guess")
    _check_word(solution, "solution")

    res = [Mark.ABSENT] * WORD_LENGTH
    remaining = Counter()

    for i, (g_ch, s_ch) in enumerate(zip(guess, solution)):
        if g_ch == s_ch:
            res[i] = Mark.CORRECT
        else:
            remaining[s_ch] += 1

    for i, g_ch in enumerate(guess):
        if res[i] is Mark.ABSENT and remaining[g_ch] > 0:
            res[i] = Mark.PRESENT
            remaining[g_ch] -= 1

    return tuple(res)


def _bucket_sizes(guess: str, remaining: Iterable[str]) -> Dict[Pattern, int]:
    buckets: Dict[Pattern, int] = Counter()
    for solution in remaining:
        buckets[evaluate(guess, solution)] += 1
    return buckets


def _sum_of_squares(guess: str, remaining: Sequence[str]) -> int:
    return sum(c * c for c in _bucket_sizes(guess, remaining).values())


# expected size of the candidate pool after guessing `guess`
def score(guess: str, remaining: Sequence[str]) -> float:
    total = len(remaining)
    if total == 0:
        raise InvalidStateError("cannot score a guess against zero candidates")
    return _sum_of_squares(guess, remaining) / total


# keep only the candidates that would have produced the observed feedback
def filter_candidates(guess: str, observed: Sequence[Mark], remaining: Iterable[str]) -> List[str]:
    _check_word(guess, "guess")
    if len(observed) != WORD_LENGTH:
        raise InvalidArgumentError(f"feedback must have {WORD_LENGTH} marks, got {len(observed)}")
    observed = tuple(Mark(m) for m in observed)
    return [w for w in remaining if evaluate(guess, w) == observed]


# --- k-best scan -------------------------------------------------------------

# (sum of squared bucket sizes, not a candidate, position in universe)
# unique per guess, so sequential and parallel scans agree exactly
_RankKey = Tuple[int, int, int]

_WORKER_STATE: dict = {}


def _scan_chunk(
    universe: Sequence[str],
    start: int,
    end: int,
    remaining: Sequence[str],
    remaining_set: frozenset,
    k: int,
) -> List[_RankKey]:
    keys = (
        (_sum_of_squares(universe[i], remaining), 0 if universe[i] in remaining_set else 1, i)
        for i in range(start, end)
    )
    return heapq.nsmallest(k, keys)


def _init_worker(universe, remaining, k):
    _WORKER_STATE["universe"] = universe
    _WORKER_STATE["remaining"] = remaining
    _WORKER_STATE["remaining_set"] = frozenset(remaining)
    _WORKER_STATE["k"] = k


def _worker_chunk(task: Tuple[int, int]) -> List[_RankKey]:
    start, end = task
    return _scan_chunk(
        _WORKER_STATE["universe"],
        start,
        end,
        _WORKER_STATE["remaining"],
        _WORKER_STATE["remaining_set"],
        _WORKER_STATE["k"],
    )


def _resolve_workers(workers: Optional[int], work: int) -> int:
    if workers is None:
        if work < PARALLEL_MIN_WORK:
            return 1
        workers = os.cpu_count() or 1
    return max(1, int(workers))


def rank_guesses(
    universe: Sequence[str],
    remaining: Sequence[str],
    k: int = 1,
    *,
    workers: Optional[int] = None,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> List[GuessRecommendation]:
    """
    Score every word in `universe` against `remaining` and return the k best,
    ascending by expected pool size.

    Ties go to a guess that is itself a remaining candidate, then to the guess
    that comes first in `universe`.
    """
    universe = tuple(universe)
    remaining = tuple(remaining)
    if not universe:
        raise InvalidArgumentError("guess universe is empty")
    if not remaining:
        raise InvalidArgumentError("candidate set is empty")
    if k < 1:
        raise InvalidArgumentError(f"k must be at least 1, got {k}")

    n = len(universe)
    workers = _resolve_workers(workers, n * len(remaining))

    if workers == 1:
        if log is not None:
            log(f"scan: {n} guesses x {len(remaining)} candidates, in-process")
        remaining_set = frozenset(remaining)
        keys: List[_RankKey] = []
        iterator = tqdm.tqdm(range(n), desc="Scoring guesses", unit="word") if show_progress else range(n)
        for i in iterator:
            g = universe[i]
            keys.append((_sum_of_squares(g, remaining), 0 if g in remaining_set else 1, i))
        best = heapq.nsmallest(k, keys)
    else:
        # about four chunks per worker
        chunk_size = max(1, -(-n // (workers * 4)))
        tasks = [(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]
        if log is not None:
            log(
                f"scan: {n} guesses x {len(remaining)} candidates, "
                f"{workers} worker(s), {len(tasks)} chunk(s)"
            )

        start_methods = mp.get_all_start_methods()
        ctx = mp.get_context("fork" if "fork" in start_methods else "spawn")
        merged: List[_RankKey] = []
        with ctx.Pool(
            processes=workers,
            initializer=_init_worker,
            initargs=(universe, remaining, k),
        ) as pool:
            results = pool.imap_unordered(_worker_chunk, tasks)
            if show_progress:
                results = tqdm.tqdm(results, total=len(tasks), desc="Scoring guesses", unit="chunk")
            for local_best in results:
                merged.extend(local_best)
        best = heapq.nsmallest(k, merged)

    total = len(remaining)
    return [
        GuessRecommendation(
            word=universe[i],
            expected_pool_size=sum_sq / total,
            is_candidate=(not_candidate == 0),
        )
        for sum_sq, not_candidate, i in best
    ]


def select_best(
    universe: Sequence[str],
    remaining: Sequence[str],
    *,
    workers: Optional[int] = None,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> GuessRecommendation:
    return rank_guesses(
        universe, remaining, 1, workers=workers, show_progress=show_progress, log=log
    )[0]


# --- opening guesses ---------------------------------------------------------

def compute_openings(
    word_bank: Sequence[str],
    k: int = OPENING_COUNT,
    *,
    cached: Optional[Sequence[str]] = None,
    workers: Optional[int] = None,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> List[str]:
    """Best k opening guesses: the whole bank is both guess universe and candidate set."""
    if cached is not None:
        return list(cached)
    ranked = rank_guesses(
        word_bank, word_bank, k, workers=workers, show_progress=show_progress, log=log
    )
    return [r.word for r in ranked]


def _valid_openings(openings, word_bank: Sequence[str], k: int) -> bool:
    if not isinstance(openings, list) or not all(isinstance(w, str) for w in openings):
        return False
    if len(openings) != min(k, len(word_bank)) or len(set(openings)) != len(openings):
        return False
    return set(openings) <= set(word_bank)


def load_or_compute_openings(
    word_bank: Sequence[str],
    cache=None,
    k: int = OPENING_COUNT,
    *,
    workers: Optional[int] = None,
    show_progress: bool = False,
    log: Optional[LogFn] = None,
) -> Tuple[List[str], bool]:
    """
    Ask `cache` (anything with `load(word_bank, k)` and `store(word_bank, k, words)`)
    for openers of this word bank first, compute and store them on a miss.

    Returns (openings, used_cache).
    """
    if cache is not None:
        cached = cache.load(word_bank, k)
        if cached is not None and _valid_openings(cached, word_bank, k):
            if log is not None:
                log("openings: cache hit")
            return compute_openings(word_bank, k, cached=cached), True
        if log is not None:
            log("openings: cache miss" if cached is None else "openings: cached entry invalid, recomputing")

    openings = compute_openings(word_bank, k, workers=workers, show_progress=show_progress, log=log)
    if cache is not None:
        cache.store(word_bank, k, openings)
    return openings, False
