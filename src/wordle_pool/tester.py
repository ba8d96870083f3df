#!/usr/bin/env python3
"""tester.py

Plays the solver against every secret in a word list and checks how well the
expected pool size predicts what actually happens. For each turn it records
the pool size the recommendation promised, the pool size that was left
afterwards, and whether the recommended word could itself have been the answer.

Examples:
  wordle-pool-sim --limit 200
  wordle-pool-sim --words my_words.txt --max-turns 6 --plot results.png
"""

from __future__ import annotations

import argparse
import statistics
import sys
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import tqdm

from .cache import DEFAULT_CACHE_PATH, OpeningCache
from .solver import (
    ALL_CORRECT,
    GuessRecommendation,
    evaluate,
    filter_candidates,
    load_or_compute_openings,
    score,
    select_best,
)
from .wordbank import load_default_words, load_words_from_file


@dataclass(frozen=True)
class TurnRecord:
    guess: str
    pool_before: int
    expected_pool_size: float
    pool_after: int
    is_candidate: bool


@dataclass(frozen=True)
class GameResult:
    secret: str
    solved: bool
    turns: Tuple[TurnRecord, ...]

    @property
    def turn_count(self) -> int:
        return len(self.turns)


def _recommend(word_bank: Sequence[str], candidates: Sequence[str], opener: Optional[str], workers) -> GuessRecommendation:
    # the opener comes from the cache, so only its score needs computing
    if opener is not None:
        return GuessRecommendation(opener, score(opener, candidates), opener in set(candidates))
    return select_best(word_bank, candidates, workers=workers)


def simulate_game(
    *,
    secret: str,
    word_bank: Sequence[str],
    opener: Optional[str],
    max_turns: int,
    workers: Optional[int] = 1,
) -> GameResult:
    candidates = list(word_bank)
    records: List[TurnRecord] = []

    for turn in range(1, max_turns + 1):
        rec = _recommend(word_bank, candidates, opener if turn == 1 else None, workers)
        pattern = evaluate(rec.word, secret)
        solved = pattern == ALL_CORRECT
        narrowed = [rec.word] if solved else filter_candidates(rec.word, pattern, candidates)
        records.append(TurnRecord(
            guess=rec.word,
            pool_before=len(candidates),
            expected_pool_size=rec.expected_pool_size,
            pool_after=len(narrowed),
            is_candidate=rec.is_candidate,
        ))
        if solved:
            return GameResult(secret, True, tuple(records))
        candidates = narrowed
        if not candidates:
            break

    return GameResult(secret, False, tuple(records))


def per_turn_pool_sizes(results: Iterable[GameResult]) -> Dict[int, Tuple[float, float]]:
    """turn number -> (mean expected pool size, mean pool size actually left)"""
    expected: Dict[int, List[float]] = defaultdict(list)
    actual: Dict[int, List[int]] = defaultdict(list)
    for r in results:
        for n, t in enumerate(r.turns, start=1):
            expected[n].append(t.expected_pool_size)
            actual[n].append(t.pool_after)
    return {n: (statistics.mean(expected[n]), statistics.mean(actual[n])) for n in sorted(expected)}


def summarize(results: Iterable[GameResult]) -> str:
    results = list(results)
    if not results:
        return "No results."

    won = [r for r in results if r.solved]
    lost = [r for r in results if not r.solved]
    records = [t for r in results for t in r.turns]
    as_candidate = sum(1 for t in records if t.is_candidate)

    out = [f"Games: {len(results)}, solved {len(won)} ({100.0 * len(won) / len(results):.2f}%)"]
    if won:
        counts = [r.turn_count for r in won]
        histogram = Counter(counts)
        out.append(f"Turns when solved: mean {statistics.mean(counts):.3f}, worst {max(counts)}")
        out.append("  " + "  ".join(f"{n}:{histogram[n]}" for n in sorted(histogram)))

    out.append(f"Recommendations that could be the answer: {as_candidate}/{len(records)} "
               f"({100.0 * as_candidate / len(records):.1f}%)")
    out.append("Pool size by turn (expected -> actual):")
    for n, (exp, act) in per_turn_pool_sizes(results).items():
        out.append(f"  turn {n}: {exp:8.2f} -> {act:8.2f}")

    if lost:
        out.append("Unsolved: " + ", ".join(r.secret for r in lost[:10]) + (" ..." if len(lost) > 10 else ""))
    return "\n".join(out)


def plot_results(*, results: List[GameResult], out_path: str) -> None:
    # matplotlib is slow to import, load it only for --plot
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # noqa: E402

    by_turn = per_turn_pool_sizes(results)
    turns = list(by_turn)

    fig, (left, right) = plt.subplots(1, 2, figsize=(11, 4))

    histogram = Counter(r.turn_count for r in results if r.solved)
    unsolved = sum(1 for r in results if not r.solved)
    labels = [str(n) for n in sorted(histogram)] + (["unsolved"] if unsolved else [])
    heights = [histogram[n] for n in sorted(histogram)] + ([unsolved] if unsolved else [])
    left.bar(labels, heights, color=["C0"] * len(histogram) + ["C3"] * bool(unsolved))
    left.set_xlabel("Turns")
    left.set_ylabel("Games")
    left.set_title("Games by turns needed")

    right.plot(turns, [by_turn[n][0] for n in turns], marker="o", label="expected")
    right.plot(turns, [by_turn[n][1] for n in turns], marker="s", label="actual")
    right.set_yscale("log")
    right.set_xticks(turns)
    right.set_xlabel("Turn")
    right.set_ylabel("Candidates left (mean)")
    right.set_title("Pool size after each guess")
    right.legend()

    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def _load(path: str) -> List[str]:
    try:
        return load_words_from_file(path)
    except OSError as e:
        print(f"Failed to read word list: {e}", file=sys.stderr)
        return []


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Play the solver against known secrets and report pool sizes.")
    ap.add_argument("--words", type=str, default=None, help="Word list (defaults to the bundled list).")
    ap.add_argument("--secrets", type=str, default=None, help="Secrets to play (defaults to the word list).")
    ap.add_argument("--limit", type=int, default=0, help="Play at most this many secrets (0 = all).")
    ap.add_argument("--max-turns", type=int, default=6, help="Give up after this many guesses.")
    ap.add_argument("--workers", type=int, default=None, help="Scoring processes per guess (default: auto).")
    ap.add_argument("--cache", type=str, default=DEFAULT_CACHE_PATH, help="Where to cache the starting word.")
    ap.add_argument("--no-cache", action="store_true", help="Always recompute the starting word.")
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--plot", type=str, default=None, help="Write a chart to this path (e.g. results.png).")
    args = ap.parse_args(argv)

    word_bank = _load(args.words) if args.words else load_default_words()
    if not word_bank:
        print("No usable words in the word list.", file=sys.stderr)
        return 1

    secrets = _load(args.secrets) if args.secrets else list(word_bank)
    bank_set = set(word_bank)
    playable = [s for s in secrets if s in bank_set]
    if len(playable) < len(secrets):
        print(f"Skipping {len(secrets) - len(playable)} secret(s) not in the word list.")
    if args.limit > 0:
        playable = playable[: args.limit]
    if not playable:
        print("No secrets to play.", file=sys.stderr)
        return 1

    cache = None if args.no_cache else OpeningCache(args.cache)
    openings, _ = load_or_compute_openings(
        word_bank, cache, 1, workers=args.workers, show_progress=not args.no_progress
    )

    games = playable if args.no_progress else tqdm.tqdm(playable, desc="Playing", unit="game")
    results = [
        simulate_game(secret=s, word_bank=word_bank, opener=openings[0], max_turns=args.max_turns, workers=args.workers)
        for s in games
    ]
    print(summarize(results))

    if args.plot:
        plot_results(results=results, out_path=args.plot)
        print(f"Wrote plot: {args.plot}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
