#!/usr/bin/env python3
"""
cli.py

Interactive helper: you play Wordle elsewhere, type each guess and the
feedback it got here, and it narrows down the answer and recommends the next
guess (the one that leaves the fewest candidates on average).

Feedback format:
- 5 chars of G (green), Y (yellow), X (gray), case-insensitive.
  B for gray and digits 2/1/0 work too. Example: "GYXXG"

Commands at the guess prompt:
- exit: quit
- next: start a new game with the full word bank

Usage:
  wordle-pool
  wordle-pool --words my_words.txt --workers 4
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .cache import DEFAULT_CACHE_PATH, OpeningCache
from .solver import (
    ALL_CORRECT,
    OPENING_COUNT,
    WORD_LENGTH,
    GuessRecommendation,
    LogFn,
    Pattern,
    filter_candidates,
    load_or_compute_openings,
    parse_pattern,
    select_best,
)
from .wordbank import load_default_words, load_words_from_file

ReadFn = Callable[[str], str]

SHOW_CANDIDATES = 20

GUESS_PROMPT = f"\nEnter your guess ({WORD_LENGTH} letters, or 'exit' to quit, or 'next' to start a new game): "
FEEDBACK_PROMPT = "Enter feedback (G=green, Y=yellow, X=gray, e.g. GYXXG): "


@dataclass(frozen=True)
class TurnOutcome:
    # "solved", "no_candidates", "found" or "continue"
    status: str
    candidates: List[str]
    recommendation: Optional[GuessRecommendation] = None


# apply one guess + feedback; shared by the line and rich front ends
def play_turn(
    word_bank: Sequence[str],
    candidates: Sequence[str],
    guess: str,
    pattern: Pattern,
    *,
    workers: Optional[int] = None,
    log: Optional[LogFn] = None,
) -> TurnOutcome:
    if pattern == ALL_CORRECT:
        return TurnOutcome("solved", [guess])

    narrowed = filter_candidates(guess, pattern, candidates)
    if log is not None:
        log(f"{guess} -> {len(narrowed)} candidate(s)")
    if not narrowed:
        return TurnOutcome("no_candidates", narrowed)
    if len(narrowed) == 1:
        return TurnOutcome("found", narrowed)
    rec = select_best(word_bank, narrowed, workers=workers, log=log)
    return TurnOutcome("continue", narrowed, rec)


def _is_terminal() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def describe(rec: GuessRecommendation) -> str:
    return "solution candidate" if rec.is_candidate else "information-gathering"


def _display_openings(openings: List[str], used_cache: bool, cache: Optional[OpeningCache]) -> None:
    print("Optimal starting words:")
    for i, w in enumerate(openings, start=1):
        print(f"{i}. {w}")
    if cache is not None:
        if used_cache:
            print(f"(Loaded from cache: {cache.path}.)")
        else:
            print(f"(Computed and cached to: {cache.path}.)")
    if openings:
        print(f"Suggested starting word: {openings[0]}")


def _display_candidates(candidates: List[str]) -> None:
    print(f"Possible candidates ({len(candidates)})")
    if candidates:
        print("  " + " ".join(candidates[:SHOW_CANDIDATES]) + (" ..." if len(candidates) > SHOW_CANDIDATES else ""))


def game_loop(
    word_bank: Sequence[str],
    *,
    read: Optional[ReadFn] = None,
    cache: Optional[OpeningCache] = None,
    top: int = OPENING_COUNT,
    workers: Optional[int] = None,
    log: Optional[LogFn] = None,
) -> None:
    """Run games until 'exit', end of input, or a game ends solved/unsolvable."""
    if read is None:
        read = input
    print(f"Loaded {len(word_bank)} words.")
    print("Computing optimal starting words, please wait...")
    openings, used_cache = load_or_compute_openings(
        word_bank, cache, top, workers=workers, show_progress=sys.stdout.isatty(), log=log
    )
    _display_openings(openings, used_cache, cache)

    candidates = list(word_bank)
    turn = 1
    while True:
        try:
            guess = read(GUESS_PROMPT).strip().upper()
        except EOFError:
            print("")
            break

        if guess == "EXIT":
            print("Exiting.")
            break
        if guess == "NEXT":
            candidates = list(word_bank)
            turn = 1
            print(f"New game started. Loaded {len(candidates)} words.")
            _display_openings(openings, True, cache)
            continue
        if len(guess) != WORD_LENGTH or not (guess.isascii() and guess.isalpha()):
            print(f"Invalid guess. Please enter {WORD_LENGTH} letters.")
            continue

        try:
            pattern = parse_pattern(read(FEEDBACK_PROMPT))
        except EOFError:
            print("")
            break
        except ValueError as e:
            print(f"Invalid feedback. {e}")
            continue

        if pattern == ALL_CORRECT:
            print(f"Solved in {turn} turn(s): {guess}")
            break

        print("Computing optimal guess, please wait...")
        outcome = play_turn(word_bank, candidates, guess, pattern, workers=workers, log=log)
        candidates = outcome.candidates
        _display_candidates(candidates)

        if outcome.status == "no_candidates":
            print("No candidates remain. Check your inputs.")
            print("Either the word list doesn't match the game's dictionary, or a feedback pattern was mistyped.")
            break
        if outcome.status == "found":
            print(f"Solution found: {candidates[0]}")
            break

        rec = outcome.recommendation
        print(f"Recommended guess: {rec.word} (expected pool size {rec.expected_pool_size:.2f}) [{describe(rec)}]")
        turn += 1


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Wordle helper minimizing the expected remaining candidates.")
    ap.add_argument("--words", type=str, default=None,
                    help=f"Path to a word list ({WORD_LENGTH}-letter words, one per line). Defaults to the bundled list.")
    ap.add_argument("--top", type=int, default=OPENING_COUNT, help="How many starting words to show.")
    ap.add_argument("--cache", type=str, default=DEFAULT_CACHE_PATH, help="Where to cache starting words.")
    ap.add_argument("--no-cache", action="store_true", help="Always recompute starting words.")
    ap.add_argument("--workers", type=int, default=None, help="Scoring processes (default: CPU count).")
    ap.add_argument("--ui", choices=["tui", "cli"], default="tui",
                    help="Colored board (tui) or plain prompts (cli). tui needs a terminal.")
    ap.add_argument("--verbose", action="store_true", help="Print detailed progress to the console.")
    ap.add_argument("--debug", action="store_true", help="Very verbose logs (cache reads and writes).")
    args = ap.parse_args(argv)

    if args.top < 1:
        print("--top must be at least 1.", file=sys.stderr)
        return 2

    verbose = bool(args.verbose or args.debug)
    debug = bool(args.debug)

    start_t = time.time()

    def log(msg: str) -> None:
        if not verbose:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] {msg}")

    def log_debug(msg: str) -> None:
        if not debug:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] DEBUG {msg}")

    if args.words:
        try:
            word_bank = load_words_from_file(args.words)
        except OSError as e:
            print(f"Failed to read word list: {e}", file=sys.stderr)
            return 1
    else:
        word_bank = load_default_words()

    if not word_bank:
        print(f"Loaded 0 usable words from {args.words}. Check the file.", file=sys.stderr)
        return 1

    cache = None if args.no_cache else OpeningCache(args.cache, log_debug=log_debug)

    if args.ui == "tui" and _is_terminal():
        # tui imports play_turn from this module
        from .tui import run_tui

        try:
            run_tui(word_bank, cache=cache, top=args.top, workers=args.workers, log=log)
            return 0
        except OSError as e:
            print(f"TUI error: {e}. Falling back to CLI mode.", file=sys.stderr)
            log(f"tui failed: {e!r}")

    print("\n=== Wordle Pool Solver ===")
    game_loop(word_bank, cache=cache, top=args.top, workers=args.workers, log=log)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
