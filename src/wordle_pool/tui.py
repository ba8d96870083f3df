"""
tui.py

Board view of the helper, drawn with rich: every guess is a row of colored
tiles, the feedback you type is previewed on the board before it is applied,
and the recommendation sits in a panel under the board.

Falls back to the plain prompts in cli.py when it cannot run.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .cache import OpeningCache
from .cli import ReadFn, describe, play_turn
from .solver import OPENING_COUNT, WORD_LENGTH, LogFn, Mark, Pattern, load_or_compute_openings, parse_pattern

BOARD_ROWS = 6
SHOW_CANDIDATES = 20

TILE_STYLES = {
    None: "white on grey23",
    Mark.CORRECT: "bold black on green",
    Mark.PRESENT: "bold black on yellow",
    Mark.ABSENT: "white on grey50",
}


def guess_row(guess: str, pattern: Optional[Pattern] = None) -> Text:
    row = Text()
    for i in range(WORD_LENGTH):
        letter = guess[i] if i < len(guess) else " "
        mark = pattern[i] if pattern is not None else None
        row.append(f" {letter} ", style=TILE_STYLES[mark])
        row.append(" ")
    return row


def render_board(history: Sequence[Tuple[str, Pattern]], pending: Optional[Tuple[str, Optional[Pattern]]] = None) -> Table:
    board = Table.grid(padding=(0, 0))
    board.add_column()
    rows = [guess_row(g, p) for g, p in history]
    if pending is not None:
        rows.append(guess_row(*pending))
    for _ in range(max(0, BOARD_ROWS - len(rows))):
        rows.append(guess_row(""))
    for row in rows:
        board.add_row(row)
    return board


class TuiGame:
    def __init__(
        self,
        word_bank: Sequence[str],
        *,
        console: Optional[Console] = None,
        read: Optional[ReadFn] = None,
        cache: Optional[OpeningCache] = None,
        top: int = OPENING_COUNT,
        workers: Optional[int] = None,
        log: Optional[LogFn] = None,
    ):
        self.word_bank = list(word_bank)
        self.console = console if console is not None else Console()
        self.read = read if read is not None else self.console.input
        self.cache = cache
        self.top = top
        self.workers = workers
        self.log = log

        self.openings: List[str] = []
        self.history: List[Tuple[str, Pattern]] = []
        self.candidates: List[str] = list(self.word_bank)

    def _show_openings(self, used_cache: bool) -> None:
        lines = Text()
        for i, w in enumerate(self.openings, start=1):
            lines.append(f"{i}. ")
            lines.append(w, style="bold")
            lines.append("\n")
        if self.cache is not None:
            source = "Loaded from cache" if used_cache else "Computed and cached to"
            lines.append(f"({source}: {self.cache.path})", style="dim")
        self.console.print(Panel(lines, title="Optimal starting words", border_style="cyan"))

    def _show_candidates(self) -> None:
        shown = " ".join(self.candidates[:SHOW_CANDIDATES])
        more = " ..." if len(self.candidates) > SHOW_CANDIDATES else ""
        self.console.print(f"[cyan]Possible candidates ({len(self.candidates)})[/] {shown}{more}")

    def _new_game(self) -> None:
        self.history = []
        self.candidates = list(self.word_bank)

    def _read_guess(self) -> Optional[str]:
        """A valid guess, 'EXIT' or 'NEXT'."""
        while True:
            guess = self.read(f"Guess ({WORD_LENGTH} letters, 'next' for a new game, 'exit' to quit): ").strip().upper()
            if guess in ("EXIT", "NEXT"):
                return guess
            if len(guess) == WORD_LENGTH and guess.isascii() and guess.isalpha():
                return guess
            self.console.print(f"[red]Invalid guess. Please enter {WORD_LENGTH} letters.[/]")

    def _read_feedback(self, guess: str) -> Optional[Pattern]:
        """Feedback confirmed on the board preview, or None to re-enter the guess."""
        while True:
            text = self.read(f"Feedback for {guess} (G/Y/X per letter, 'back' to change the guess): ")
            if text.strip().lower() == "back":
                return None
            try:
                pattern = parse_pattern(text)
            except ValueError as e:
                self.console.print(f"[red]{escape(str(e))}[/]")
                continue
            self.console.print(render_board(self.history, (guess, pattern)))
            answer = self.read("Enter to confirm, 'e' to edit: ").strip().lower()
            if answer != "e":
                return pattern

    def _game_over(self) -> bool:
        """True when the player wants another game."""
        answer = self.read("Press 'n' for a new game, anything else to exit: ").strip().lower()
        return answer == "n"

    def run(self) -> None:
        self.console.rule("[bold cyan]Wordle Pool Solver")
        self.console.print(f"Loaded {len(self.word_bank)} words.")
        with self.console.status("Computing optimal starting words, please wait..."):
            self.openings, used_cache = load_or_compute_openings(
                self.word_bank, self.cache, self.top, workers=self.workers, log=self.log
            )
        self._show_openings(used_cache)
        self.console.print(render_board(self.history))

        while True:
            try:
                guess = self._read_guess()
                if guess == "EXIT":
                    break
                if guess == "NEXT":
                    self._new_game()
                    self.console.print(f"[cyan]New game started. Loaded {len(self.candidates)} words.[/]")
                    self._show_openings(True)
                    continue

                pattern = self._read_feedback(guess)
                if pattern is None:
                    continue

                with self.console.status("Computing optimal guess, please wait..."):
                    outcome = play_turn(
                        self.word_bank, self.candidates, guess, pattern, workers=self.workers, log=self.log
                    )
                self.history.append((guess, pattern))
                self.candidates = outcome.candidates
                self.console.print(render_board(self.history))

                if outcome.status == "continue":
                    self._show_candidates()
                    rec = outcome.recommendation
                    label = escape(f"[{describe(rec)}]")
                    self.console.print(Panel(
                        f"[bold]{rec.word}[/]  expected pool size {rec.expected_pool_size:.2f}  {label}",
                        title="Recommended guess",
                        border_style="yellow",
                    ))
                    continue

                if outcome.status == "solved":
                    self.console.print(f"[bold green]Solved in {len(self.history)} turn(s): {guess}[/]")
                elif outcome.status == "found":
                    self.console.print(f"[bold green]Solution found: {self.candidates[0]}[/]")
                else:
                    self.console.print("[red]No candidates remain. Check your inputs.[/]")

                if not self._game_over():
                    break
                self._new_game()
                self.console.print(f"[cyan]New game started. Loaded {len(self.candidates)} words.[/]")
                self._show_openings(True)
            except EOFError:
                break
        self.console.print("Exiting.")


def run_tui(
    word_bank: Sequence[str],
    *,
    console: Optional[Console] = None,
    read: Optional[ReadFn] = None,
    cache: Optional[OpeningCache] = None,
    top: int = OPENING_COUNT,
    workers: Optional[int] = None,
    log: Optional[LogFn] = None,
) -> None:
    TuiGame(word_bank, console=console, read=read, cache=cache, top=top, workers=workers, log=log).run()
