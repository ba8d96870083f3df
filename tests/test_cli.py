import pytest

from wordle_pool.cache import OpeningCache
from wordle_pool import parse_pattern
from wordle_pool.cli import game_loop, main, play_turn

BANK = ["CRANE", "SLATE", "RAISE"]
MINI_BANK = ["RAISE", "ROUND", "RATIO", "RADIO", "RAPID"]


def reader(*lines):
    pending = list(lines)

    def read(prompt=""):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


def run(capsys, bank, *lines, **kwargs):
    game_loop(bank, read=reader(*lines), **kwargs)
    return capsys.readouterr().out


def test_immediate_exit(capsys):
    out = run(capsys, BANK, "exit")
    assert "Optimal starting words:" in out
    assert "Suggested starting word:" in out
    assert "Exiting." in out


def test_end_of_input_exits(capsys):
    out = run(capsys, BANK)
    assert "Optimal starting words:" in out


def test_invalid_guess(capsys):
    out = run(capsys, BANK, "abc", "exit")
    assert "Invalid guess." in out


@pytest.mark.parametrize("feedback", ["INVALID", "GGG"])
def test_invalid_feedback(capsys, feedback):
    out = run(capsys, BANK, "CRANE", feedback, "exit")
    assert "Invalid feedback." in out
    assert "Exiting." in out


def test_new_game(capsys):
    out = run(capsys, BANK, "next", "exit")
    assert "New game started. Loaded 3 words." in out


def test_win_case_insensitive(capsys):
    out = run(capsys, BANK, "crane", "ggggg")
    assert "Solved in 1 turn(s): CRANE" in out


def test_narrowing_to_solution(capsys):
    out = run(capsys, BANK + ["STARE"], "CRANE", "XXGXG")
    assert "Possible candidates (1)" in out
    assert "Solution found: SLATE" in out


def test_no_candidates_remain(capsys):
    out = run(capsys, ["CRANE", "SLATE"], "CRANE", "XXXXX")
    assert "No candidates remain." in out


def test_recommendation(capsys):
    out = run(capsys, MINI_BANK, "RAISE", "GGYXX", "exit")
    assert "Possible candidates (3)" in out
    assert "Recommended guess: RATIO (expected pool size 1.00) [solution candidate]" in out


def test_openings_cached_between_runs(capsys, tmp_path):
    cache = OpeningCache(str(tmp_path / "openings.json"))
    first = run(capsys, BANK, "exit", cache=cache)
    assert "(Computed and cached to:" in first
    second = run(capsys, BANK, "exit", cache=cache)
    assert "(Loaded from cache:" in second


def test_main_missing_word_file(tmp_path, capsys):
    assert main(["--words", str(tmp_path / "nope.txt"), "--no-cache"]) == 1


def test_main_empty_word_file(tmp_path, capsys):
    path = tmp_path / "words.txt"
    path.write_text("toolong\nab\n", encoding="utf-8")
    assert main(["--words", str(path), "--no-cache"]) == 1


def test_main_rejects_bad_top(capsys):
    assert main(["--top", "0"]) == 2


def test_main_runs_game(tmp_path, capsys, monkeypatch):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(MINI_BANK) + "\n", encoding="utf-8")
    monkeypatch.setattr("builtins.input", reader("exit"))
    rc = main(["--words", str(path), "--cache", str(tmp_path / "openings.json"), "--verbose"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Loaded 5 words." in out
    assert "openings: cache miss" in out
    assert (tmp_path / "openings.json").exists()


def test_play_turn_statuses():
    assert play_turn(BANK, BANK, "CRANE", parse_pattern("GGGGG")).status == "solved"
    assert play_turn(["CRANE", "SLATE"], ["CRANE", "SLATE"], "CRANE", parse_pattern("XXXXX")).status == "no_candidates"
    found = play_turn(BANK + ["STARE"], BANK + ["STARE"], "CRANE", parse_pattern("XXGXG"))
    assert found.status == "found"
    assert found.candidates == ["SLATE"]
    more = play_turn(MINI_BANK, MINI_BANK, "RAISE", parse_pattern("GGYXX"))
    assert more.status == "continue"
    assert more.candidates == ["RATIO", "RADIO", "RAPID"]
    assert more.recommendation.word == "RATIO"


def test_main_cli_mode_skips_board(tmp_path, capsys, monkeypatch):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(BANK) + "\n", encoding="utf-8")
    monkeypatch.setattr("wordle_pool.cli._is_terminal", lambda: True)
    monkeypatch.setattr("wordle_pool.tui.run_tui", lambda *a, **kw: pytest.fail("board view used"))
    monkeypatch.setattr("builtins.input", reader("exit"))
    assert main(["--words", str(path), "--no-cache", "--ui", "cli"]) == 0
    assert "=== Wordle Pool Solver ===" in capsys.readouterr().out


def test_main_falls_back_when_board_fails(tmp_path, capsys, monkeypatch):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(BANK) + "\n", encoding="utf-8")

    def broken(*args, **kwargs):
        raise OSError("no terminal")

    monkeypatch.setattr("wordle_pool.cli._is_terminal", lambda: True)
    monkeypatch.setattr("wordle_pool.tui.run_tui", broken)
    monkeypatch.setattr("builtins.input", reader("exit"))
    assert main(["--words", str(path), "--no-cache"]) == 0
    captured = capsys.readouterr()
    assert "Falling back to CLI mode" in captured.err
    assert "Exiting." in captured.out
