import pytest

from wordle_pool import compute_openings, score
from wordle_pool.tester import GameResult, TurnRecord, main, per_turn_pool_sizes, plot_results, simulate_game, summarize

BANK = ["CRANE", "SLATE", "RAISE", "STARE", "ARISE", "IRATE", "BRAIN", "FRAME", "CREEP", "LEVEL"]


def record(guess, before, expected, after, is_candidate=True):
    return TurnRecord(guess=guess, pool_before=before, expected_pool_size=expected, pool_after=after,
                      is_candidate=is_candidate)


def test_every_secret_is_solved():
    opener = compute_openings(BANK, 1)[0]
    for secret in BANK:
        result = simulate_game(secret=secret, word_bank=BANK, opener=opener, max_turns=len(BANK))
        assert result.solved
        assert result.turns[0].guess == opener
        assert result.turns[-1].guess == secret
        assert result.turns[-1].pool_after == 1


def test_turn_records_track_the_pool():
    opener = compute_openings(BANK, 1)[0]
    result = simulate_game(secret="LEVEL", word_bank=BANK, opener=opener, max_turns=len(BANK))
    first = result.turns[0]
    assert first.pool_before == len(BANK)
    assert first.expected_pool_size == pytest.approx(score(opener, BANK))
    assert first.is_candidate
    for prev, cur in zip(result.turns, result.turns[1:]):
        assert cur.pool_before == prev.pool_after
        assert cur.pool_before < prev.pool_before


def test_without_opener_first_guess_is_selected():
    result = simulate_game(secret="LEVEL", word_bank=BANK, opener=None, max_turns=len(BANK))
    assert result.solved
    assert result.turns[0].guess == compute_openings(BANK, 1)[0]


def test_turn_limit():
    result = simulate_game(secret="LEVEL", word_bank=BANK, opener="CRANE", max_turns=1)
    assert not result.solved
    assert result.turn_count == 1
    assert "LEVEL" not in [t.guess for t in result.turns]


def test_per_turn_pool_sizes():
    results = [
        GameResult("CRANE", True, (record("SLATE", 10, 3.0, 2), record("CRANE", 2, 1.0, 1))),
        GameResult("SLATE", True, (record("SLATE", 10, 3.0, 1),)),
    ]
    assert per_turn_pool_sizes(results) == {1: (3.0, 1.5), 2: (1.0, 1.0)}


def test_summarize():
    results = [
        GameResult("CRANE", True, (record("SLATE", 10, 3.0, 2), record("CRANE", 2, 1.0, 1))),
        GameResult("SLATE", True, (record("SLATE", 10, 3.0, 1),)),
        GameResult("LEVEL", False, (record("SLATE", 10, 3.0, 4), record("BRICK", 4, 1.5, 2, is_candidate=False))),
    ]
    text = summarize(results)
    assert "Games: 3, solved 2 (66.67%)" in text
    assert "mean 1.500, worst 2" in text
    assert "1:1  2:1" in text
    assert "Recommendations that could be the answer: 4/5 (80.0%)" in text
    assert "turn 1:" in text and "turn 2:" in text
    assert "Unsolved: LEVEL" in text
    assert "first guess" not in text
    assert summarize([]) == "No results."


def test_plot_results(tmp_path):
    results = [
        GameResult("CRANE", True, (record("SLATE", 10, 3.0, 2), record("CRANE", 2, 1.0, 1))),
        GameResult("LEVEL", False, (record("SLATE", 10, 3.0, 4),)),
    ]
    out = tmp_path / "results.png"
    plot_results(results=results, out_path=str(out))
    assert out.exists()


def test_main(tmp_path, capsys):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(BANK) + "\n", encoding="utf-8")
    rc = main(["--words", str(path), "--no-cache", "--no-progress", "--limit", "4"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Games: 4, solved 4" in out


def test_main_unreadable_secrets(tmp_path, capsys):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(BANK) + "\n", encoding="utf-8")
    rc = main(["--words", str(path), "--secrets", str(tmp_path / "missing.txt"), "--no-cache", "--no-progress"])
    assert rc == 1
    assert "Failed to read word list" in capsys.readouterr().err


def test_main_unreadable_words(tmp_path, capsys):
    assert main(["--words", str(tmp_path / "missing.txt"), "--no-cache", "--no-progress"]) == 1
