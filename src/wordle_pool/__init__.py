"""Expected-pool-size Wordle solver."""

from .solver import (
    ALL_CORRECT,
    OPENING_COUNT,
    WORD_LENGTH,
    GuessRecommendation,
    InvalidArgumentError,
    InvalidStateError,
    Mark,
    Pattern,
    SolverError,
    compute_openings,
    evaluate,
    filter_candidates,
    format_pattern,
    load_or_compute_openings,
    parse_pattern,
    rank_guesses,
    score,
    select_best,
)
from .wordbank import fingerprint, load_default_words, load_words_from_file, load_words_from_string

__all__ = [
    "ALL_CORRECT",
    "OPENING_COUNT",
    "WORD_LENGTH",
    "GuessRecommendation",
    "InvalidArgumentError",
    "InvalidStateError",
    "Mark",
    "Pattern",
    "SolverError",
    "compute_openings",
    "evaluate",
    "filter_candidates",
    "fingerprint",
    "format_pattern",
    "load_default_words",
    "load_or_compute_openings",
    "load_words_from_file",
    "load_words_from_string",
    "parse_pattern",
    "rank_guesses",
    "score",
    "select_best",
]
