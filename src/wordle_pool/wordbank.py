"""
wordbank.py

Loading word lists. Words are normalized to uppercase; anything that is not
exactly WORD_LENGTH letters is dropped, as are repeats (first one wins).
"""

from __future__ import annotations

import hashlib
from importlib import resources
from typing import Iterable, List

from .solver import WORD_LENGTH


def _normalize(lines: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for line in lines:
        w = line.strip().upper()
        if len(w) != WORD_LENGTH or not (w.isascii() and w.isalpha()):
            continue
        # Deduplicate while keeping order
        if w not in seen:
            seen.add(w)
            out.append(w)
    return out


def load_words_from_string(data: str) -> List[str]:
    return _normalize(data.splitlines())


# load_words_from_file loads a list of 5-letter words from a file, one per line
def load_words_from_file(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return _normalize(f)


def load_default_words() -> List[str]:
    """The word bank shipped with the package (wordle_pool/data/wordbank.txt)."""
    text = resources.files("wordle_pool").joinpath("data/wordbank.txt").read_text(encoding="utf-8")
    return load_words_from_string(text)


# content hash of a word list, order included
# any change to the list gives a different identity
def fingerprint(words: Iterable[str]) -> str:
    payload = "\n".join(words).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()
