"""
cache.py

On-disk store for precomputed opening guesses.

One JSON file holds entries for any number of word banks, keyed by the bank's
content fingerprint and the number of openers asked for. Reads that fail for
any reason are treated as a miss; writes that fail are skipped.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .wordbank import fingerprint

DEFAULT_CACHE_PATH = "~/.cache/wordle-pool/openings.json"

FORMAT_VERSION = 1

LogFn = Callable[[str], None]


def _expand(p: str) -> Path:
    return Path(p).expanduser().resolve()


# different word lists (or a different k) get different cache entries
def opening_cache_key(word_bank: Sequence[str], k: int) -> str:
    return f"v{FORMAT_VERSION}|k={k}|bank={fingerprint(word_bank)}"


class OpeningCache:
    def __init__(self, path: str = DEFAULT_CACHE_PATH, *, log_debug: Optional[LogFn] = None):
        self.path = _expand(str(path))
        self._log_debug = log_debug

    def _dbg(self, msg: str) -> None:
        if self._log_debug is not None:
            self._log_debug(msg)

    def _read_all(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            self._dbg(f"cache: unreadable {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._dbg(f"cache: ignoring {self.path}, not a JSON object")
            return {}
        return data

    # load cached openers if available and well formed,
    # else return None
    def load(self, word_bank: Sequence[str], k: int) -> Optional[List[str]]:
        key = opening_cache_key(word_bank, k)
        entry = self._read_all().get(key)
        if not isinstance(entry, dict):
            self._dbg(f"cache: no entry for {key}")
            return None
        if entry.get("format_version") != FORMAT_VERSION:
            return None
        openings = entry.get("openings")
        if not isinstance(openings, list) or not all(isinstance(w, str) for w in openings):
            return None
        return openings

    def store(self, word_bank: Sequence[str], k: int, openings: Sequence[str]) -> None:
        key = opening_cache_key(word_bank, k)
        existing = self._read_all()
        existing[key] = {
            "format_version": FORMAT_VERSION,
            "openings": list(openings),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(existing, f, ensure_ascii=False, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
            self._dbg(f"cache: wrote {key} to {self.path}")
        except OSError as e:
            # cache is an optimization, if it fails, skip
            self._dbg(f"cache: write failed: {e}")
