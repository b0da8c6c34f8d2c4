"""Caller-owned memo of split results keyed by the raw input line."""

from __future__ import annotations

import logging
from collections import OrderedDict

from argline.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


class ParseCache:
    """Remember the words each raw line split into.

    Splitting is a pure function of the tokenizer config and the line, so
    entries never go stale as long as the cache is used with one tokenizer.
    ``maxsize`` of None keeps every entry; otherwise the least recently used
    entry is dropped once the cache is full.
    """

    def __init__(self, tokenizer: Tokenizer | None = None, maxsize: int | None = None) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self.tokenizer = tokenizer if tokenizer is not None else Tokenizer()
        self.maxsize = maxsize
        self._entries: OrderedDict[str, list[str]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, line: object) -> bool:
        return line in self._entries

    def split(self, line: str) -> list[str]:
        """Return the words of *line*, splitting it only on first sight.

        Parse errors propagate and are not cached. Callers get a copy, so
        mutating the result does not affect later lookups.
        """
        words = self._entries.get(line)
        if words is not None:
            self.hits += 1
            self._entries.move_to_end(line)
            return list(words)

        self.misses += 1
        words = self.tokenizer.split(line)
        self._entries[line] = words
        if self.maxsize is not None and len(self._entries) > self.maxsize:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted %r from parse cache", evicted)
        return list(words)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
