"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from argline.config import Bracket, BlockCommentDelims, ParseMode, ParserConfig
from argline.parsed_line import ParsedLine
from argline.tokenizer import Tokenizer


@pytest.fixture
def words():
    """Return a helper that splits a line with default config in the given mode."""

    def _words(line: str, mode: ParseMode = ParseMode.ACCEPT_LINE, **config) -> list[str]:
        return list(Tokenizer(ParserConfig(**config)).parse(line, -1, mode).words)

    return _words


@pytest.fixture
def complete():
    """Return a helper that parses for completion with the cursor at *cursor* (default: end)."""

    def _complete(line: str, cursor: int | None = None, **config) -> ParsedLine:
        if cursor is None:
            cursor = len(line)
        return Tokenizer(ParserConfig(**config)).parse(line, cursor, ParseMode.COMPLETE)

    return _complete


@pytest.fixture
def commented() -> Tokenizer:
    """Tokenizer with ``#`` line comments and ``/* */`` block comments."""
    return Tokenizer(
        ParserConfig(line_comments=("#",), block_comment=BlockCommentDelims("/*", "*/"))
    )


@pytest.fixture
def bracketed() -> Tokenizer:
    """Tokenizer validating round and square brackets."""
    return Tokenizer(ParserConfig(brackets=(Bracket.ROUND, Bracket.SQUARE)))
