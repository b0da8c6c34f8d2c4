"""argline tokenizer: splits one command line into argument words."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto

from argline.brackets import BracketChecker
from argline.config import (
    ParseMode,
    ParserConfig,
    is_delimiter_at,
    escaped_flags,
    is_escape_at,
    is_quote_at,
    starts_with_at,
)
from argline.errors import (
    DanglingBlockCommentTerminatorError,
    EscapedTrailingCharacterError,
    MissingClosingBracketError,
    MissingOpeningBracketError,
    ParseError,
    UnclosedBlockCommentError,
    UnclosedQuoteError,
)
from argline.parsed_line import ParsedLine

logger = logging.getLogger(__name__)


class State(Enum):
    NORMAL = auto()
    IN_QUOTE = auto()
    IN_LINE_COMMENT = auto()
    IN_BLOCK_COMMENT = auto()


@dataclass
class ScanState:
    """Everything one scan carries from one character to the next."""

    line: str
    cursor: int
    mode: ParseMode
    brackets: BracketChecker
    escaped: list[bool]
    words: list[str] = field(default_factory=list)
    current: list[str] = field(default_factory=list)
    state: State = State.NORMAL
    quote_start: int = -1
    quoted_word: bool = False
    block_comment_start: int = -1
    stray_block_comment_end: int = -1
    raw_word_start: int = 0
    word_index: int = -1
    word_cursor: int = -1
    raw_word_cursor: int = -1
    raw_word_length: int = -1

    def append(self, pos: int) -> None:
        self.current.append(self.line[pos])

    def flush(self, pos: int) -> None:
        """Move the pending word (if any) into the word list."""
        if not self.current:
            return
        self.words.append("".join(self.current))
        self.current.clear()
        if self.raw_word_cursor >= 0 and self.raw_word_length < 0:
            self.raw_word_length = pos - self.raw_word_start

    def snapshot_cursor(self, pos: int) -> None:
        self.word_index = len(self.words)
        self.word_cursor = len(self.current)
        self.raw_word_cursor = pos - self.raw_word_start

    def snapshot_in_token(
        self, pos: int, words_before: int, pending_before: int, raw_start_before: int
    ) -> None:
        """Place a cursor that fell inside the multi-character token at *pos*.

        The cursor ends whatever preceded the token. The arguments are the word
        count, pending word length and raw word start from before the token
        was consumed.
        """
        self.word_index = words_before
        self.word_cursor = pending_before
        self.raw_word_cursor = pos - raw_start_before
        self.raw_word_length = self.raw_word_cursor


# A rule inspects position ``i`` and either declines (None) or consumes the
# character(s) there and returns the index the scan continues from.
Rule = Callable[[ParserConfig, ScanState, int], "int | None"]


def open_quote(config: ParserConfig, s: ScanState, i: int) -> int | None:
    if s.state is not State.NORMAL or not is_quote_at(config, s.line, s.escaped, i):
        return None
    s.quote_start = i
    s.state = State.IN_QUOTE
    if not s.current:
        # The whole word is quoted: the quote itself is not part of it
        s.quoted_word = True
        if s.mode is ParseMode.SPLIT_LINE:
            s.append(i)
    else:
        s.append(i)
    return i + 1


def close_quote(config: ParserConfig, s: ScanState, i: int) -> int | None:
    if s.state is not State.IN_QUOTE:
        return None
    if s.line[i] != s.line[s.quote_start] or s.escaped[i]:
        return None
    if not s.quoted_word or s.mode is ParseMode.SPLIT_LINE:
        s.append(i)
    elif s.raw_word_cursor >= 0 and s.raw_word_length < 0:
        s.raw_word_length = i - s.raw_word_start + 1
    s.quote_start = -1
    s.quoted_word = False
    s.state = State.NORMAL
    return i + 1


def delimiter(config: ParserConfig, s: ScanState, i: int) -> int | None:
    if s.state is State.IN_QUOTE or not is_delimiter_at(config, s.line, s.escaped, i):
        return None
    if s.state is State.IN_LINE_COMMENT:
        if starts_with_at(s.line, i, os.linesep):
            s.state = State.NORMAL
            s.raw_word_start = i + 1
    elif s.state is State.IN_BLOCK_COMMENT:
        end = config.block_comment.end if config.block_comment else None
        if starts_with_at(s.line, i, end):
            s.state = State.NORMAL
            s.raw_word_start = i + len(end)
            return i + len(end)
    else:
        s.flush(i)
        s.raw_word_start = i + 1
    return i + 1


def line_comment(config: ParserConfig, s: ScanState, i: int) -> int | None:
    if s.state is State.IN_LINE_COMMENT:
        return i + 1
    if s.state is not State.NORMAL:
        return None
    for delim in config.line_comments:
        if starts_with_at(s.line, i, delim):
            s.flush(i)
            s.state = State.IN_LINE_COMMENT
            s.raw_word_start = i + len(delim)
            return i + len(delim)
    return None


def block_comment(config: ParserConfig, s: ScanState, i: int) -> int | None:
    delims = config.block_comment
    if s.state is State.IN_BLOCK_COMMENT:
        if delims is not None and starts_with_at(s.line, i, delims.end):
            s.state = State.NORMAL
            s.raw_word_start = i + len(delims.end)
            return i + len(delims.end)
        return i + 1
    if s.state is not State.NORMAL or delims is None:
        return None
    if not starts_with_at(s.line, i, delims.start):
        return None
    s.flush(i)
    s.state = State.IN_BLOCK_COMMENT
    s.block_comment_start = i
    s.raw_word_start = i + len(delims.start)
    return i + len(delims.start)


def stray_block_comment_end(config: ParserConfig, s: ScanState, i: int) -> int | None:
    delims = config.block_comment
    if s.state is not State.NORMAL or delims is None:
        return None
    if not starts_with_at(s.line, i, delims.end):
        return None
    s.append(i)
    if s.stray_block_comment_end < 0:
        s.stray_block_comment_end = i
    return i + 1


def content(config: ParserConfig, s: ScanState, i: int) -> int | None:
    if not is_escape_at(config, s.line, s.escaped, i):
        s.append(i)
        if s.state is not State.IN_QUOTE:
            s.brackets.check(s.line, i)
    elif s.mode is ParseMode.SPLIT_LINE:
        s.append(i)
    return i + 1


# Order matters: the first rule that accepts a position consumes it.
RULES: tuple[tuple[str, Rule], ...] = (
    ("open_quote", open_quote),
    ("close_quote", close_quote),
    ("delimiter", delimiter),
    ("line_comment", line_comment),
    ("block_comment", block_comment),
    ("stray_block_comment_end", stray_block_comment_end),
    ("content", content),
)


class Tokenizer:
    """Split command lines into words according to a :class:`ParserConfig`.

    The config may be replaced between parses but not during one; use one
    tokenizer per thread when configs differ.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config if config is not None else ParserConfig()

    def parse(
        self,
        line: str | None,
        cursor: int = 0,
        mode: ParseMode = ParseMode.UNSPECIFIED,
    ) -> ParsedLine:
        """Scan *line* once and return its words and cursor placement.

        *cursor* is an offset into *line*; pass -1 when no cursor matters.
        Strict modes raise a :class:`~argline.errors.ParseError` subclass on
        malformed input; ``SPLIT_LINE`` and ``COMPLETE`` never raise.
        """
        line = line or ""
        n = len(line)
        s = ScanState(
            line,
            cursor,
            mode,
            BracketChecker(self.config, cursor),
            escaped_flags(self.config, line),
        )

        i = 0
        while i < n:
            if i == cursor:
                s.snapshot_cursor(i)
            words_before, pending_before = len(s.words), len(s.current)
            raw_start_before = s.raw_word_start
            nxt = i + 1
            for _name, rule in RULES:
                step = rule(self.config, s, i)
                if step is not None:
                    nxt = step
                    break
            if i < cursor < nxt:
                s.snapshot_in_token(i, words_before, pending_before, raw_start_before)
            i = nxt

        if s.current or cursor == n:
            s.words.append("".join(s.current))
            if s.raw_word_cursor >= 0 and s.raw_word_length < 0:
                s.raw_word_length = n - s.raw_word_start

        if cursor == n:
            s.word_index = len(s.words) - 1
            s.word_cursor = len(s.words[-1])
            s.raw_word_cursor = cursor - s.raw_word_start
            s.raw_word_length = s.raw_word_cursor

        if mode.strict:
            error = self._validate(s)
            if error is not None:
                logger.debug("rejecting %r: %s", line, error.message)
                raise error

        opening_quote = line[s.quote_start] if s.quoted_word else None
        logger.debug("split %r into %d word(s) (mode=%s)", line, len(s.words), mode.name)
        return ParsedLine(
            line=line,
            words=s.words,
            word_index=s.word_index,
            word_cursor=s.word_cursor,
            cursor=cursor,
            opening_quote=opening_quote,
            raw_word_cursor=s.raw_word_cursor,
            raw_word_length=s.raw_word_length,
            config=self.config,
        )

    def _validate(self, s: ScanState) -> ParseError | None:
        """Return the first violation found at end of scan, in fixed order."""
        cfg = self.config
        line = s.line
        last = len(line) - 1

        if cfg.eof_on_escaped_newline and is_escape_at(cfg, line, s.escaped, last):
            return EscapedTrailingCharacterError("Escaped new line", line, last, "\n")
        if cfg.eof_on_unclosed_quote and s.state is State.IN_QUOTE:
            return UnclosedQuoteError("Missing closing quote", line, s.quote_start, line[s.quote_start])
        if s.state is State.IN_BLOCK_COMMENT and cfg.block_comment is not None:
            return UnclosedBlockCommentError(
                "Missing closing block comment delimiter",
                line,
                s.block_comment_start,
                cfg.block_comment.end,
            )
        if s.stray_block_comment_end >= 0 and cfg.block_comment is not None:
            return DanglingBlockCommentTerminatorError(
                "Missing opening block comment delimiter",
                line,
                s.stray_block_comment_end,
                cfg.block_comment.start,
            )
        checker = s.brackets
        if checker.closing_missing:
            return MissingClosingBracketError(
                "Missing closing brackets",
                line,
                checker.innermost_open_position,
                checker.missing_closing or "",
                checker.open_brackets,
                checker.next_closing_bracket,
            )
        if checker.opening_missing:
            return MissingOpeningBracketError(
                "Missing opening bracket",
                line,
                checker.missing_opening_position,
                checker.missing_opening or "",
                checker.open_brackets,
                checker.next_closing_bracket,
            )
        return None

    def split(self, line: str | None) -> list[str]:
        """Return the words of *line* from a strict parse with no cursor."""
        return list(self.parse(line, -1, ParseMode.UNSPECIFIED).words)

    # ------------------------------------------------------------------
    # Command and variable names
    # ------------------------------------------------------------------

    def is_valid_command_name(self, name: str | None) -> bool:
        return name is not None and re.fullmatch(self.config.regex_command, name) is not None

    def is_valid_variable_name(self, name: str | None) -> bool:
        regex = self.config.regex_variable
        return name is not None and regex is not None and re.fullmatch(regex, name) is not None

    def command_name(self, line: str) -> str:
        """Return the command word of *line*, or "" if it is not a valid name.

        With a variable regex configured, ``var=cmd args`` yields ``cmd``.
        """
        cfg = self.config
        if cfg.regex_variable is not None:
            pattern = r"^\s*" + cfg.regex_variable + "=(" + cfg.regex_command + r")(\s+|$)"
            m = re.match(pattern, line)
            if m:
                return m.group(cfg.command_group)
        parts = line.split()
        out = parts[0] if parts else ""
        return out if self.is_valid_command_name(out) else ""

    def variable_name(self, line: str) -> str | None:
        """Return the assignment target of ``var = value`` lines, else None."""
        regex = self.config.regex_variable
        if regex is None:
            return None
        m = re.match(r"^\s*(" + regex + r")\s*=[^=~].*", line)
        return m.group(1) if m else None


def split(line: str | None, config: ParserConfig | None = None) -> list[str]:
    """Convenience function: split *line* into words with a fresh tokenizer."""
    return Tokenizer(config).split(line)
