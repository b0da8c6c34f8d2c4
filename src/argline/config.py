"""Parser configuration, parse modes, and character classification helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class Bracket(Enum):
    ROUND = "()"
    CURLY = "{}"
    SQUARE = "[]"
    ANGLE = "<>"

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]


class ParseMode(Enum):
    UNSPECIFIED = auto()
    # Real "final" parse; incomplete input raises.
    ACCEPT_LINE = auto()
    # Words keep every input character, quotes and escapes included. Never raises.
    SPLIT_LINE = auto()
    # Parse for completion candidates. Never raises.
    COMPLETE = auto()
    # Parse to refresh a continuation prompt from the error's missing hint.
    SECONDARY_PROMPT = auto()

    @property
    def strict(self) -> bool:
        return self not in (ParseMode.SPLIT_LINE, ParseMode.COMPLETE)


@dataclass(frozen=True, slots=True)
class BlockCommentDelims:
    """Start and end tokens of a block comment."""

    start: str
    end: str

    def __post_init__(self) -> None:
        if not self.start or not self.end or self.start == self.end:
            raise ValueError(f"bad block comment delimiters: {self.start!r}, {self.end!r}")


DEFAULT_REGEX_VARIABLE = r"[a-zA-Z_]+[a-zA-Z0-9_-]*((\.|\['|\[\"|\[)[a-zA-Z0-9_-]*(|']|\"]|]))?"
DEFAULT_REGEX_COMMAND = r"[:]?[a-zA-Z]+[a-zA-Z0-9_-]*"


@dataclass
class ParserConfig:
    """Characters and delimiters recognized by a :class:`~argline.tokenizer.Tokenizer`.

    ``delimiters`` of None means any whitespace character separates words.
    ``brackets`` of None disables bracket validation entirely.
    """

    quote_chars: str = "'\""
    escape_chars: str = "\\"
    delimiters: str | None = None
    line_comments: tuple[str, ...] = ()
    block_comment: BlockCommentDelims | None = None
    brackets: tuple[Bracket, ...] | None = None
    eof_on_unclosed_quote: bool = True
    eof_on_escaped_newline: bool = True
    regex_variable: str | None = DEFAULT_REGEX_VARIABLE
    regex_command: str = DEFAULT_REGEX_COMMAND
    command_group: int = 4

    def __post_init__(self) -> None:
        self.line_comments = tuple(d for d in self.line_comments if d)
        if self.brackets is not None:
            self.brackets = tuple(dict.fromkeys(self.brackets))

    @property
    def opening_brackets(self) -> str:
        return "".join(b.opening for b in dict.fromkeys(self.brackets or ()))

    @property
    def closing_brackets(self) -> str:
        return "".join(b.closing for b in dict.fromkeys(self.brackets or ()))

    def is_delimiter_char(self, ch: str) -> bool:
        if self.delimiters is None:
            return ch.isspace()
        return ch in self.delimiters

    def is_escape_char(self, ch: str) -> bool:
        return ch in self.escape_chars

    def is_quote_char(self, ch: str) -> bool:
        return ch in self.quote_chars


def escaped_flags(config: ParserConfig, buffer: str) -> list[bool]:
    """Return, for each position of *buffer*, whether its character is escaped.

    A character is escaped when the one before it is an escape character that
    is not itself escaped, i.e. when an odd run of escape characters precedes it.
    """
    flags = [False] * len(buffer)
    pending = False
    for pos, ch in enumerate(buffer):
        flags[pos] = pending
        pending = not pending and config.is_escape_char(ch)
    return flags


def is_escape_at(config: ParserConfig, buffer: str, escaped: Sequence[bool], pos: int) -> bool:
    """Return True if *pos* holds an escape character that is not escaped."""
    if pos < 0 or pos >= len(buffer):
        return False
    return config.is_escape_char(buffer[pos]) and not escaped[pos]


def is_quote_at(config: ParserConfig, buffer: str, escaped: Sequence[bool], pos: int) -> bool:
    """Return True if *pos* holds a quote character that is not escaped."""
    if pos < 0 or pos >= len(buffer):
        return False
    return config.is_quote_char(buffer[pos]) and not escaped[pos]


def is_delimiter_at(config: ParserConfig, buffer: str, escaped: Sequence[bool], pos: int) -> bool:
    """Return True if *pos* holds a delimiter character that is not escaped."""
    return config.is_delimiter_char(buffer[pos]) and not escaped[pos]


def starts_with_at(buffer: str, pos: int, pattern: str | None) -> bool:
    """Return True if *pattern* occurs in *buffer* at *pos*."""
    if pos < 0 or not pattern:
        return False
    return buffer.startswith(pattern, pos)


# ---------------------------------------------------------------------------
# Mapping (TOML) → ParserConfig
# ---------------------------------------------------------------------------


def parse_brackets(names: Iterable[str]) -> tuple[Bracket, ...]:
    """Convert bracket names (``round``, ``square``...) into :class:`Bracket` values."""
    out: list[Bracket] = []
    for name in names:
        try:
            out.append(Bracket[str(name).strip().upper()])
        except KeyError:
            valid = ", ".join(b.name.lower() for b in Bracket)
            raise ValueError(f"unknown bracket kind {name!r} (expected one of: {valid})") from None
    return tuple(out)


def _str_option(table: Mapping[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"parser.{key} must be a string")
    return value


def _bool_option(table: Mapping[str, Any], key: str) -> bool | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"parser.{key} must be a boolean")
    return value


def config_from_mapping(data: Mapping[str, Any], base: ParserConfig | None = None) -> ParserConfig:
    """Build a :class:`ParserConfig` from the ``[parser]`` table of a config file.

    Keys absent from *data* keep the value from *base* (or the defaults).
    Raises :class:`ValueError` on values of the wrong type.
    """
    base = base if base is not None else ParserConfig()
    table = data.get("parser", {})
    if not isinstance(table, Mapping):
        raise ValueError("[parser] must be a table")

    kwargs: dict[str, Any] = {
        "quote_chars": base.quote_chars,
        "escape_chars": base.escape_chars,
        "delimiters": base.delimiters,
        "line_comments": base.line_comments,
        "block_comment": base.block_comment,
        "brackets": base.brackets,
        "eof_on_unclosed_quote": base.eof_on_unclosed_quote,
        "eof_on_escaped_newline": base.eof_on_escaped_newline,
        "regex_variable": base.regex_variable,
        "regex_command": base.regex_command,
        "command_group": base.command_group,
    }

    for key in ("quote_chars", "escape_chars", "delimiters"):
        value = _str_option(table, key)
        if value is not None:
            kwargs[key] = value

    for key in ("eof_on_unclosed_quote", "eof_on_escaped_newline"):
        flag = _bool_option(table, key)
        if flag is not None:
            kwargs[key] = flag

    comments = table.get("line_comments")
    if comments is not None:
        if not isinstance(comments, list) or not all(isinstance(c, str) for c in comments):
            raise ValueError("parser.line_comments must be a list of strings")
        kwargs["line_comments"] = tuple(comments)

    block = table.get("block_comment")
    if block is not None:
        if not isinstance(block, Mapping):
            raise ValueError("parser.block_comment must be a table with start and end")
        kwargs["block_comment"] = BlockCommentDelims(str(block.get("start", "")), str(block.get("end", "")))

    brackets = table.get("brackets")
    if brackets is not None:
        if not isinstance(brackets, list):
            raise ValueError("parser.brackets must be a list of bracket names")
        kwargs["brackets"] = parse_brackets(brackets)

    return ParserConfig(**kwargs)
