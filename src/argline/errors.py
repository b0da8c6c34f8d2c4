"""Error types with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


def position_at(source: str, offset: int) -> Position:
    """Return the :class:`Position` of *offset* within *source*."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)


class ParseError(Exception):
    """Raised by strict parses on the first malformed construct.

    ``missing`` holds the literal text the input needs to balance, e.g. the
    quote character, the block comment terminator, or the closing brackets.
    ``incomplete`` is True when more input could still fix the line and
    False for hard syntax errors.
    """

    incomplete = True

    def __init__(
        self,
        message: str,
        source: str,
        offset: int,
        missing: str,
        open_brackets: int = -1,
        next_closing_bracket: str | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.offset = offset
        self.missing = missing
        self.open_brackets = open_brackets
        self.next_closing_bracket = next_closing_bracket
        super().__init__(message)

    @property
    def position(self) -> Position:
        return position_at(self.source, self.offset)

    @property
    def hint(self) -> str:
        prefix = "add" if self.incomplete else "missing"
        return f"{prefix}: {self.missing}"

    def format(self, filename: str = "<input>") -> str:
        pos = self.position
        lines = self.source.splitlines(keepends=True)
        line_idx = pos.line - 1
        col = pos.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # At least one caret, even past the end of the line
        underline_len = max(1, min(len(self.missing) or 1, len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(pos.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        hint = self.hint.replace("\n", "\\n")

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{pos.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}\n"
            f"{' ' * gutter_width}= {hint}"
        )


class EscapedTrailingCharacterError(ParseError):
    """The line ends with an escape character that escapes nothing."""


class UnclosedQuoteError(ParseError):
    """A quote was opened and never closed."""


class UnclosedBlockCommentError(ParseError):
    """A block comment was opened and never closed."""


class DanglingBlockCommentTerminatorError(ParseError):
    """A block comment terminator appeared with no comment open."""

    incomplete = False


class UnbalancedBracketsError(ParseError):
    """Bracket validation failed."""


class MissingClosingBracketError(UnbalancedBracketsError):
    """Brackets were left open at end of input."""


class MissingOpeningBracketError(UnbalancedBracketsError):
    """A closing bracket did not match any open bracket."""

    incomplete = False
