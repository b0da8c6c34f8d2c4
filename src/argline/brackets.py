"""Nested bracket balance tracking for the tokenizer scan."""

from __future__ import annotations

from argline.config import ParserConfig


class BracketChecker:
    """Track brackets opened and closed outside quotes during one scan.

    Two inherited behaviors are kept on purpose: an unmatched closing bracket
    overwrites any earlier one, and :attr:`next_closing_bracket` is only
    reported when exactly two brackets are still open at end of scan.
    """

    def __init__(self, config: ParserConfig, cursor: int) -> None:
        self._opening = config.opening_brackets
        self._closing = config.closing_brackets
        self._cursor = cursor
        self._nested: list[tuple[int, int]] = []  # (bracket id, position)
        self._missing_opening = -1
        self._missing_opening_pos = -1
        self._open_at_cursor = 0
        self._next_closing: str | None = None

    def check(self, buffer: str, pos: int) -> None:
        if not self._opening or pos < 0:
            return
        ch = buffer[pos]
        bid = self._opening.find(ch)
        if bid >= 0:
            self._nested.append((bid, pos))
        else:
            bid = self._closing.find(ch)
            if bid >= 0:
                if self._nested and self._nested[-1][0] == bid:
                    self._nested.pop()
                else:
                    self._missing_opening = bid
                    self._missing_opening_pos = pos
        if self._cursor > pos:
            self._open_at_cursor = len(self._nested)
            if self._nested:
                self._next_closing = self._closing[self._nested[-1][0]]

    @property
    def opening_missing(self) -> bool:
        return self._missing_opening != -1

    @property
    def missing_opening(self) -> str | None:
        if not self.opening_missing:
            return None
        return self._opening[self._missing_opening]

    @property
    def missing_opening_position(self) -> int:
        return self._missing_opening_pos

    @property
    def closing_missing(self) -> bool:
        return bool(self._nested)

    @property
    def missing_closing(self) -> str | None:
        """Closing brackets that balance the input, innermost first."""
        if not self.closing_missing:
            return None
        return "".join(self._closing[bid] for bid, _ in reversed(self._nested))

    @property
    def innermost_open_position(self) -> int:
        return self._nested[-1][1] if self._nested else -1

    @property
    def open_brackets(self) -> int:
        """Number of brackets open just before the cursor."""
        return self._open_at_cursor

    @property
    def next_closing_bracket(self) -> str | None:
        return self._next_closing if len(self._nested) == 2 else None
