"""Tokenizer result and completion candidate escaping."""

from __future__ import annotations

from dataclasses import dataclass, field

from argline.config import ParserConfig, escaped_flags, is_quote_at


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """The words of one line plus where the cursor fell.

    ``word_index`` is -1 when the cursor is not inside any word.
    ``raw_word_cursor`` and ``raw_word_length`` measure the word under the
    cursor as written, quotes and escape characters included.
    ``opening_quote`` is the quote character left open on the last word.
    """

    line: str
    words: tuple[str, ...]
    word_index: int = -1
    word_cursor: int = -1
    cursor: int = 0
    opening_quote: str | None = None
    raw_word_cursor: int = -1
    raw_word_length: int = -1
    config: ParserConfig = field(default_factory=ParserConfig, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))

    def word(self) -> str:
        """The word under the cursor, or an empty string."""
        if 0 <= self.word_index < len(self.words):
            return self.words[self.word_index]
        return ""

    def escape(self, candidate: str, complete: bool) -> str:
        """Return *candidate* escaped so it can replace the raw word under the cursor.

        Inside an open quote only escape characters and that quote need escaping,
        and the quote is reopened in front (closed behind when *complete*).
        A candidate carrying its own quotes only gets escape characters escaped.
        Otherwise delimiters, quotes and escape characters are all escaped, or,
        with no escape character configured, the candidate is single-quoted
        when it holds a delimiter.
        """
        cfg = self.config
        quote = self.opening_quote
        middle_quotes = False
        if quote is None:
            flags = escaped_flags(cfg, candidate)
            middle_quotes = any(is_quote_at(cfg, candidate, flags, i) for i in range(len(candidate)))

        out = candidate
        if cfg.escape_chars:
            esc = cfg.escape_chars[0]
            if quote is not None:
                def needs_escape(ch: str) -> bool:
                    return cfg.is_escape_char(ch) or ch == quote
            elif middle_quotes:
                needs_escape = cfg.is_escape_char
            else:
                def needs_escape(ch: str) -> bool:
                    return cfg.is_delimiter_char(ch) or cfg.is_escape_char(ch) or cfg.is_quote_char(ch)
            out = "".join(esc + ch if needs_escape(ch) else ch for ch in candidate)
        elif quote is None and not middle_quotes:
            if any(cfg.is_delimiter_char(ch) for ch in candidate):
                quote = "'"

        if quote is not None:
            out = quote + out
            if complete:
                out += quote
        return out
