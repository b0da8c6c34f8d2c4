"""--debug dump of a parsed line to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from argline.parsed_line import ParsedLine


def dump_parsed_line(parsed: ParsedLine, *, file: TextIO | None = None) -> None:
    """Print a human-readable view of *parsed* to *file* (default: stderr)."""
    if file is None:
        file = sys.stderr
    file.write(f"ParsedLine {parsed.line!r}\n")
    file.write(f"  cursor={parsed.cursor}")
    if parsed.opening_quote is not None:
        file.write(f" open-quote={parsed.opening_quote!r}")
    file.write("\n")
    for idx, word in enumerate(parsed.words):
        file.write(f"  {_marker(parsed, idx)} [{idx}] {word!r}\n")
        if idx == parsed.word_index:
            _dump_cursor(parsed, file)


def _marker(parsed: ParsedLine, idx: int) -> str:
    return ">" if idx == parsed.word_index else " "


def _dump_cursor(parsed: ParsedLine, f: TextIO) -> None:
    # Caret lines up with the cursor when the word repr has no escapes
    pad = " " * (len(f"  > [{parsed.word_index}] '") + parsed.word_cursor)
    f.write(f"{pad}^ word_cursor={parsed.word_cursor}")
    f.write(f" raw_cursor={parsed.raw_word_cursor} raw_length={parsed.raw_word_length}\n")
