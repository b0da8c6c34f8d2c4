"""Shell-like command line tokenizer with cursor tracking."""

from __future__ import annotations

from argline.cache import ParseCache
from argline.config import Bracket, BlockCommentDelims, ParseMode, ParserConfig
from argline.errors import (
    DanglingBlockCommentTerminatorError,
    EscapedTrailingCharacterError,
    MissingClosingBracketError,
    MissingOpeningBracketError,
    ParseError,
    UnbalancedBracketsError,
    UnclosedBlockCommentError,
    UnclosedQuoteError,
)
from argline.parsed_line import ParsedLine
from argline.tokenizer import Tokenizer, split

__version__ = "0.1.0"

__all__ = [
    "Bracket",
    "BlockCommentDelims",
    "ParseMode",
    "ParserConfig",
    "ParsedLine",
    "Tokenizer",
    "split",
    "ParseCache",
    "ParseError",
    "EscapedTrailingCharacterError",
    "UnclosedQuoteError",
    "UnclosedBlockCommentError",
    "DanglingBlockCommentTerminatorError",
    "UnbalancedBracketsError",
    "MissingClosingBracketError",
    "MissingOpeningBracketError",
]
