"""Command-line interface for argline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, TextIO

from argline.config import (
    BlockCommentDelims,
    ParseMode,
    ParserConfig,
    config_from_mapping,
    parse_brackets,
)
from argline.errors import ParseError

logger = logging.getLogger(__name__)

_MODES = {mode.name.lower().replace("_", "-"): mode for mode in ParseMode}


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    line: str | None
    cursor: int | None
    mode: ParseMode
    config: ParserConfig
    complete: str | None
    as_json: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="argline",
        description="Split a command line into argument words",
    )
    p.add_argument(
        "line",
        nargs="?",
        help="Line to split (default: read lines from stdin; '-' also reads stdin)",
    )
    p.add_argument(
        "-c",
        "--cursor",
        type=int,
        default=None,
        metavar="OFFSET",
        help="Cursor offset into LINE (default: end of line)",
    )
    p.add_argument(
        "-m",
        "--mode",
        choices=sorted(_MODES),
        default="accept-line",
        help="Parse mode (default: accept-line)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover argline.toml)",
    )
    p.add_argument("--quote-chars", metavar="CHARS", help="Quote characters (default: '\")")
    p.add_argument("--escape-chars", metavar="CHARS", help="Escape characters (default: \\)")
    p.add_argument(
        "--line-comment",
        action="append",
        default=[],
        metavar="DELIM",
        help="Line comment delimiter (repeatable)",
    )
    p.add_argument(
        "--block-comment",
        nargs=2,
        metavar=("START", "END"),
        help="Block comment delimiters",
    )
    p.add_argument(
        "--bracket",
        action="append",
        default=[],
        metavar="KIND",
        help="Validate round, curly, square or angle brackets (repeatable)",
    )
    p.add_argument(
        "--complete",
        metavar="CANDIDATE",
        help="Print CANDIDATE escaped for insertion at the cursor",
    )
    p.add_argument("--json", action="store_true", help="Print words as a JSON array")
    p.add_argument("--debug", action="store_true", help="Dump the parsed line to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / "argline.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"invalid config file {path}: {exc}") from exc


def resolve_options(args: argparse.Namespace, search_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    Raises :class:`ValueError` on invalid config values.
    """
    config_path = Path(args.config) if args.config else None
    data = load_config(config_path, search_dir if search_dir is not None else Path("."))
    config = config_from_mapping(data)

    if args.quote_chars is not None:
        config.quote_chars = args.quote_chars
    if args.escape_chars is not None:
        config.escape_chars = args.escape_chars
    if args.line_comment:
        config.line_comments = tuple(d for d in args.line_comment if d)
    if args.block_comment:
        config.block_comment = BlockCommentDelims(*args.block_comment)
    if args.bracket:
        config = replace(config, brackets=parse_brackets(args.bracket))

    line = None if args.line in (None, "-") else args.line
    return CliOptions(
        line=line,
        cursor=args.cursor,
        mode=_MODES[args.mode],
        config=config,
        complete=args.complete,
        as_json=args.json,
        debug=args.debug,
    )


def _write_words(words: Sequence[str], as_json: bool, out: TextIO) -> None:
    if as_json:
        out.write(json.dumps(list(words)) + "\n")
    else:
        for word in words:
            out.write(word + "\n")


def run_line(options: CliOptions, out: TextIO) -> None:
    """Parse the single line given on the command line and print the result."""
    from argline.debug import dump_parsed_line
    from argline.tokenizer import Tokenizer

    line = options.line or ""
    cursor = len(line) if options.cursor is None else max(0, min(options.cursor, len(line)))
    parsed = Tokenizer(options.config).parse(line, cursor, options.mode)

    if options.debug:
        dump_parsed_line(parsed)

    if options.complete is not None:
        out.write(parsed.escape(options.complete, True) + "\n")
        return
    _write_words(parsed.words, options.as_json, out)


def run_stream(options: CliOptions, stream: TextIO, out: TextIO) -> int:
    """Split each line of *stream*; returns the number of lines that failed."""
    from argline.cache import ParseCache
    from argline.tokenizer import Tokenizer

    cache = ParseCache(Tokenizer(options.config))
    failures = 0
    for lineno, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        try:
            words = cache.split(line)
        except ParseError as exc:
            print(exc.format(f"<stdin line {lineno}>"), file=sys.stderr)
            failures += 1
            continue
        _write_words(words, options.as_json, out)
    logger.debug("stdin: %d cache hit(s), %d miss(es)", cache.hits, cache.misses)
    return failures


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.line is None:
        return 1 if run_stream(options, sys.stdin, sys.stdout) else 0

    try:
        run_line(options, sys.stdout)
    except ParseError as exc:
        print(exc.format(), file=sys.stderr)
        return 1

    return 0
