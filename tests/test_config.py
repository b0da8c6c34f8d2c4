"""Tests for parser config, TOML config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from argline.cli import build_parser, load_config, resolve_options
from argline.config import (
    Bracket,
    BlockCommentDelims,
    ParserConfig,
    config_from_mapping,
    parse_brackets,
)


class TestParserConfig:
    def test_defaults(self):
        cfg = ParserConfig()
        assert cfg.quote_chars == "'\""
        assert cfg.escape_chars == "\\"
        assert cfg.line_comments == ()
        assert cfg.block_comment is None
        assert cfg.brackets is None
        assert cfg.opening_brackets == ""

    def test_brackets_deduplicated_in_order(self):
        cfg = ParserConfig(brackets=(Bracket.SQUARE, Bracket.ROUND, Bracket.SQUARE))
        assert cfg.brackets == (Bracket.SQUARE, Bracket.ROUND)
        assert cfg.opening_brackets == "[("
        assert cfg.closing_brackets == "])"

    def test_brackets_assigned_after_construction(self):
        cfg = ParserConfig()
        cfg.brackets = (Bracket.CURLY, Bracket.ANGLE)
        assert cfg.opening_brackets == "{<"
        assert cfg.closing_brackets == "}>"
        cfg.brackets = None
        assert cfg.opening_brackets == ""

    def test_empty_line_comment_dropped(self):
        assert ParserConfig(line_comments=("", "#")).line_comments == ("#",)

    def test_whitespace_delimiters_by_default(self):
        cfg = ParserConfig()
        assert cfg.is_delimiter_char("\t")
        assert not cfg.is_delimiter_char(",")


class TestParseBrackets:
    def test_names(self):
        assert parse_brackets(["round", "CURLY", " angle "]) == (
            Bracket.ROUND,
            Bracket.CURLY,
            Bracket.ANGLE,
        )

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown bracket kind"):
            parse_brackets(["oval"])


class TestConfigFromMapping:
    def test_empty(self):
        assert config_from_mapping({}) == ParserConfig()

    def test_all_keys(self):
        cfg = config_from_mapping(
            {
                "parser": {
                    "quote_chars": "'",
                    "escape_chars": "^",
                    "delimiters": " ,",
                    "line_comments": ["#", "//"],
                    "block_comment": {"start": "/*", "end": "*/"},
                    "brackets": ["round"],
                    "eof_on_unclosed_quote": False,
                    "eof_on_escaped_newline": False,
                }
            }
        )
        assert cfg.quote_chars == "'"
        assert cfg.escape_chars == "^"
        assert cfg.delimiters == " ,"
        assert cfg.line_comments == ("#", "//")
        assert cfg.block_comment == BlockCommentDelims("/*", "*/")
        assert cfg.brackets == (Bracket.ROUND,)
        assert cfg.eof_on_unclosed_quote is False
        assert cfg.eof_on_escaped_newline is False

    def test_base_kept_for_missing_keys(self):
        base = ParserConfig(line_comments=("#",))
        cfg = config_from_mapping({"parser": {"quote_chars": "'"}}, base)
        assert cfg.line_comments == ("#",)

    @pytest.mark.parametrize(
        "table",
        [
            {"quote_chars": 1},
            {"eof_on_unclosed_quote": "yes"},
            {"line_comments": "#"},
            {"block_comment": "/* */"},
            {"block_comment": {"start": "#", "end": "#"}},
            {"brackets": "round"},
        ],
    )
    def test_invalid_values(self, table):
        with pytest.raises(ValueError):
            config_from_mapping({"parser": table})

    def test_parser_not_a_table(self):
        with pytest.raises(ValueError, match="table"):
            config_from_mapping({"parser": 3})


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[parser]\nquote_chars = "\'"\n')
        result = load_config(cfg, tmp_path)
        assert result["parser"] == {"quote_chars": "'"}

    def test_auto_discover_argline_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "argline.toml"
        cfg.write_text('[parser]\nline_comments = ["#"]\n')
        result = load_config(None, tmp_path)
        assert result["parser"] == {"line_comments": ["#"]}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "argline.toml"
        cfg.write_text("[parser\n")
        with pytest.raises(ValueError, match="invalid config file"):
            load_config(None, tmp_path)


class TestConfigMerge:
    def test_config_file_applied(self, tmp_path: Path) -> None:
        (tmp_path / "argline.toml").write_text('[parser]\nline_comments = ["#"]\n')
        ns = build_parser().parse_args(["a b"])
        opts = resolve_options(ns, tmp_path)
        assert opts.config.line_comments == ("#",)

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "argline.toml").write_text('[parser]\nline_comments = ["#"]\n')
        ns = build_parser().parse_args(["a b", "--line-comment", "//"])
        opts = resolve_options(ns, tmp_path)
        assert opts.config.line_comments == ("//",)

    def test_cli_brackets_keep_config_values(self, tmp_path: Path) -> None:
        (tmp_path / "argline.toml").write_text('[parser]\nquote_chars = "\'"\n')
        ns = build_parser().parse_args(["a", "--bracket", "round", "--bracket", "square"])
        opts = resolve_options(ns, tmp_path)
        assert opts.config.quote_chars == "'"
        assert opts.config.opening_brackets == "(["

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text('[parser]\nescape_chars = "^"\n')
        ns = build_parser().parse_args(["a", "--config", str(cfg)])
        opts = resolve_options(ns, tmp_path / "elsewhere")
        assert opts.config.escape_chars == "^"

    def test_block_comment_flag(self, tmp_path: Path) -> None:
        ns = build_parser().parse_args(["a", "--block-comment", "{-", "-}"])
        opts = resolve_options(ns, tmp_path)
        assert opts.config.block_comment == BlockCommentDelims("{-", "-}")
