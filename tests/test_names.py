"""Tests for command and variable name extraction."""

from __future__ import annotations

import pytest

from argline.config import ParserConfig
from argline.tokenizer import Tokenizer


@pytest.fixture
def tok() -> Tokenizer:
    return Tokenizer()


class TestValidNames:
    @pytest.mark.parametrize("name", ["ls", "git-log", ":help", "cmd_2"])
    def test_valid_command(self, tok, name):
        assert tok.is_valid_command_name(name)

    @pytest.mark.parametrize("name", ["", "2cmd", "a b", None])
    def test_invalid_command(self, tok, name):
        assert not tok.is_valid_command_name(name)

    @pytest.mark.parametrize("name", ["x", "_tmp", "a.b", "a['k']", 'a["k"]', "a[0]"])
    def test_valid_variable(self, tok, name):
        assert tok.is_valid_variable_name(name)

    @pytest.mark.parametrize("name", ["9a", "a b", None])
    def test_invalid_variable(self, tok, name):
        assert not tok.is_valid_variable_name(name)

    def test_variables_disabled(self):
        assert not Tokenizer(ParserConfig(regex_variable=None)).is_valid_variable_name("x")


class TestCommandName:
    def test_first_word(self, tok):
        assert tok.command_name("  curl -X POST") == "curl"

    def test_after_assignment(self, tok):
        assert tok.command_name("out=curl -s") == "curl"

    def test_invalid_first_word(self, tok):
        assert tok.command_name("--verbose") == ""

    def test_empty_line(self, tok):
        assert tok.command_name("") == ""

    def test_without_variable_regex(self):
        tok = Tokenizer(ParserConfig(regex_variable=None))
        assert tok.command_name("out=curl -s") == ""
        assert tok.command_name("curl -s") == "curl"


class TestVariableName:
    def test_assignment(self, tok):
        assert tok.variable_name("result = curl -s x") == "result"

    def test_indexed_assignment(self, tok):
        assert tok.variable_name("a['k']=1") == "a['k']"

    def test_comparison_is_not_assignment(self, tok):
        assert tok.variable_name("a == b") is None

    def test_plain_command(self, tok):
        assert tok.variable_name("ls -la") is None
