"""Tests for the generate_solidity entry point."""

import json

import pytest

from abisol import GenerateOptions, generate_solidity
from abisol.errors import AbiFormatError, ConfigurationError
from abisol.formatter import Formatter
from tests.unit.conftest import function_entry, plain_options

PING_ABI = [function_entry("ping")]


class RecordingFormatter(Formatter):
    def __init__(self):
        self.sources = []

    def format(self, source: str) -> str:
        self.sources.append(source)
        return "// formatted\n" + source


class BrokenFormatter(Formatter):
    def format(self, source: str) -> str:
        raise RuntimeError("formatter crashed")


class TestGenerateSolidity:
    def test_default_options(self):
        output = generate_solidity(PING_ABI)
        assert output.startswith("// SPDX-License-Identifier: UNLICENSED\n")
        assert "pragma solidity >=0.7.0 <0.9.0;\n" in output
        assert "interface MyInterface {\n    function ping() external;\n}" in output
        assert "/*\n" in output

    def test_accepts_json_text(self):
        options = plain_options(solidity_version="^0.8.0")
        assert generate_solidity(json.dumps(PING_ABI), options) == generate_solidity(
            PING_ABI, options
        )

    def test_accepts_artifact(self):
        output = generate_solidity({"abi": PING_ABI}, plain_options(solidity_version="^0.8.0"))
        assert "function ping() external;" in output

    def test_invalid_abi(self):
        with pytest.raises(AbiFormatError):
            generate_solidity("{nope", plain_options())

    def test_invalid_version_range(self):
        with pytest.raises(ConfigurationError):
            generate_solidity(PING_ABI, plain_options(solidity_version="not-a-range"))


class TestFormatting:
    def test_injected_formatter_is_applied(self):
        formatter = RecordingFormatter()
        options = plain_options(solidity_version="^0.8.0", prettify_output=None)
        output = generate_solidity(PING_ABI, options, formatter=formatter)
        assert output.startswith("// formatted\n")
        assert len(formatter.sources) == 1

    def test_prettify_false_skips_formatter(self):
        formatter = RecordingFormatter()
        generate_solidity(PING_ABI, plain_options(solidity_version="^0.8.0"), formatter=formatter)
        assert formatter.sources == []

    def test_failing_formatter_returns_unformatted_output(self, caplog):
        options = plain_options(solidity_version="^0.8.0", prettify_output=True)
        output = generate_solidity(PING_ABI, options, formatter=BrokenFormatter())
        assert output == generate_solidity(PING_ABI, plain_options(solidity_version="^0.8.0"))
        assert "BrokenFormatter failed" in caplog.text

    def test_required_formatter_missing_fails_before_parsing(self):
        options = GenerateOptions(prettify_output=True)
        with pytest.raises(ConfigurationError):
            generate_solidity("this is not an ABI", options)

    def test_optional_formatter_missing_is_fine(self):
        output = generate_solidity(PING_ABI, plain_options(prettify_output=None))
        assert "function ping() external;" in output
