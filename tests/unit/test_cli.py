"""Tests for the abisol command line."""

import io
import json

from abisol import cli
from tests.unit.conftest import function_entry

PING_ABI = [function_entry("ping")]


def _write_abi(tmp_path, abi=PING_ABI):
    path = tmp_path / "abi.json"
    path.write_text(json.dumps(abi), encoding="utf-8")
    return path


class TestBuildParser:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.file is None
        assert args.name == "MyInterface"
        assert args.solidity_version == ">=0.7.0 <0.9.0"
        assert args.license == "UNLICENSED"
        assert args.prettify is None
        assert not args.embedded

    def test_prettify_flags(self):
        parser = cli.build_parser()
        assert parser.parse_args(["--prettify"]).prettify is True
        assert parser.parse_args(["--no-prettify"]).prettify is False


class TestMain:
    def test_file_to_stdout(self, tmp_path, capsys):
        path = _write_abi(tmp_path)
        assert cli.main([str(path), "-n", "IPing", "-V", "^0.8.0"]) == 0
        out = capsys.readouterr().out
        assert "pragma solidity ^0.8.0;\n" in out
        assert "interface IPing {\n    function ping() external;\n}" in out

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(PING_ABI)))
        assert cli.main(["-", "--no-source", "--no-attribution"]) == 0
        out = capsys.readouterr().out
        assert "function ping() external;" in out
        assert "AUTOGENERATED" not in out

    def test_output_file(self, tmp_path, capsys):
        path = _write_abi(tmp_path)
        target = tmp_path / "IPing.sol"
        assert cli.main([str(path), "-o", str(target), "-V", "^0.8.0"]) == 0
        assert capsys.readouterr().out == ""
        assert "function ping() external;" in target.read_text(encoding="utf-8")

    def test_embedded(self, tmp_path, capsys):
        path = _write_abi(tmp_path)
        assert cli.main([str(path), "--embedded", "--no-source", "--no-attribution"]) == 0
        assert capsys.readouterr().out == (
            "interface MyInterface {\n    function ping() external;\n}\n"
        )

    def test_incompatible_version_exits_1(self, tmp_path, capsys):
        abi = [{"type": "error", "name": "Denied", "inputs": []}]
        path = _write_abi(tmp_path, abi)
        assert cli.main([str(path), "-V", "^0.8.0"]) == 1
        assert "error: " in capsys.readouterr().err

    def test_missing_file_exits_1(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "missing.json")]) == 1
        assert "error: " in capsys.readouterr().err

    def test_required_formatting_unavailable_exits_1(self, tmp_path, capsys):
        path = _write_abi(tmp_path)
        assert cli.main([str(path), "--prettify"]) == 1
        assert "no formatter" in capsys.readouterr().err
