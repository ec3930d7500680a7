"""Tests for the CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from light_xml_parser.cli.main import (
    CLIConfig,
    FileProcessor,
    create_argument_parser,
    format_results,
    main,
)
from light_xml_parser.tree import EmptyElement


@pytest.fixture
def xml_file(tmp_path: Path) -> Path:
    path = tmp_path / "doc.xml"
    path.write_text('<?xml version="1.0"?>\n<root a="1"><item>test</item></root>', encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.xml"
    path.write_text("<root><item>test</item", encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()

        assert config.output_format == "json"
        assert config.encoding == "utf-8"
        assert config.parser_config.max_depth is None

    def test_config_from_file(self, tmp_path):
        """Test loading configuration from file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "parser": {"max_depth": 5, "blank_characters": " \n\t"},
            "output_format": "tree",
            "encoding": "latin-1",
        }))

        config = CLIConfig.from_file(config_path)

        assert config.parser_config.max_depth == 5
        assert config.parser_config.blank_characters == " \n\t"
        assert config.output_format == "tree"
        assert config.encoding == "latin-1"

    def test_config_from_nonexistent_file(self):
        """Test handling non-existent config file."""
        config = CLIConfig.from_file(Path("nonexistent.json"))

        assert config.output_format == "json"

    def test_invalid_config_file_keeps_defaults(self, tmp_path, capsys):
        """Test that an invalid parser section is reported and ignored."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"parser": {"max_dept": 5}}))

        config = CLIConfig.from_file(config_path)

        assert config.parser_config.max_depth is None
        assert "Could not load config file" in capsys.readouterr().err


class TestFileProcessor:
    """Test file processing."""

    def test_process_single_file_success(self, xml_file):
        """Test successful single file processing."""
        result = FileProcessor(CLIConfig()).process_single_file(xml_file)

        assert result["success"] is True
        assert result["file"] == str(xml_file)
        assert result["node_count"] == 2
        assert result["metrics"]["nodes_emitted"] == 2

    def test_process_single_file_failure(self, broken_file, tmp_path):
        """Test malformed and missing files are reported, not raised."""
        processor = FileProcessor(CLIConfig())

        broken = processor.process_single_file(broken_file)
        missing = processor.process_single_file(tmp_path / "missing.xml")

        assert broken["success"] is False
        assert "expected '>'" in broken["error"]
        assert missing["success"] is False


class TestFormatting:
    """Test result formatting."""

    def test_json_format(self):
        """Test nodes are serialised to dictionaries."""
        results = [{"file": "a.xml", "success": True, "nodes": [EmptyElement("a")]}]

        data = json.loads(format_results(results, "json"))

        assert data[0]["nodes"] == [{"type": "empty_element", "name": "a", "attributes": {}}]

    def test_tree_format(self):
        """Test the outline format including failures."""
        results = [
            {"file": "a.xml", "success": True, "nodes": [EmptyElement("a")]},
            {"file": "b.xml", "success": False, "error": "boom"},
        ]

        assert format_results(results, "tree") == "== a.xml\n<a/>\n== b.xml\nError: boom"


class TestMain:
    """Test the CLI entry point."""

    def test_argument_parser(self):
        """Test the parse subcommand arguments."""
        args = create_argument_parser().parse_args(["parse", "x.xml", "-f", "tree"])

        assert args.command == "parse"
        assert args.paths == [Path("x.xml")]
        assert args.format == "tree"

    def test_no_command_prints_help(self, capsys):
        """Test that missing command returns 1."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_parse_json(self, xml_file, capsys):
        """Test parse command with JSON output."""
        assert main(["parse", str(xml_file)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data[0]["nodes"][1]["name"] == "root"
        assert data[0]["nodes"][1]["children"][0]["contents"] == ["test"]

    def test_parse_tree_to_output_file(self, xml_file, tmp_path):
        """Test parse command writing the outline to a file."""
        output = tmp_path / "out.txt"

        assert main(["parse", str(xml_file), "--format", "tree", "-o", str(output)]) == 0

        text = output.read_text(encoding="utf-8")
        assert '<root a="1">' in text
        assert "<xml version=\"1.0\"/>" in text

    def test_parse_uses_config_format(self, xml_file, tmp_path, capsys):
        """Test the output format from a config file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"output_format": "tree"}))

        assert main(["--config", str(config_path), "parse", str(xml_file)]) == 0
        assert capsys.readouterr().out.startswith("== ")

    def test_parse_failure_exit_code(self, broken_file):
        """Test parse returns 1 when a file fails."""
        assert main(["parse", str(broken_file)]) == 1

    def test_check(self, xml_file, broken_file, capsys):
        """Test check command reports per-file status."""
        assert main(["check", str(xml_file)]) == 0
        assert main(["check", str(xml_file), str(broken_file)]) == 1

        out = capsys.readouterr().out
        assert f"OK   {xml_file}: 2 top-level nodes" in out
        assert f"FAIL {broken_file}" in out

    def test_check_reports_structural_issues(self, tmp_path, capsys):
        """Test that tolerated mismatches are mentioned."""
        path = tmp_path / "mismatch.xml"
        path.write_text("<a></b></a>", encoding="utf-8")

        assert main(["check", str(path)]) == 0
        assert "unmatched end tags 1" in capsys.readouterr().out

    def test_check_reports_orphaned_content(self, tmp_path, capsys):
        """Test that text outside any element is mentioned."""
        path = tmp_path / "orphan.xml"
        path.write_text("hi<a></a>", encoding="utf-8")

        assert main(["check", str(path)]) == 0
        out = capsys.readouterr().out
        assert f"OK   {path}: 1 top-level nodes" in out
        assert "orphaned content 1" in out

    def test_parse_deep_document_as_tree(self, tmp_path, capsys):
        """Test the outline of a document nested past the recursion limit."""
        depth = 3000
        path = tmp_path / "deep.xml"
        path.write_text("<n>" * depth + "</n>" * depth, encoding="utf-8")

        assert main(["parse", str(path), "--format", "tree"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == depth + 1
        assert lines[-1] == "  " * (depth - 1) + "<n>"

    def test_parse_deep_document_as_json_fails_cleanly(self, tmp_path, capsys):
        """Test that JSON output too deep to encode is reported, not raised."""
        depth = 3000
        path = tmp_path / "deep.xml"
        path.write_text("<n>" * depth + "</n>" * depth, encoding="utf-8")

        assert main(["parse", str(path)]) == 1
        assert "too deep for JSON output" in capsys.readouterr().err

    def test_benchmark(self, xml_file, capsys):
        """Test benchmark command on a file."""
        assert main(["benchmark", str(xml_file), "--runs", "2", "--warmup", "0"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["test_cases"][str(xml_file)]["runs"] == 2

    def test_benchmark_rejects_invalid_runs(self, capsys):
        """Test invalid run counts."""
        assert main(["benchmark", "--runs", "0"]) == 1
        assert "benchmark_runs must be > 0" in capsys.readouterr().err

    def test_keyboard_interrupt(self, xml_file):
        """Test interrupted commands return 130."""
        with patch("light_xml_parser.cli.main.cmd_parse", side_effect=KeyboardInterrupt):
            assert main(["parse", str(xml_file)]) == 130
