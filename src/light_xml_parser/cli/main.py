"""Main CLI entry point for the light-xml command-line tool.

Provides parsing, checking and benchmarking of XML files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from light_xml_parser import __version__
from light_xml_parser.api import XMLParser
from light_xml_parser.shared.config import ConfigError, ParserConfig
from light_xml_parser.shared.errors import XMLParseError
from light_xml_parser.shared.logging import get_logger
from light_xml_parser.tools.benchmarks import ParserBenchmark
from light_xml_parser.tree.nodes import format_tree, nodes_to_dicts


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig.default()
        self.output_format = "json"
        self.encoding = "utf-8"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Expected keys: ``parser`` (ParserConfig fields), ``output_format``
        and ``encoding``. Unreadable files leave the defaults in place.
        """
        config = cls()
        if config_path.exists():
            try:
                with config_path.open(encoding="utf-8") as f:
                    data = json.load(f)
                if "parser" in data:
                    config.parser_config = ParserConfig.from_dict(data["parser"])
                config.output_format = data.get("output_format", config.output_format)
                config.encoding = data.get("encoding", config.encoding)

            except (OSError, ValueError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class FileProcessor:
    """Parses files for the CLI commands."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.parser = XMLParser(config=config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single file and return a result record."""
        try:
            nodes = self.parser.parse_file(file_path, self.config.encoding)
        except (OSError, UnicodeDecodeError, XMLParseError) as e:
            self.logger.debug("Failed to process file", extra={"file": str(file_path)})
            return {
                "file": str(file_path),
                "success": False,
                "error": str(e),
            }

        metrics = self.parser.last_metrics
        return {
            "file": str(file_path),
            "success": True,
            "node_count": len(nodes),
            "nodes": nodes,
            "metrics": metrics.to_dict() if metrics else None,
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="light-xml",
        description="Minimal XML parser producing a tree of typed nodes"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse XML files and print the nodes")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to parse"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "tree"],
        default=None,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check that XML files parse")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to check"
    )

    # Benchmark command
    benchmark_parser = subparsers.add_parser("benchmark", help="Benchmark the parser")
    benchmark_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="XML files to benchmark (default: built-in documents)"
    )
    benchmark_parser.add_argument(
        "--runs", "-n",
        type=int,
        default=10,
        help="Measured runs per document (default: 10)"
    )
    benchmark_parser.add_argument(
        "--warmup",
        type=int,
        default=3,
        help="Warmup runs per document (default: 3)"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format parse results for output."""
    if format_type == "tree":
        lines = []
        for result in results:
            lines.append(f"== {result['file']}")
            if result["success"]:
                lines.append(format_tree(result["nodes"]))
            else:
                lines.append(f"Error: {result['error']}")
        return "\n".join(lines)

    serializable = []
    for result in results:
        record = dict(result)
        if "nodes" in record:
            record["nodes"] = nodes_to_dicts(record["nodes"])
        serializable.append(record)
    return json.dumps(serializable, indent=2)


def cmd_parse(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle parse command."""
    if args.format:
        config.output_format = args.format

    processor = FileProcessor(config)
    results = [processor.process_single_file(path) for path in args.paths]
    try:
        formatted_output = format_results(results, config.output_format)
    except RecursionError:
        # json.dumps recurses once per nesting level
        print(
            "Error: document nesting is too deep for JSON output, use --format tree",
            file=sys.stderr
        )
        return 1

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    return 0 if all(r["success"] for r in results) else 1


def cmd_check(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle check command."""
    processor = FileProcessor(config)
    failures = 0

    for path in args.paths:
        result = processor.process_single_file(path)
        if result["success"]:
            metrics = result["metrics"] or {}
            note = ""
            if metrics and (
                metrics["discarded_entries"]
                or metrics["unmatched_end_tags"]
                or metrics["orphaned_content"]
            ):
                note = (
                    f" (discarded {metrics['discarded_entries']}, "
                    f"unmatched end tags {metrics['unmatched_end_tags']}, "
                    f"orphaned content {metrics['orphaned_content']})"
                )
            print(f"OK   {path}: {result['node_count']} top-level nodes{note}")
        else:
            failures += 1
            print(f"FAIL {path}: {result['error']}")

    print(f"Checked {len(args.paths)} files, {failures} failed", file=sys.stderr)
    return 0 if failures == 0 else 1


def cmd_benchmark(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle benchmark command."""
    try:
        benchmark = ParserBenchmark(
            config=config.parser_config,
            warmup_runs=args.warmup,
            benchmark_runs=args.runs,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    documents = None
    if args.paths:
        try:
            documents = {
                str(path): path.read_text(encoding=config.encoding) for path in args.paths
            }
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading input: {e}", file=sys.stderr)
            return 1

    suite = benchmark.run(documents)
    print(json.dumps(suite.generate_report(), indent=2))
    return 0 if all(r.success for r in suite.results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=config.parser_config.logging_level)

    try:
        if args.command == "parse":
            return cmd_parse(args, config)
        if args.command == "check":
            return cmd_check(args, config)
        if args.command == "benchmark":
            return cmd_benchmark(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
