"""Performance benchmarking for the light XML parser.

Runs the parser over a set of documents, measuring wall time and the change
in resident memory of the current process.
"""

import gc
import os
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import psutil

from light_xml_parser.api import XMLParser
from light_xml_parser.shared import ParserConfig, XMLParseError, get_logger

BYTES_PER_MB = 1024 * 1024


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    nodes_generated: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Parser Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        """Get all results for a specific test case."""
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, test_case: str, metric: str) -> Dict[str, float]:
        """Get statistical analysis of one metric for a test case."""
        values = [
            getattr(r, metric) for r in self.get_results_by_test_case(test_case)
            if r.success
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate a report with per-test-case statistics."""
        test_cases = sorted(set(r.test_case for r in self.results))
        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "test_cases": {},
        }

        for test_case in test_cases:
            case_results = self.get_results_by_test_case(test_case)
            failures = [r for r in case_results if not r.success]
            report["test_cases"][test_case] = {
                "runs": len(case_results),
                "failures": len(failures),
                "error": failures[0].error_message if failures else None,
                "processing_time_ms": self.get_statistics(test_case, "processing_time_ms"),
                "characters_per_second": self.get_statistics(
                    test_case, "characters_per_second"
                ),
                "memory_used_mb": self.get_statistics(test_case, "memory_used_mb"),
            }

        return report


class ParserBenchmark:
    """Benchmark runner for XMLParser."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10
    ) -> None:
        """Initialize benchmark.

        Args:
            config: Parser configuration to benchmark
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of measured runs per test case
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")

        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.parser = XMLParser(config, correlation_id)
        self.process = psutil.Process(os.getpid())
        self.test_cases = self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, str]:
        items = "\n".join(
            f'    <item id="{i}" class="row entry">Item {i}<flag/></item>'
            for i in range(500)
        )
        nested = "".join(f"<level{i}>" for i in range(200))
        nested += "deep" + "".join(f"</level{i}>" for i in reversed(range(200)))
        return {
            "small": (
                '<?xml version="1.0" encoding="UTF-8"?>\n'
                "<root>\n"
                '    <element attr="value">Content</element>\n'
                "    <empty/>\n"
                "    <!-- Comment -->\n"
                "    <![CDATA[<raw> & text]]>\n"
                "</root>"
            ),
            "wide": f"<list>\n{items}\n</list>",
            "deep": nested,
        }

    def _memory_mb(self) -> float:
        return self.process.memory_info().rss / BYTES_PER_MB

    def run_case(self, test_case: str, document: str) -> BenchmarkResult:
        """Run one measured parse of ``document``."""
        gc.collect()
        memory_before = self._memory_mb()
        start_time = time.perf_counter()
        try:
            nodes = self.parser.parse(document)
        except XMLParseError as e:
            return BenchmarkResult(
                test_case=test_case,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                memory_used_mb=0.0,
                characters_processed=len(document),
                nodes_generated=0,
                success=False,
                error_message=str(e),
            )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return BenchmarkResult(
            test_case=test_case,
            processing_time_ms=elapsed_ms,
            memory_used_mb=max(0.0, self._memory_mb() - memory_before),
            characters_processed=len(document),
            nodes_generated=sum(sum(1 for _ in node.iter()) for node in nodes),
            success=True,
        )

    def run(self, documents: Optional[Dict[str, str]] = None) -> BenchmarkSuite:
        """Benchmark every document and collect the results.

        Args:
            documents: Mapping of test case name to document text; the
                built-in cases are used when omitted
        """
        documents = documents if documents is not None else self.test_cases
        suite = BenchmarkSuite()

        for test_case, document in documents.items():
            self.logger.info(
                "Benchmarking test case",
                extra={"test_case": test_case, "length": len(document)}
            )
            for _ in range(self.warmup_runs):
                self.run_case(test_case, document)
            for _ in range(self.benchmark_runs):
                suite.add_result(self.run_case(test_case, document))

        return suite
