"""Developer tools for the light XML parser."""

from .benchmarks import BenchmarkResult, BenchmarkSuite, ParserBenchmark

__all__ = ["BenchmarkResult", "BenchmarkSuite", "ParserBenchmark"]
