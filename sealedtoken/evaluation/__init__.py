"""
Evaluation and benchmarking tools for sealedtoken.
"""

from .benchmark import (
    PerformanceBenchmark,
    BenchmarkResult,
    TimingResult,
    run_comprehensive_benchmark
)
