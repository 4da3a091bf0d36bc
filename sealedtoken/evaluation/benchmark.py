"""
Benchmark module for performance evaluation of sealedtoken.

This module measures encryption/decryption throughput, memory usage and
envelope overhead, and checks that tag verification time does not depend on
where a candidate tag differs from the expected one.
"""

import gc
import logging
import math
import statistics
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import psutil

from ..crypto.algorithms import CipherAlgorithm, HashAlgorithm, DEFAULT_CIPHER, DEFAULT_HASH
from ..crypto.kdf import generate_secret
from ..crypto.mac import MacEngine
from ..crypto.utils import generate_random_bytes
from ..protocol.encryptor import Encryptor


logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Container for benchmark results."""
    name: str
    algorithm: str
    message_size: int
    iterations: int
    total_time: float
    avg_time: float
    throughput_mbps: float
    memory_usage: Optional[Dict[str, float]] = None
    overhead_bytes: Optional[int] = None
    overhead_percent: Optional[float] = None


@dataclass
class TimingResult:
    """Verification timing for early vs. late tag mismatches."""
    samples: int
    first_byte_mean: float
    first_byte_stdev: float
    last_byte_mean: float
    last_byte_stdev: float
    t_statistic: float

    @property
    def distinguishable(self) -> bool:
        """Whether the two distributions differ at roughly the 99.99% level."""
        return abs(self.t_statistic) > 4.5


def welch_t(a: List[float], b: List[float]) -> float:
    """
    Welch's t statistic for two independent samples.

    Args:
        a: First sample (at least two values)
        b: Second sample (at least two values)

    Returns:
        t statistic, 0.0 when both samples have zero variance
    """
    var_a = statistics.variance(a)
    var_b = statistics.variance(b)
    denominator = math.sqrt(var_a / len(a) + var_b / len(b))
    if denominator == 0:
        return 0.0
    return (statistics.mean(a) - statistics.mean(b)) / denominator


class PerformanceBenchmark:
    """
    Performance benchmarking for sealedtoken encryptors.
    """

    def __init__(self, cipher_algorithm: Union[str, CipherAlgorithm] = DEFAULT_CIPHER,
                 hash_algorithm: Union[str, HashAlgorithm] = DEFAULT_HASH):
        """
        Initialize benchmark suite.

        Args:
            cipher_algorithm: Cipher to benchmark
            hash_algorithm: Digest to benchmark
        """
        self.encryptor = Encryptor(generate_secret(), cipher_algorithm, hash_algorithm)
        self.algorithm = "{cipher}+hmac-{hash}".format(**self.encryptor.config.describe())
        self.results: List[BenchmarkResult] = []

    def measure_memory_usage(self) -> Dict[str, float]:
        """
        Measure current memory usage.

        Returns:
            Dictionary with memory statistics in MB
        """
        process = psutil.Process()
        memory_info = process.memory_info()

        return {
            'rss': memory_info.rss / 1024 / 1024,  # MB
            'vms': memory_info.vms / 1024 / 1024,  # MB
            'percent': process.memory_percent()
        }

    def _run(self, name: str, size: int, iterations: int, operation) -> BenchmarkResult:
        gc.collect()
        memory_before = self.measure_memory_usage()

        start_time = time.perf_counter()
        for _ in range(iterations):
            operation()
        total_time = time.perf_counter() - start_time

        memory_after = self.measure_memory_usage()

        result = BenchmarkResult(
            name=f"{name}-{self.algorithm}-{size}B",
            algorithm=self.algorithm,
            message_size=size,
            iterations=iterations,
            total_time=total_time,
            avg_time=total_time / iterations,
            throughput_mbps=(size * iterations) / total_time / 1024 / 1024 if total_time else 0.0,
            memory_usage={
                'rss_delta': memory_after['rss'] - memory_before['rss'],
                'vms_delta': memory_after['vms'] - memory_before['vms']
            }
        )
        self.results.append(result)
        return result

    def benchmark_encryption_performance(self, message_sizes: List[int],
                                         iterations: int = 1000) -> List[BenchmarkResult]:
        """
        Benchmark encryption performance across different message sizes.

        Args:
            message_sizes: List of message sizes to test
            iterations: Number of iterations per size

        Returns:
            List of benchmark results
        """
        results = []

        for size in message_sizes:
            plaintext = generate_random_bytes(size)
            result = self._run("Encryption", size, iterations,
                               lambda: self.encryptor.encrypt(plaintext))

            token_size = len(self.encryptor.encrypt(plaintext))
            result.overhead_bytes = token_size - size
            result.overhead_percent = (result.overhead_bytes / size * 100) if size else None
            results.append(result)

        return results

    def benchmark_decryption_performance(self, message_sizes: List[int],
                                         iterations: int = 1000) -> List[BenchmarkResult]:
        """
        Benchmark decryption performance across different message sizes.

        Args:
            message_sizes: List of message sizes to test
            iterations: Number of iterations per size

        Returns:
            List of benchmark results
        """
        results = []

        for size in message_sizes:
            token = self.encryptor.encrypt(generate_random_bytes(size))
            results.append(self._run("Decryption", size, iterations,
                                     lambda: self.encryptor.decrypt(token)))

        return results

    def measure_verify_timing(self, samples: int = 2000,
                              message_size: int = 256) -> TimingResult:
        """
        Time tag verification for candidates wrong in the first vs. last byte.

        Both candidate sets are interleaved so that drift in machine load
        affects them equally.

        Args:
            samples: Measurements per candidate set
            message_size: Size of the authenticated body

        Returns:
            TimingResult with per-set statistics and Welch's t statistic
        """
        if samples < 2:
            raise ValueError("At least two samples are required")

        mac = MacEngine(self.encryptor.config.hash_algorithm)
        auth_key = generate_random_bytes(mac.tag_size)
        body = generate_random_bytes(message_size)
        tag = mac.tag(auth_key, body)

        first_wrong = bytes([tag[0] ^ 0x01]) + tag[1:]
        last_wrong = tag[:-1] + bytes([tag[-1] ^ 0x01])

        first_times = []
        last_times = []
        for _ in range(samples):
            start = time.perf_counter_ns()
            mac.verify(first_wrong, auth_key, body)
            first_times.append(time.perf_counter_ns() - start)

            start = time.perf_counter_ns()
            mac.verify(last_wrong, auth_key, body)
            last_times.append(time.perf_counter_ns() - start)

        return TimingResult(
            samples=samples,
            first_byte_mean=statistics.mean(first_times),
            first_byte_stdev=statistics.stdev(first_times),
            last_byte_mean=statistics.mean(last_times),
            last_byte_stdev=statistics.stdev(last_times),
            t_statistic=welch_t(first_times, last_times),
        )

    def get_summary_report(self) -> Dict[str, Any]:
        """
        Generate summary report of all benchmark results.

        Returns:
            Summary report
        """
        if not self.results:
            return {'error': 'No benchmark results available'}

        throughputs = [r.throughput_mbps for r in self.results]
        latencies = [r.avg_time for r in self.results]

        return {
            'total_benchmarks': len(self.results),
            'algorithm': self.algorithm,
            'avg_throughput_mbps': statistics.mean(throughputs),
            'max_throughput_mbps': max(throughputs),
            'avg_latency_ms': statistics.mean(latencies) * 1000,
            'min_latency_ms': min(latencies) * 1000,
            'message_sizes_tested': sorted(set(r.message_size for r in self.results))
        }


def run_comprehensive_benchmark(quick: bool = False) -> Dict[str, Any]:
    """
    Run comprehensive benchmark suite.

    Args:
        quick: If True, run reduced test set for faster execution

    Returns:
        Complete benchmark results
    """
    benchmark = PerformanceBenchmark()

    if quick:
        message_sizes = [64, 512, 1024]
        iterations = 100
        timing_samples = 500
    else:
        message_sizes = [0, 32, 64, 128, 256, 512, 1024, 4096]
        iterations = 1000
        timing_samples = 20000

    logger.info("Benchmarking %s", benchmark.algorithm)
    encryption = benchmark.benchmark_encryption_performance(message_sizes, iterations)
    decryption = benchmark.benchmark_decryption_performance(message_sizes, iterations)

    logger.info("Measuring tag verification timing")
    timing = benchmark.measure_verify_timing(timing_samples)
    if timing.distinguishable:
        logger.warning("Verification timing differs between early and late mismatches "
                       "(t=%.2f)", timing.t_statistic)

    return {
        'summary': benchmark.get_summary_report(),
        'encryption': encryption,
        'decryption': decryption,
        'verify_timing': timing,
        'raw_results': benchmark.results
    }
