from properties.generators import (
    GeneratorConfig,
    GeneratorMode,
    SequenceGenerator,
    UniqueSequenceGenerator,
    EdgeCaseGenerator,
    TestCaseGenerator,
    DiffTestCase,
    generate_test_cases
)

from properties.benchmark import (
    BenchmarkResult,
    Timer,
    DataGenerator,
    Benchmark,
    ScalingBenchmark,
    CorrectnessCheck,
    run_quick_benchmark,
    run_full_benchmark
)


__all__ = [
    "GeneratorConfig",
    "GeneratorMode",
    "SequenceGenerator",
    "UniqueSequenceGenerator",
    "EdgeCaseGenerator",
    "TestCaseGenerator",
    "DiffTestCase",
    "generate_test_cases",
    "BenchmarkResult",
    "Timer",
    "DataGenerator",
    "Benchmark",
    "ScalingBenchmark",
    "CorrectnessCheck",
    "run_quick_benchmark",
    "run_full_benchmark"
]
