import math
import random

import pytest
from rsa_exponent_bench import benchmark as benchmark_module
from rsa_exponent_bench.benchmark import BenchmarkConfig, ExponentBenchmark
from rsa_exponent_bench.core import BenchmarkResult, RSAKey
from rsa_exponent_bench.engines import CRTRawRSA, NaiveRawRSA
from rsa_exponent_bench.errors import ModularInverseError, ValidationError


class _BrokenRSA(CRTRawRSA):
    """Returns the ciphertext unchanged instead of decrypting it."""

    def _private_exponentiation(self, ciphertext: int, private_key: RSAKey) -> int:
        return ciphertext


class TestBenchmarkConfig:

    def test_defaults(self):
        config = BenchmarkConfig()
        assert config.exponents == (3, 65537)
        assert config.num_keys == 10
        assert config.ops_per_key == 100
        assert config.key_length == 2048
        assert config.certainty == 2

    @pytest.mark.parametrize("kwargs, message", [
        ({"exponents": ()}, "exponent"),
        ({"exponents": (3, 4)}, "odd"),
        ({"num_keys": 0}, "[Nn]umber of keys"),
        ({"ops_per_key": 0}, "[Oo]perations per key"),
        ({"certainty": 0}, "[Cc]ertainty"),
    ])
    def test_invalid_values_raise_error(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            BenchmarkConfig(**kwargs)

    def test_seeded_rng_is_reproducible(self):
        config = BenchmarkConfig(seed=5)
        assert config.make_rng().getrandbits(64) == config.make_rng().getrandbits(64)

    def test_unseeded_rng_uses_os_entropy(self):
        assert isinstance(BenchmarkConfig().make_rng(), random.SystemRandom)


class TestExponentBenchmark:

    @pytest.fixture
    def small_benchmark(self):
        return ExponentBenchmark(key_length=256, rng=random.Random(99))

    def test_run_produces_four_averages(self, small_benchmark):
        result = small_benchmark.run(public_exponent=3, num_keys=2, ops_per_key=3)

        assert isinstance(result, BenchmarkResult)
        assert result.public_exponent == 3
        assert result.key_length == 256
        assert result.num_keys == 2
        assert result.ops_per_key == 3

        for value in (result.original.encrypt, result.original.decrypt,
                      result.transformed.encrypt, result.transformed.decrypt):
            assert value >= 0
            assert math.isfinite(value)

    def test_run_records_every_key_and_variant(self, small_benchmark):
        result = small_benchmark.run(public_exponent=65537, num_keys=3, ops_per_key=2)

        variants = [(t.variant, t.key_index) for t in result.key_timings]
        assert variants == [("original", 0), ("original", 1), ("original", 2),
                            ("transformed", 0), ("transformed", 1), ("transformed", 2)]
        assert all(t.encrypt.iterations == 2 and t.decrypt.iterations == 2 for t in result.key_timings)

    def test_averages_are_means_of_key_timings(self, small_benchmark):
        result = small_benchmark.run(public_exponent=3, num_keys=3, ops_per_key=2)
        original = [t for t in result.key_timings if t.variant == "original"]
        expected = sum(t.encrypt.per_operation for t in original) / len(original)
        assert result.original.encrypt == pytest.approx(expected)

    def test_run_all(self, small_benchmark):
        results = small_benchmark.run_all([3, 65537], num_keys=1, ops_per_key=1)
        assert [r.public_exponent for r in results] == [3, 65537]

    def test_naive_engine_can_be_benchmarked(self):
        benchmark = ExponentBenchmark(NaiveRawRSA(), key_length=128, rng=random.Random(4))
        result = benchmark.run(public_exponent=3, num_keys=1, ops_per_key=2)
        assert result.transformed.decrypt >= 0

    @pytest.mark.parametrize("num_keys, ops_per_key", [(0, 1), (1, 0), (-1, 5)])
    def test_invalid_counts_raise_error(self, small_benchmark, num_keys, ops_per_key):
        with pytest.raises(ValueError):
            small_benchmark.run(public_exponent=3, num_keys=num_keys, ops_per_key=ops_per_key)

    def test_validation_failure_aborts_run(self):
        benchmark = ExponentBenchmark(_BrokenRSA(), key_length=128, rng=random.Random(6))
        with pytest.raises(ValidationError):
            benchmark.run(public_exponent=3, num_keys=2, ops_per_key=1)

    def test_transformation_failure_aborts_run(self, small_benchmark, monkeypatch):
        def refuse(keypair):
            raise ModularInverseError("gcd(e*n, φ(n)) = 3")

        monkeypatch.setattr(benchmark_module, "transform_keypair", refuse)
        with pytest.raises(ModularInverseError):
            small_benchmark.run(public_exponent=3, num_keys=1, ops_per_key=1)

    def test_from_config(self):
        config = BenchmarkConfig(exponents=(3,), num_keys=1, ops_per_key=1, key_length=128, seed=1)
        benchmark = ExponentBenchmark.from_config(config)

        assert isinstance(benchmark.rsa_instance, CRTRawRSA)
        assert benchmark.key_length == 128
        assert benchmark.run_all(config.exponents, config.num_keys, config.ops_per_key)[0].key_length == 128

    def test_verbose_output(self, capsys):
        benchmark = ExponentBenchmark(key_length=128, rng=random.Random(8), verbose=True)
        benchmark.run(public_exponent=3, num_keys=1, ops_per_key=1)

        out = capsys.readouterr().out
        assert "Benchmarking e = 3" in out
        assert "[original]" in out
        assert "[transformed]" in out
