import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from rsa_exponent_bench.core import (
    BenchmarkResult,
    KeyPair,
    KeyTiming,
    PhaseTiming,
    RawRSAInterface,
)
from rsa_exponent_bench.engines import CRTRawRSA
from rsa_exponent_bench.utils.key_transformer import transform_keypair
from rsa_exponent_bench.utils.plaintext_sampler import PlaintextSampler
from rsa_exponent_bench.utils.rsa_key_generator import DEFAULT_CERTAINTY, RSAKeyGenerator
from rsa_exponent_bench.utils.timing_data_collector import TimingDataCollector

ORIGINAL = "original"
TRANSFORMED = "transformed"


@dataclass(frozen=True)
class BenchmarkConfig:
    """Parameters of a complete benchmark run."""
    exponents: Tuple[int, ...] = (3, 65537)
    num_keys: int = 10
    ops_per_key: int = 100
    key_length: int = 2048
    certainty: int = DEFAULT_CERTAINTY
    seed: Optional[int] = None
    verbose: bool = False

    def __post_init__(self):
        if not self.exponents:
            raise ValueError("At least one public exponent is required.")
        for e in self.exponents:
            if e < 3 or e % 2 == 0:
                raise ValueError(f"Public exponent {e} must be odd and equal or greater than 3.")
        if self.num_keys < 1:
            raise ValueError("Number of keys must be at least 1.")
        if self.ops_per_key < 1:
            raise ValueError("Operations per key must be at least 1.")
        if self.certainty < 1:
            raise ValueError("Certainty must be at least 1.")

    def make_rng(self) -> random.Random:
        """A seeded generator for reproducible runs, the OS generator otherwise."""
        if self.seed is None:
            return random.SystemRandom()
        return random.Random(self.seed)


class ExponentBenchmark:
    """
    Measures raw RSA throughput of freshly generated keys, then of the same keys
    with their public exponent inflated to e * n.

    Args:
        rsa_instance (RawRSAInterface, optional): The implementation to time. Defaults to CRTRawRSA.
        key_length (int): Bit length of the generated moduli.
        certainty (int): Primality certainty of the generated primes.
        rng (random.Random, optional): Randomness shared by key generation and plaintext sampling.
        verbose (bool): Print progress information.
    """

    def __init__(
            self,
            rsa_instance: Optional[RawRSAInterface] = None,
            key_length: int = 2048,
            certainty: int = DEFAULT_CERTAINTY,
            rng: Optional[random.Random] = None,
            verbose: bool = False
    ):
        self.rsa_instance = rsa_instance if rsa_instance is not None else CRTRawRSA()
        self.key_length = key_length
        self.certainty = certainty
        self.rng = rng if rng is not None else random.SystemRandom()
        self.verbose = verbose

        self.collector = TimingDataCollector(self.rsa_instance)
        self.sampler = PlaintextSampler(self.rng)

    @classmethod
    def from_config(cls, config: BenchmarkConfig, rsa_instance: Optional[RawRSAInterface] = None) -> 'ExponentBenchmark':
        return cls(
            rsa_instance=rsa_instance,
            key_length=config.key_length,
            certainty=config.certainty,
            rng=config.make_rng(),
            verbose=config.verbose,
        )

    def run(self, public_exponent: int, num_keys: int, ops_per_key: int) -> BenchmarkResult:
        """
        Runs the benchmark for one public exponent.

        Args:
            public_exponent (int): The conventional exponent, e.g. 3 or 65537.
            num_keys (int): Number of independent keys (one plaintext each).
            ops_per_key (int): Number of timed encryptions and decryptions per key.

        Returns:
            BenchmarkResult: Per-operation averages for the original and transformed keys.

        Raises:
            ValueError: If num_keys or ops_per_key is below 1.
            ValidationError: If any round trip fails. Nothing is averaged in that case.
            ModularInverseError: If a key cannot be transformed.
            KeyGenerationError: If key generation exhausts its attempts.
        """
        if num_keys < 1:
            raise ValueError("Number of keys must be at least 1.")
        if ops_per_key < 1:
            raise ValueError("Operations per key must be at least 1.")

        if self.verbose:
            print(f"Benchmarking e = {public_exponent} with {num_keys} keys of {self.key_length} bits...")

        keypairs = self._generate_keypairs(public_exponent, num_keys)
        plaintexts = [self.sampler.sample(keypair.public_key) for keypair in keypairs]

        original_timings = self._measure(keypairs, plaintexts, ops_per_key, ORIGINAL)

        if self.verbose:
            print(f"   Transforming keys to e' = {public_exponent} * n...")
        transformed_keypairs = [transform_keypair(keypair) for keypair in keypairs]

        transformed_timings = self._measure(transformed_keypairs, plaintexts, ops_per_key, TRANSFORMED)

        return BenchmarkResult(
            public_exponent=public_exponent,
            key_length=self.key_length,
            num_keys=num_keys,
            ops_per_key=ops_per_key,
            original=_average(original_timings),
            transformed=_average(transformed_timings),
            key_timings=original_timings + transformed_timings,
        )

    def run_all(self, exponents: Iterable[int], num_keys: int, ops_per_key: int) -> List[BenchmarkResult]:
        """Runs the benchmark for each exponent in turn."""
        return [self.run(e, num_keys, ops_per_key) for e in exponents]

    def _generate_keypairs(self, public_exponent: int, num_keys: int) -> List[KeyPair]:
        keypairs = []
        for index in range(num_keys):
            if self.verbose:
                print(f"   Generating key {index + 1}/{num_keys}...")
            keypairs.append(RSAKeyGenerator.generate_keypair(
                self.key_length,
                public_exponent=public_exponent,
                certainty=self.certainty,
                rng=self.rng,
            ))
        return keypairs

    def _measure(self, keypairs: List[KeyPair], plaintexts: List[bytes], ops_per_key: int, variant: str) -> List[KeyTiming]:
        timings = []
        for index, (keypair, plaintext) in enumerate(zip(keypairs, plaintexts)):
            timing = self.collector.collect_samples(keypair, plaintext, ops_per_key, index, variant)
            if self.verbose:
                print(f"   [{variant}] key {index + 1}/{len(keypairs)}: "
                      f"enc {timing.encrypt.per_operation:.6f}s | dec {timing.decrypt.per_operation:.6f}s")
            timings.append(timing)
        return timings


def _average(timings: List[KeyTiming]) -> PhaseTiming:
    return PhaseTiming(
        encrypt=float(np.mean([t.encrypt.per_operation for t in timings])),
        decrypt=float(np.mean([t.decrypt.per_operation for t in timings])),
    )
