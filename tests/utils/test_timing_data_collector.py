import random

import pytest
from rsa_exponent_bench.core import KeyPair, KeyTiming, RSAKey
from rsa_exponent_bench.engines import CRTRawRSA
from rsa_exponent_bench.errors import ValidationError
from rsa_exponent_bench.utils.plaintext_sampler import PlaintextSampler
from rsa_exponent_bench.utils.rsa_key_generator import RSAKeyGenerator
from rsa_exponent_bench.utils.timing_data_collector import TimingDataCollector


class _OffByOneRSA(CRTRawRSA):
    """Decrypts to the wrong value, to exercise the validation step."""

    def _private_exponentiation(self, ciphertext: int, private_key: RSAKey) -> int:
        return (super()._private_exponentiation(ciphertext, private_key) + 1) % private_key.n


class TestTimingDataCollector:

    @pytest.fixture(scope="class")
    def keypair(self) -> KeyPair:
        return RSAKeyGenerator.generate_keypair(key_length=256, public_exponent=3, rng=random.Random(21))

    @pytest.fixture
    def plaintext(self, keypair) -> bytes:
        return PlaintextSampler(random.Random(22)).sample(keypair.public_key)

    def test_collect_samples(self, keypair, plaintext):
        collector = TimingDataCollector(CRTRawRSA())
        timing = collector.collect_samples(keypair, plaintext, iterations=5, key_index=3, variant="transformed")

        assert isinstance(timing, KeyTiming)
        assert timing.key_index == 3
        assert timing.variant == "transformed"
        assert timing.encrypt.iterations == 5
        assert timing.decrypt.iterations == 5
        assert timing.encrypt.per_operation >= 0
        assert timing.decrypt.per_operation >= 0

    def test_failed_round_trip_is_fatal(self, keypair, plaintext):
        collector = TimingDataCollector(_OffByOneRSA())
        with pytest.raises(ValidationError, match="[Rr]ound trip"):
            collector.collect_samples(keypair, plaintext, iterations=5)

    def test_non_positive_iterations_raise_error(self, keypair, plaintext):
        collector = TimingDataCollector(CRTRawRSA())
        with pytest.raises(ValueError, match="positive"):
            collector.collect_samples(keypair, plaintext, iterations=0)
