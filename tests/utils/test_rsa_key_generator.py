import math
import random

import pytest
from rsa_exponent_bench.core import KeyPair, RSAKey, RSAPublicKey
from rsa_exponent_bench.errors import KeyGenerationError, ModularInverseError
from rsa_exponent_bench.utils.rsa_key_generator import RSAKeyGenerator, build_private_key


class TestRSAKeyGenerator:
    """
    Tests for the RSAKeyGenerator utility.
    """

    @pytest.mark.parametrize("key_length", [64, 128, 255, 512])
    @pytest.mark.parametrize("public_exponent", [3, 65537])
    def test_generate_keypair_properties(self, key_length, public_exponent):
        """
        Tests that the generated key has the correct bit length and is valid.

        The validity check is implicitly performed by the RSAKey dataclass's
        __post_init__ method. The invariants are asserted again explicitly here.
        """
        keypair = RSAKeyGenerator.generate_keypair(
            key_length=key_length, public_exponent=public_exponent, rng=random.Random(key_length)
        )

        assert isinstance(keypair, KeyPair)
        assert isinstance(keypair.private_key, RSAKey)
        assert isinstance(keypair.public_key, RSAPublicKey)

        key = keypair.private_key
        phi = (key.p - 1) * (key.q - 1)

        assert key.n.bit_length() == key_length
        assert key.n == key.p * key.q
        assert key.p != key.q
        assert math.gcd(key.e, phi) == 1
        assert (key.d * key.e) % phi == 1
        assert key.d_p == key.d % (key.p - 1)
        assert key.d_q == key.d % (key.q - 1)
        assert (key.q * key.q_inv) % key.p == 1

    def test_keypair_halves_share_modulus(self):
        """The public key is built together with the private key."""
        keypair = RSAKeyGenerator.generate_keypair(key_length=128, rng=random.Random(1))
        assert keypair.public_key.n == keypair.private_key.n
        assert keypair.public_key.e == keypair.private_key.e == 65537

    def test_generate_keypair_is_deterministic_with_seed(self):
        """
        Tests that generate_keypair produces the same key for the same seed,
        and different keys for different seeds.
        """
        key1 = RSAKeyGenerator.generate_keypair(key_length=64, rng=random.Random(42))
        key2 = RSAKeyGenerator.generate_keypair(key_length=64, rng=random.Random(42))
        key3 = RSAKeyGenerator.generate_keypair(key_length=64, rng=random.Random(43))

        assert key1 == key2
        assert key1 != key3

    def test_generate_keypair_with_invalid_exponent_raises_error(self):
        """
        Tests that providing an invalid public exponent raises a ValueError.
        """
        with pytest.raises(ValueError, match="Public exponent must be odd"):
            RSAKeyGenerator.generate_keypair(key_length=64, public_exponent=65536)  # Even exponent
        with pytest.raises(ValueError, match="Public exponent must be odd"):
            RSAKeyGenerator.generate_keypair(key_length=64, public_exponent=1)

    def test_generate_keypair_with_invalid_length_raises_error(self):
        with pytest.raises(ValueError, match="Key length"):
            RSAKeyGenerator.generate_keypair(key_length=4)

    def test_generate_keypair_exhaustion_raises_error(self):
        """
        With 8 bits keys and e=3, 11 is the only usable 4 bits prime (13 - 1 is
        divisible by 3), so p == q on every attempt and the bounded search fails.
        """
        with pytest.raises(KeyGenerationError, match="after 25 attempts"):
            RSAKeyGenerator.generate_keypair(
                key_length=8, public_exponent=3, max_attempts=25, rng=random.Random(0)
            )

    def test_prime_candidate_exhaustion_aborts_search(self):
        """
        With e=15 no 4 bits candidate qualifies: 11 and 13 share a factor of p-1
        with 15, and 9 and 15 are composite. The first prime search fails and no
        further prime pair is tried.
        """
        with pytest.raises(KeyGenerationError, match="4 bits prime after 10000 attempts"):
            RSAKeyGenerator.generate_keypair(
                key_length=8, public_exponent=15, max_attempts=1000, rng=random.Random(0)
            )


class TestBuildPrivateKey:
    """Tests for assembling a CRT key from its primes."""

    def test_reference_key(self):
        key = build_private_key(11, 13, 7)
        assert key == RSAKey(n=143, e=7, d=103, p=11, q=13, d_p=3, d_q=7, q_inv=6)

    def test_non_invertible_exponent_raises_error(self):
        # φ(35) = 24 is divisible by 3
        with pytest.raises(ModularInverseError):
            build_private_key(5, 7, 3)
