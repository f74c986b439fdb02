import random
from typing import Optional

from rsa_exponent_bench.core import KeyPair, RSAKey, RSAPublicKey
from rsa_exponent_bench.errors import KeyGenerationError
from rsa_exponent_bench.utils.math import generate_rsa_prime, mod_inverse

# IEEE P1363 (A.15.2) certainty: a composite passes with probability <= 2^-2
DEFAULT_CERTAINTY = 2


def build_private_key(p: int, q: int, public_exponent: int) -> RSAKey:
    """
    Assembles an RSA private key in CRT form from two primes and a public exponent.

    Args:
        p (int): First prime factor.
        q (int): Second prime factor.
        public_exponent (int): The public exponent e.

    Returns:
        RSAKey: The key with n = p*q, d = e^-1 mod φ(n) and the CRT terms.

    Raises:
        ModularInverseError: If e is not invertible modulo φ(n).
    """
    n = p * q
    phi = (p - 1) * (q - 1)

    d = mod_inverse(public_exponent, phi)

    # CRT terms
    d_p = d % (p - 1)
    d_q = d % (q - 1)
    q_inv = mod_inverse(q, p)

    return RSAKey(n, public_exponent, d, p, q, d_p, d_q, q_inv)


class RSAKeyGenerator:
    """
    Utility class to generate RSA key pairs.
    """

    @staticmethod
    def generate_keypair(
            key_length: int,
            public_exponent: int = 65537,
            certainty: int = DEFAULT_CERTAINTY,
            max_attempts: int = 1000,
            rng: Optional[random.Random] = None
    ) -> KeyPair:
        """
        Generate a new RSA key pair with the specified bit length.

        Args:
            key_length (int): Desired bit length of the RSA modulus (e.g., 2048).
            public_exponent (int): The public exponent (e). Defaults to 65537.
            certainty (int): Primality certainty, the error probability is at most 2^-certainty.
            max_attempts (int): The maximum number of prime pairs to try. Defaults to 1000.
            rng (random.Random, optional): Randomness provider. Pass random.Random(seed)
                                           for reproducible keys. Defaults to random.SystemRandom().

        Returns:
            KeyPair: The public key and the CRT private key built together.

        Raises:
            ValueError: If public_exponent or key_length is invalid.
            KeyGenerationError: If no suitable prime pair is found after max_attempts, or
                                if a single prime search runs out of candidates. The
                                latter aborts the whole search.
        """
        if public_exponent < 3 or public_exponent % 2 == 0:
            raise ValueError("Public exponent must be odd and equal or greater than 3.")
        if key_length < 8:
            raise ValueError("Key length must be at least 8 bits.")
        if max_attempts < 1:
            raise ValueError("Max attempts must be at least 1.")

        if rng is None:
            rng = random.SystemRandom()

        e = public_exponent
        p_length = (key_length + 1) // 2
        q_length = key_length - p_length

        # Loop until the generated key pair respect the proper constraints or the
        # max attempts limit is reached
        for _ in range(max_attempts):
            # Candidates with gcd(e, p-1) != 1 are skipped, so e is always invertible.
            # A prime search that runs out of candidates propagates its error.
            p = generate_rsa_prime(p_length, certainty, public_exponent=e, rng=rng)
            q = generate_rsa_prime(q_length, certainty, public_exponent=e, rng=rng)

            # Ensure primes are distinct
            if p == q:
                continue

            # Modulus must have exactly the desired bit length
            if (p * q).bit_length() != key_length:
                continue

            private_key = build_private_key(p, q, e)
            return KeyPair(RSAPublicKey(private_key.n, private_key.e), private_key)

        raise KeyGenerationError(f"Unable to generate suitable RSA key pair after {max_attempts} attempts")
