import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from rsa_exponent_bench.errors import ValidationError
from rsa_exponent_bench.utils.math import byte_length, is_prime


@dataclass(frozen=True, slots=True)
class RSAPublicKey:
    """
    Represents a RSA public key, containing only the public elements.

    The exponent is not bounded by the modulus: the transformed variant of
    a key uses e' = e * n.

    Attributes:
        n (int): The RSA modulus (the product of the two secret primes).
        e (int): The public exponent (3, 65537, or an inflated e * n).

    Raises:
        ValueError: If the key is malformed.
    """
    n: int
    e: int

    def __post_init__(self):
        # Basic constraints
        if self.n <= 0:
            raise ValueError("Modulus (n) must be positive.")
        if self.e < 3:
            raise ValueError("Public exponent (e) must be equal or greater than 3.")

        # Parity constraints
        if self.n % 2 == 0:
            raise ValueError("Modulus (n) must be odd.")
        if self.e % 2 == 0:
            raise ValueError("Public exponent (e) must be odd.")

        if is_prime(self.n):
            raise ValueError("Modulus (n) must not be a prime number.")

    @property
    def bit_length(self) -> int:
        return self.n.bit_length()

    @property
    def byte_length(self) -> int:
        """Size in bytes of a block holding any value below n."""
        return byte_length(self.n)


@dataclass(frozen=True, slots=True)
class RSAKey:
    """
    Represents an RSA private key in CRT form, with both private and public elements.

    The CRT terms are derivable from (d, p, q) but are cached so that no
    decryption has to recompute them.

    Attributes:
        n (int): The RSA modulus, product of the two secret primes.
        e (int): The public exponent (same as in the corresponding public key).
        d (int): The private exponent (multiplicative inverse of e mod φ(n)).
        p (int): First prime factor.
        q (int): Second prime factor.
        d_p (int): d mod (p - 1).
        d_q (int): d mod (q - 1).
        q_inv (int): q^-1 mod p.

    Raises:
        ValueError: If the key is malformed.
    """
    n: int
    e: int
    d: int
    p: int
    q: int
    d_p: int
    d_q: int
    q_inv: int

    def __post_init__(self):
        if self.n <= 0:
            raise ValueError("Modulus (n) must be positive.")
        if self.n % 2 == 0:
            raise ValueError("Modulus (n) must be odd.")

        if self.e < 3:
            raise ValueError("Public exponent (e) must be equal or greater than 3.")
        if self.e % 2 == 0:
            raise ValueError("Public exponent (e) must be odd.")

        if self.p <= 1:
            raise ValueError("First prime factor (p) must be strictly greater than 1.")

        if self.q <= 1:
            raise ValueError("Second prime factor (q) must be strictly greater than 1.")

        if self.p == self.q:
            raise ValueError(
                "First prime factor (p) must be different than second prime factor (q)."
            )

        if self.p * self.q != self.n:
            raise ValueError("Modulus (n) is not equal to the product of prime factors (p,q).")

        if not is_prime(self.p):
            raise ValueError("First prime factor (p) is not prime.")

        if not is_prime(self.q):
            raise ValueError("Second prime factor (q) is not prime.")

        phi = self.phi
        if math.gcd(phi, self.e) != 1:
            raise ValueError("φ(n) is not coprime to e.")

        if self.d != pow(self.e, -1, phi):
            raise ValueError(
                "Private exponent (d) is not the multiplicative inverse of e mod φ(n)."
            )

        # CRT terms
        if self.d_p != self.d % (self.p - 1):
            raise ValueError("CRT exponent (d_p) is not equal to d mod (p-1).")
        if self.d_q != self.d % (self.q - 1):
            raise ValueError("CRT exponent (d_q) is not equal to d mod (q-1).")
        if self.q_inv != pow(self.q, -1, self.p):
            raise ValueError("CRT coefficient (q_inv) is not the inverse of q mod p.")

    @property
    def phi(self) -> int:
        """Euler's totient φ(n) = (p-1)(q-1)."""
        return (self.p - 1) * (self.q - 1)

    @property
    def public_key(self) -> RSAPublicKey:
        """Returns the public part of the key as an RSAPublicKey instance."""
        return RSAPublicKey(n=self.n, e=self.e)


@dataclass(frozen=True, slots=True)
class KeyPair:
    """
    A public key and the private key it was built with.

    Both halves are constructed together and must share the same modulus and exponent.
    """
    public_key: RSAPublicKey
    private_key: RSAKey

    def __post_init__(self):
        if self.public_key.n != self.private_key.n:
            raise ValueError("Public and private keys must share the same modulus (n).")
        if self.public_key.e != self.private_key.e:
            raise ValueError("Public and private keys must share the same public exponent (e).")


@dataclass(frozen=True, slots=True)
class TimingSample:
    """
    Elapsed wall-clock time of a batch of identical operations.

    Attributes:
        elapsed (float): Total time of the batch, in seconds.
        iterations (int): Number of operations in the batch.

    Raises:
        ValueError: If the time is negative or not finite, or the batch is empty.
    """
    elapsed: float
    iterations: int

    def __post_init__(self):
        if not np.isfinite(self.elapsed):
            raise ValueError("Elapsed time must be finite.")
        if self.elapsed < 0:
            raise ValueError("Elapsed time cannot be negative.")
        if self.iterations < 1:
            raise ValueError("Iterations must be at least 1.")

    @property
    def per_operation(self) -> float:
        """Average time of one operation, in seconds."""
        return self.elapsed / self.iterations


@dataclass(frozen=True, slots=True)
class RoundTripResult:
    """
    Outcome of encrypting then decrypting one plaintext.

    Attributes:
        ciphertext (bytes): The ciphertext produced by the encryption.
        recovered (bytes): The decryption of the ciphertext.
        error (ValidationError, optional): Set when the recovered value differs from the plaintext.
    """
    ciphertext: bytes
    recovered: bytes
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass(frozen=True, slots=True)
class PhaseTiming:
    """
    Average encryption and decryption time per operation for one RSA variant.

    Raises:
        ValueError: If an average is negative or not finite.
    """
    encrypt: float
    decrypt: float

    def __post_init__(self):
        for name, value in (("encryption", self.encrypt), ("decryption", self.decrypt)):
            if not np.isfinite(value):
                raise ValueError(f"Average {name} time must be finite.")
            if value < 0:
                raise ValueError(f"Average {name} time cannot be negative.")


@dataclass(frozen=True, slots=True)
class KeyTiming:
    """Per-key measurements of one benchmark phase."""
    key_index: int
    variant: str
    encrypt: TimingSample
    decrypt: TimingSample


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    """
    Aggregated timings for one public exponent.

    Attributes:
        public_exponent (int): The conventional exponent the keys were generated with.
        key_length (int): Bit length of the moduli.
        num_keys (int): Number of independent keys measured.
        ops_per_key (int): Number of operations timed per key and per operation type.
        original (PhaseTiming): Averages with the conventional exponent e.
        transformed (PhaseTiming): Averages with the inflated exponent e * n.
        key_timings (list[KeyTiming]): The per-key samples the averages were computed from.
    """
    public_exponent: int
    key_length: int
    num_keys: int
    ops_per_key: int
    original: PhaseTiming
    transformed: PhaseTiming
    key_timings: list[KeyTiming] = field(default_factory=list)
