import math
import random
from typing import Optional

from rsa_exponent_bench.errors import KeyGenerationError, ModularInverseError

# Odd primes below 1000, used for trial division before Miller-Rabin
_SMALL_PRIMES = tuple(
    p for p in range(3, 1000, 2)
    if all(p % f for f in range(3, math.isqrt(p) + 1, 2))
)


def is_prime(n: int, iterations: int = 10, rng: Optional[random.Random] = None) -> bool:
    """
    Miller-Rabin probabilistic primality test, preceded by trial division.

    Args:
        n (int): The number to test for primality.
        iterations (int): Number of Miller-Rabin rounds (higher = more accurate).
        rng (random.Random, optional): Source of the random witnesses. Defaults to the
                                       module-level generator of the `random` module.

    Returns:
        bool: True if n is probably prime, False if n is definitely composite.
    """
    # Handle trivial cases
    if n < 2:
        return False

    if n == 2:
        return True

    if n % 2 == 0:
        return False

    for small_prime in _SMALL_PRIMES:
        if n == small_prime:
            return True
        if n % small_prime == 0:
            return False

    # No factor below the square root: n is certainly prime
    if n < _SMALL_PRIMES[-1] ** 2:
        return True

    randrange = (rng or random).randrange

    # Write n-1 as d * 2^r where d is odd
    r, d = 0, n - 1
    while d % 2 == 0:
        r += 1
        d //= 2

    # Perform Miller-Rabin test iterations
    for _ in range(iterations):
        a = randrange(2, n - 1)
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue

        # Square x repeatedly r-1 times
        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1: break
        else:
            # If we never found x == n-1, n is composite
            return False
    return True


def miller_rabin_rounds(certainty: int, bits: int) -> int:
    """
    Number of Miller-Rabin rounds needed so that a composite of the given size
    passes with probability at most 2^-certainty.

    Each round has an error bound of 1/4, hence ceil(certainty / 2) rounds, never
    fewer than the size-dependent floor of the JDK BigInteger table.

    Args:
        certainty (int): The certainty parameter c (error probability <= 2^-c).
        bits (int): Bit length of the candidates that will be tested.

    Returns:
        int: The number of rounds to run.
    """
    if certainty < 1:
        raise ValueError("Certainty must be at least 1.")

    if bits < 100:
        floor = 50
    elif bits < 256:
        floor = 27
    elif bits < 512:
        floor = 15
    elif bits < 768:
        floor = 8
    elif bits < 1024:
        floor = 4
    else:
        floor = 2
    return max((certainty + 1) // 2, floor)


def generate_rsa_prime(
        bits: int,
        certainty: int = 2,
        public_exponent: Optional[int] = None,
        rng: Optional[random.Random] = None,
        max_attempts: int = 10000
) -> int:
    """
    Generate a random probable prime suitable for RSA (must be odd)
    with exactly the specified bit length.

    Args:
        bits (int): The desired bit length of the prime.
        certainty (int): Certainty parameter, the error probability is at most 2^-certainty.
        public_exponent (int, optional): When given, candidates p with gcd(e, p-1) != 1 are skipped.
        rng (random.Random, optional): Randomness provider. Defaults to the `random` module.
        max_attempts (int): Maximum number of candidates to try.

    Returns:
        int: A probable prime with exactly 'bits' bits

    Raises:
        ValueError: If bits is too small to hold an odd prime with its top bit set.
        KeyGenerationError: If no prime found within max_attempts
    """
    if bits < 2:
        raise ValueError("Prime bit length must be at least 2.")

    source = rng or random
    rounds = miller_rabin_rounds(certainty, bits)

    for _ in range(max_attempts):
        # Set MSB to 1 (ensures exact bit length) and LSB to 1 (ensures odd)
        p = source.getrandbits(bits) | (1 << bits - 1) | 1
        if public_exponent is not None and math.gcd(public_exponent, p - 1) != 1:
            continue
        if is_prime(p, rounds, rng):
            return p
    raise KeyGenerationError(f"Unable to generate a {bits} bits prime after {max_attempts} attempts.")


def mod_inverse(value: int, modulus: int) -> int:
    """
    Returns value^-1 mod modulus.

    Raises:
        ModularInverseError: If gcd(value, modulus) != 1.
    """
    if math.gcd(value, modulus) != 1:
        raise ModularInverseError(f"No modular inverse: gcd(value, modulus) = {math.gcd(value, modulus)}.")
    return pow(value, -1, modulus)


def bytes_to_int(data: bytes) -> int:
    """Reads a byte string as a big-endian unsigned integer."""
    return int.from_bytes(data, "big")


def int_to_bytes(value: int, length: int) -> bytes:
    """Writes a non-negative integer as a big-endian byte string of fixed length."""
    return value.to_bytes(length, "big")


def byte_length(value: int) -> int:
    """Number of bytes needed to hold a non-negative integer, 0 for 0."""
    return (value.bit_length() + 7) // 8
