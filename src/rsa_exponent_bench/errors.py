class RSABenchmarkError(Exception):
    """Base class for every error raised by the benchmark."""


class InvalidInputError(RSABenchmarkError, ValueError):
    """
    Raised when a plaintext or ciphertext block cannot be processed
    (missing, empty, longer than the modulus or numerically >= n).
    """


class ModularInverseError(RSABenchmarkError, ValueError):
    """Raised when an exponent has no multiplicative inverse modulo φ(n)."""


class ValidationError(RSABenchmarkError):
    """
    Raised when decrypt(encrypt(m)) does not reproduce m.

    This always means the primitive or the key is broken, so the current
    benchmark run must be aborted rather than averaged.
    """


class KeyGenerationError(RSABenchmarkError, RuntimeError):
    """Raised when the bounded prime search fails to produce a usable key pair."""


class SamplerExhaustedError(RSABenchmarkError, RuntimeError):
    """Raised when the plaintext rejection sampler runs out of draws."""
