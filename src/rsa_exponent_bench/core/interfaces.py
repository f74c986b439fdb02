import time
from abc import ABC, abstractmethod
from typing import Tuple

from rsa_exponent_bench.errors import InvalidInputError, ValidationError
from rsa_exponent_bench.utils.math import byte_length, bytes_to_int, int_to_bytes
from .models import RSAPublicKey, RSAKey, RoundTripResult, TimingSample


class RawRSAInterface(ABC):
    """
    Abstract interface for textbook (unpadded) RSA implementations.

    Subclasses only provide the private-key exponentiation. Block conversion,
    input checks, encryption and the timed loops are shared, so that every
    implementation is measured the same way.
    """

    @abstractmethod
    def _private_exponentiation(self, ciphertext: int, private_key: RSAKey) -> int:
        """
        Computes ciphertext^d mod n.

        Args:
            ciphertext (int): The ciphertext, already checked to be < n.
            private_key (RSAKey): The RSA private key to use.

        Returns:
            int: The recovered message.
        """
        pass

    def encrypt(self, plaintext: bytes, public_key: RSAPublicKey) -> bytes:
        """
        Encrypts a single block with no padding: c = m^e mod n.

        Args:
            plaintext (bytes): Big-endian block whose value must be < n.
            public_key (RSAPublicKey): The RSA public key to use.

        Returns:
            bytes: The ciphertext, left-padded to the byte length of the modulus.

        Raises:
            InvalidInputError: If the block is missing, empty or too large.
        """
        message = _block_to_int(plaintext, public_key.n, "Plaintext")
        return int_to_bytes(pow(message, public_key.e, public_key.n), public_key.byte_length)

    def decrypt(self, ciphertext: bytes, private_key: RSAKey) -> bytes:
        """
        Decrypts a single block with no padding.

        Args:
            ciphertext (bytes): Big-endian block whose value must be < n.
            private_key (RSAKey): The RSA private key to use.

        Returns:
            bytes: The plaintext, left-padded to the byte length of the modulus.

        Raises:
            InvalidInputError: If the block is missing, empty or too large.
        """
        value = _block_to_int(ciphertext, private_key.n, "Ciphertext")
        message = self._private_exponentiation(value, private_key)
        return int_to_bytes(message, byte_length(private_key.n))

    def timed_encrypt(self, plaintext: bytes, public_key: RSAPublicKey, iterations: int = 1) -> Tuple[bytes, TimingSample]:
        """
        Encrypts the same plaintext `iterations` times in a row.

        Returns:
            (bytes, TimingSample): The ciphertext and the elapsed time of the whole batch.
        """
        if iterations < 1:
            raise ValueError("Iterations must be at least 1.")

        start_time = time.perf_counter()
        for _ in range(iterations):
            ciphertext = self.encrypt(plaintext, public_key)
        elapsed = time.perf_counter() - start_time
        return ciphertext, TimingSample(elapsed, iterations)

    def timed_decrypt(self, ciphertext: bytes, private_key: RSAKey, iterations: int = 1) -> Tuple[bytes, TimingSample]:
        """
        Decrypts the same ciphertext `iterations` times in a row.

        Returns:
            (bytes, TimingSample): The plaintext and the elapsed time of the whole batch.
        """
        if iterations < 1:
            raise ValueError("Iterations must be at least 1.")

        start_time = time.perf_counter()
        for _ in range(iterations):
            plaintext = self.decrypt(ciphertext, private_key)
        elapsed = time.perf_counter() - start_time
        return plaintext, TimingSample(elapsed, iterations)

    def validate_round_trip(self, plaintext: bytes, public_key: RSAPublicKey, private_key: RSAKey) -> RoundTripResult:
        """
        Encrypts then decrypts the plaintext and compares the values.

        Values are compared as integers, the decrypted block is padded to the
        modulus size and may carry more leading zeros than the input.

        Returns:
            RoundTripResult: Carries a ValidationError when the values differ.
        """
        ciphertext = self.encrypt(plaintext, public_key)
        recovered = self.decrypt(ciphertext, private_key)

        error = None
        if bytes_to_int(recovered) != bytes_to_int(plaintext):
            error = ValidationError(
                f"Round trip failed for a {public_key.bit_length} bits key with e={public_key.e}: "
                "decrypted value differs from the plaintext."
            )
        return RoundTripResult(ciphertext, recovered, error)


def _block_to_int(block: bytes, modulus: int, label: str) -> int:
    if block is None:
        raise InvalidInputError(f"{label} cannot be None.")
    if len(block) == 0:
        raise InvalidInputError(f"{label} cannot be empty.")
    if len(block) > byte_length(modulus):
        raise InvalidInputError(f"{label} is longer than the modulus.")

    value = bytes_to_int(block)
    if value >= modulus:
        raise InvalidInputError(f"{label} is too large for the RSA modulus.")
    return value
