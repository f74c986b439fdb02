import random
from typing import Optional

from rsa_exponent_bench.core import RSAPublicKey
from rsa_exponent_bench.errors import SamplerExhaustedError
from rsa_exponent_bench.utils.math import bytes_to_int


class PlaintextSampler:
    """
    Draws uniformly random plaintext blocks accepted by an RSA public key.

    A block is floor(bits/8) random bytes, redrawn until its value is strictly
    below the modulus. When the bit length of n is a multiple of 8, n >= 2^(bits-1)
    so each draw is accepted with probability at least 1/2; otherwise every draw
    is already below n.

    Args:
        rng (random.Random, optional): Randomness provider. Defaults to random.SystemRandom().
        max_attempts (int): Maximum number of draws per sample. Defaults to 128.
    """

    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = 128):
        if max_attempts < 1:
            raise ValueError("Max attempts must be at least 1.")
        self.rng = rng if rng is not None else random.SystemRandom()
        self.max_attempts = max_attempts
        self.draws = 0

    def sample(self, public_key: RSAPublicKey) -> bytes:
        """
        Returns a random block whose value is in [0, n).

        The accepted bytes are returned as drawn, leading zero bytes included.

        Raises:
            ValueError: If the modulus is smaller than one byte.
            SamplerExhaustedError: If max_attempts draws were all rejected.
        """
        length = public_key.bit_length // 8
        if length == 0:
            raise ValueError("Modulus (n) is too small to sample a one byte plaintext.")

        for draw in range(1, self.max_attempts + 1):
            block = self.rng.randbytes(length)
            if bytes_to_int(block) < public_key.n:
                self.draws = draw
                return block

        self.draws = self.max_attempts
        raise SamplerExhaustedError(f"No plaintext below the modulus after {self.max_attempts} draws.")
