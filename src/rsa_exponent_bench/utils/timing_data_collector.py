from rsa_exponent_bench.core import RawRSAInterface, KeyPair, KeyTiming


class TimingDataCollector:
    """
    Collects encryption and decryption timings for a single key.
    Its sole responsibility is to validate the key on its plaintext and time it.
    """

    def __init__(self, rsa_instance: RawRSAInterface):
        self.rsa_instance = rsa_instance

    def collect_samples(
            self,
            keypair: KeyPair,
            plaintext: bytes,
            iterations: int,
            key_index: int = 0,
            variant: str = "original"
    ) -> KeyTiming:
        """
        Validates the round trip, then times `iterations` encryptions of the plaintext
        and `iterations` decryptions of its ciphertext.

        Args:
            keypair (KeyPair): The key to measure.
            plaintext (bytes): The plaintext block, value below the modulus.
            iterations (int): Number of operations per batch.
            key_index (int): Position of the key in the benchmark, for reporting.
            variant (str): "original" or "transformed", for reporting.

        Returns:
            KeyTiming: The encryption and decryption batches.

        Raises:
            ValidationError: If decrypt(encrypt(plaintext)) differs from the plaintext.
        """
        if iterations <= 0:
            raise ValueError("Number of iterations must be positive.")

        round_trip = self.rsa_instance.validate_round_trip(plaintext, keypair.public_key, keypair.private_key)
        round_trip.raise_for_error()

        # Fresh ciphertexts are discarded, decryption always reuses the validated one
        _, encrypt_sample = self.rsa_instance.timed_encrypt(plaintext, keypair.public_key, iterations)
        _, decrypt_sample = self.rsa_instance.timed_decrypt(round_trip.ciphertext, keypair.private_key, iterations)

        return KeyTiming(key_index, variant, encrypt_sample, decrypt_sample)
