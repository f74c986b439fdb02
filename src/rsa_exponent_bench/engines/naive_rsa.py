from rsa_exponent_bench.core import RawRSAInterface, RSAKey


class NaiveRawRSA(RawRSAInterface):
    """
    Textbook RSA decrypting with a single full-size exponentiation c^d mod n.

    Used as the reference implementation the CRT engine is checked against.
    """

    def _private_exponentiation(self, ciphertext: int, private_key: RSAKey) -> int:
        return pow(ciphertext, private_key.d, private_key.n)
