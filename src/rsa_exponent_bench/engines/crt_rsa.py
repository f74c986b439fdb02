from rsa_exponent_bench.core import RawRSAInterface, RSAKey


class CRTRawRSA(RawRSAInterface):
    """
    Textbook RSA with Chinese Remainder Theorem decryption.

    The private exponentiation is split into two exponentiations modulo p and q,
    on operands half the size of n, recombined with Garner's formula. This is
    equivalent to c^d mod n and about four times faster for large moduli.
    """

    def _private_exponentiation(self, ciphertext: int, private_key: RSAKey) -> int:
        p, q = private_key.p, private_key.q

        # Half-size exponentiations
        m_p = pow(ciphertext % p, private_key.d_p, p)
        m_q = pow(ciphertext % q, private_key.d_q, q)

        # Recombination: m = m_q + q * (q_inv * (m_p - m_q) mod p)
        h = (private_key.q_inv * (m_p - m_q)) % p
        return m_q + h * q
