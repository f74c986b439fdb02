import math

from rsa_exponent_bench.core import KeyPair, RSAKey, RSAPublicKey
from rsa_exponent_bench.errors import ModularInverseError


def transform_private_key(key: RSAKey) -> RSAKey:
    """
    Derives the "transformed" variant of a private key: same primes and modulus,
    public exponent multiplied by the modulus.

    The original key is left untouched. Only the exponents change; q_inv depends
    on p and q alone and is carried over.

    Args:
        key (RSAKey): The key to transform.

    Returns:
        RSAKey: The key with e' = e * n, d' = e'^-1 mod φ(n) and the matching CRT exponents.

    Raises:
        ModularInverseError: If gcd(e * n, φ(n)) != 1. The original e was only checked
                             against φ(n), while e * n also needs gcd(n, φ(n)) = 1.
    """
    phi = key.phi
    inflated_e = key.e * key.n

    divisor = math.gcd(inflated_e, phi)
    if divisor != 1:
        raise ModularInverseError(
            f"Inflated exponent e*n is not invertible mod φ(n): gcd(e*n, φ(n)) = {divisor}."
        )

    inflated_d = pow(inflated_e, -1, phi)
    return RSAKey(
        n=key.n,
        e=inflated_e,
        d=inflated_d,
        p=key.p,
        q=key.q,
        d_p=inflated_d % (key.p - 1),
        d_q=inflated_d % (key.q - 1),
        q_inv=key.q_inv,
    )


def transform_keypair(keypair: KeyPair) -> KeyPair:
    """Transforms the private key of a pair and builds the matching public key."""
    private_key = transform_private_key(keypair.private_key)
    return KeyPair(RSAPublicKey(private_key.n, private_key.e), private_key)
