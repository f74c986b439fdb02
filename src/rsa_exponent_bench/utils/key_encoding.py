"""
DER encoding of RSA public keys.

Two layouts are produced, both carrying RSAPublicKey ::= SEQUENCE { modulus, publicExponent }
under the rsaEncryption algorithm identifier with a NULL parameter:

* the key-info layout, shaped like PKCS#8 PrivateKeyInfo:
  SEQUENCE { INTEGER 0, AlgorithmIdentifier, OCTET STRING RSAPublicKey }
* the X.509 SubjectPublicKeyInfo layout:
  SEQUENCE { AlgorithmIdentifier, BIT STRING RSAPublicKey }

The encoder does not require e < n, so transformed keys (e * n) can be exported too.
"""
from typing import List, Tuple

from rsa_exponent_bench.core import RSAPublicKey
from rsa_exponent_bench.utils.math import byte_length

RSA_ENCRYPTION_OID = "1.2.840.113549.1.1.1"

_INTEGER = 0x02
_BIT_STRING = 0x03
_OCTET_STRING = 0x04
_NULL = 0x05
_OBJECT_IDENTIFIER = 0x06
_SEQUENCE = 0x30


# ---------- Encoding ----------

def _der_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    encoded = length.to_bytes(byte_length(length), "big")
    return bytes([0x80 | len(encoded)]) + encoded


def _der_element(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + _der_length(len(value)) + value


def _der_integer(value: int) -> bytes:
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded.")
    # One extra byte keeps the sign bit clear
    return _der_element(_INTEGER, value.to_bytes(value.bit_length() // 8 + 1, "big"))


def _der_sequence(*elements: bytes) -> bytes:
    return _der_element(_SEQUENCE, b"".join(elements))


def _der_object_identifier(dotted: str) -> bytes:
    arcs = [int(arc) for arc in dotted.split(".")]
    body = bytearray()
    for arc in [40 * arcs[0] + arcs[1]] + arcs[2:]:
        chunk = [arc & 0x7F]
        arc >>= 7
        while arc:
            chunk.append(0x80 | (arc & 0x7F))
            arc >>= 7
        body.extend(reversed(chunk))
    return _der_element(_OBJECT_IDENTIFIER, bytes(body))


ALGORITHM_IDENTIFIER = _der_sequence(
    _der_object_identifier(RSA_ENCRYPTION_OID),
    _der_element(_NULL, b""),
)


def encode_rsa_public_key(public_key: RSAPublicKey) -> bytes:
    """Returns the PKCS#1 RSAPublicKey structure SEQUENCE { n, e }."""
    return _der_sequence(_der_integer(public_key.n), _der_integer(public_key.e))


def encode_public_key_info(public_key: RSAPublicKey) -> bytes:
    """
    Encodes a public key in the key-info layout:
    SEQUENCE { INTEGER 0, AlgorithmIdentifier, OCTET STRING RSAPublicKey }.
    """
    return _der_sequence(
        _der_integer(0),
        ALGORITHM_IDENTIFIER,
        _der_element(_OCTET_STRING, encode_rsa_public_key(public_key)),
    )


def encode_subject_public_key_info(public_key: RSAPublicKey) -> bytes:
    """
    Encodes a public key as an X.509 SubjectPublicKeyInfo, readable by standard
    tooling for conventional exponents.
    """
    # Leading byte of the BIT STRING is the number of unused bits
    return _der_sequence(
        ALGORITHM_IDENTIFIER,
        _der_element(_BIT_STRING, b"\x00" + encode_rsa_public_key(public_key)),
    )


# ---------- Decoding ----------

def _read_element(data: bytes, offset: int) -> Tuple[int, bytes, int]:
    """Reads one TLV at offset, returns (tag, value, offset of the next element)."""
    if offset + 2 > len(data):
        raise ValueError("Truncated DER element.")
    tag = data[offset]
    length = data[offset + 1]
    offset += 2

    if length & 0x80:
        count = length & 0x7F
        if count == 0 or offset + count > len(data):
            raise ValueError("Invalid DER length.")
        length = int.from_bytes(data[offset:offset + count], "big")
        offset += count

    end = offset + length
    if end > len(data):
        raise ValueError("Truncated DER element.")
    return tag, data[offset:end], end


def _read_sequence(data: bytes) -> List[Tuple[int, bytes]]:
    tag, body, end = _read_element(data, 0)
    if tag != _SEQUENCE or end != len(data):
        raise ValueError("Expected a single DER SEQUENCE.")

    elements = []
    offset = 0
    while offset < len(body):
        tag, value, offset = _read_element(body, offset)
        elements.append((tag, value))
    return elements


def _read_integer(element: Tuple[int, bytes]) -> int:
    tag, value = element
    if tag != _INTEGER or not value:
        raise ValueError("Expected a DER INTEGER.")
    number = int.from_bytes(value, "big", signed=True)
    if number < 0:
        raise ValueError("Negative INTEGER in RSA key.")
    return number


def decode_public_key(der: bytes) -> RSAPublicKey:
    """
    Decodes a public key from either layout produced by this module.

    Raises:
        ValueError: If the structure, the algorithm identifier or the key is invalid.
    """
    elements = _read_sequence(der)

    if len(elements) == 3:
        version, algorithm, (tag, rsa_key) = elements
        if _read_integer(version) != 0:
            raise ValueError("Unsupported key-info version.")
        if tag != _OCTET_STRING:
            raise ValueError("Expected the RSA key in an OCTET STRING.")
    elif len(elements) == 2:
        algorithm, (tag, bits) = elements
        if tag != _BIT_STRING or not bits or bits[0] != 0:
            raise ValueError("Expected the RSA key in a byte-aligned BIT STRING.")
        rsa_key = bits[1:]
    else:
        raise ValueError("Unknown public key layout.")

    if _der_element(*algorithm) != ALGORITHM_IDENTIFIER:
        raise ValueError(f"Unsupported algorithm identifier, expected rsaEncryption ({RSA_ENCRYPTION_OID}).")

    fields = _read_sequence(rsa_key)
    if len(fields) != 2:
        raise ValueError("RSAPublicKey must contain exactly a modulus and an exponent.")
    return RSAPublicKey(n=_read_integer(fields[0]), e=_read_integer(fields[1]))
