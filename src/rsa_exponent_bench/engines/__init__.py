from .crt_rsa import CRTRawRSA
from .naive_rsa import NaiveRawRSA

__all__ = [
    "CRTRawRSA",
    "NaiveRawRSA",
]
