from .interfaces import RawRSAInterface

from .models import (
    BenchmarkResult,
    KeyPair,
    KeyTiming,
    PhaseTiming,
    RoundTripResult,
    RSAKey,
    RSAPublicKey,
    TimingSample,
)

__all__ = [
    "BenchmarkResult",
    "KeyPair",
    "KeyTiming",
    "PhaseTiming",
    "RawRSAInterface",
    "RoundTripResult",
    "RSAKey",
    "RSAPublicKey",
    "TimingSample",
]
