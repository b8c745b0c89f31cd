"""Unified entry point for the RAPPOR client encoder."""

from __future__ import annotations

from .bloom_filter import BloomFilterBuilder
from .deps import Deps
from .encoder import Encoder
from .errors import (
    ConfigurationError,
    EncodingError,
    HashFunctionError,
    HmacFunctionError,
    RandomnessError,
    RapporError,
)
from .hashing import (
    HashFunction,
    HmacDrbg,
    HmacFunction,
    HmacSha256,
    Md5Hash,
    Murmur3Hash128,
    Sha256Hash,
    XxHash128,
    get_hash_function,
    get_hmac_function,
    register_hash_function,
    register_hmac_function,
)
from .params import MAX_BITS, MAX_HASHES, Params, validate_cohort, validate_params
from .randomized_response import InstantaneousRandomizer, PermanentRandomizer
from .randomness import IrrRandInterface, NumpyIrrRand, SecureIrrRand
from .types import Bits, EncodingResult

__all__ = [
    "Bits",
    "EncodingResult",
    "Params",
    "MAX_BITS",
    "MAX_HASHES",
    "validate_params",
    "validate_cohort",
    "Deps",
    "Encoder",
    "BloomFilterBuilder",
    "PermanentRandomizer",
    "InstantaneousRandomizer",
    "IrrRandInterface",
    "SecureIrrRand",
    "NumpyIrrRand",
    "HashFunction",
    "HmacFunction",
    "Md5Hash",
    "Sha256Hash",
    "XxHash128",
    "Murmur3Hash128",
    "HmacSha256",
    "HmacDrbg",
    "get_hash_function",
    "get_hmac_function",
    "register_hash_function",
    "register_hmac_function",
    "RapporError",
    "ConfigurationError",
    "EncodingError",
    "HashFunctionError",
    "HmacFunctionError",
    "RandomnessError",
]
