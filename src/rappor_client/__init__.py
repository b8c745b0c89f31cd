"""RAPPOR client: privacy-preserving encoding of strings and integers into noised bit vectors."""

from __future__ import annotations

from .client import (
    Bits,
    ConfigurationError,
    Deps,
    Encoder,
    EncodingError,
    EncodingResult,
    NumpyIrrRand,
    Params,
    RapporError,
    SecureIrrRand,
)
from .core import configure, configure_logging, get_config, get_logger

__version__ = "0.1.0"

__all__ = [
    "Bits",
    "ConfigurationError",
    "Deps",
    "Encoder",
    "EncodingError",
    "EncodingResult",
    "NumpyIrrRand",
    "Params",
    "RapporError",
    "SecureIrrRand",
    "configure",
    "configure_logging",
    "get_config",
    "get_logger",
]
