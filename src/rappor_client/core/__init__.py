"""Entry point for the core library components."""

from __future__ import annotations

from .utils import (
    ParamValidationError,
    RuntimeConfig,
    configure,
    configure_logging,
    get_config,
    get_logger,
)

__all__ = [
    "ParamValidationError",
    "RuntimeConfig",
    "configure",
    "configure_logging",
    "get_config",
    "get_logger",
]
