"""
Error hierarchy for the RAPPOR client.

Responsibilities
  - Separate configuration faults (detected once, at encoder construction)
    from operational faults (detected per encode call).
  - Give each injected capability its own failure type so callers can
    decide whether a retry makes sense.

Limitations
  - Exceptions only carry message text and optional context attributes.
"""
# 说明：RAPPOR 客户端的异常体系，区分构造期配置错误与单次编码的运行期错误。
# 职责：
# - RapporError：客户端统一基类异常
# - ConfigurationError：参数或 cohort 非法，编码器不可构造
# - EncodingError 及其子类：哈希、HMAC、随机源在单次编码中失败，编码器仍可继续使用

from __future__ import annotations

from typing import Optional

from rappor_client.core.utils.param_validation import ParamValidationError


class RapporError(Exception):
    """Base error type for RAPPOR client failures."""


class ConfigurationError(RapporError, ParamValidationError):
    """
    Raised when Params or the cohort binding are out of range.

    - Behavior
      - Raised from Encoder construction (and from set_cohort when cohort
        re-validation is enabled); no encoder is produced.

    - Usage Notes
      - Subclasses ParamValidationError, so generic argument checks catch it too.
    """


class EncodingError(RapporError):
    """
    Raised when a single encode call cannot produce a report.

    - Configuration
      - stage: Pipeline stage that failed ("bloom", "prr" or "irr").

    - Behavior
      - No partial output is returned; the encoder stays usable.
    """

    stage: Optional[str] = None

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class HashFunctionError(EncodingError):
    """The Bloom filter hash returned an unusable digest."""

    stage = "bloom"


class HmacFunctionError(EncodingError):
    """The PRR HMAC returned a digest of the wrong length."""

    stage = "prr"


class RandomnessError(EncodingError):
    """The IRR randomness source could not produce a mask."""

    stage = "irr"
