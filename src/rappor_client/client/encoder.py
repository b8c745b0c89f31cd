"""
RAPPOR encoder facade.

Responsibilities
  - Validate Params and the cohort binding once, at construction.
  - Run Bloom filter -> PRR -> IRR for each value and return the IRR.
  - Expose the intermediate masks through a diagnostic entry point.

Usage Context
  - Create one Encoder per metric and client identity; reuse it for every
    report of that metric.

Limitations
  - Thread safety is that of the injected randomness source; see
    ``NumpyIrrRand.spawn`` for per-thread sources.
"""
# 说明：RAPPOR 客户端编码器门面，持有参数、依赖与 cohort，按顺序串联 Bloom Filter、PRR 与 IRR 三个阶段。
# 职责：
# - 构造期调用 validate_params 一次性校验全部配置，失败时抛出 ConfigurationError，编码器不可用
# - encode / encode_bits / encode_bloom：对字符串、字节、定宽整数或现成 Bloom 比特进行编码，只返回 IRR
# - encode_internal：返回 (bloom, prr, irr) 三元组，仅供测试与调试
# - cohort / set_cohort：读取与替换 cohort 绑定，按运行时配置决定是否重新校验范围

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from rappor_client.core.utils.config import get_config
from rappor_client.core.utils.logging import get_logger
from rappor_client.core.utils.param_validation import ParamValidationError, ensure_int
from rappor_client.core.utils.serialization import mask_sensitive_data
from rappor_client.client.bloom_filter import BloomFilterBuilder
from rappor_client.client.deps import Deps
from rappor_client.client.errors import ConfigurationError
from rappor_client.client.hashing import digest_size_of
from rappor_client.client.params import MAX_BITS, Params, validate_cohort, validate_params
from rappor_client.client.randomized_response import InstantaneousRandomizer, PermanentRandomizer
from rappor_client.client.rappor_utils import BytesLike, ensure_bytes, num_bytes_for, to_big_endian
from rappor_client.client.types import Bits, EncodingResult


class Encoder:
    """
    Obfuscates values for a given client using the RAPPOR privacy algorithm.

    - Configuration
      - params: RAPPOR Params controlling privacy.
      - deps: Hash, HMAC, client secret, IRR randomness and cohort.
      - encoder_id: Optional metric name, used in logs and metadata.
      - logger: Optional logger; defaults to ``rappor_client.encoder``.

    - Behavior
      - Construction raises ConfigurationError for any invalid setting.
      - Each encode call either returns a complete IRR or raises an
        EncodingError; the encoder remains usable afterwards.
    """

    def __init__(
        self,
        params: Params,
        deps: Deps,
        *,
        encoder_id: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or get_logger("rappor_client.encoder")
        if not isinstance(params, Params):
            raise ConfigurationError("params must be a Params instance")
        if not isinstance(deps, Deps):
            raise ConfigurationError("deps must be a Deps instance")

        hmac_size = digest_size_of(deps.hmac_func, MAX_BITS)
        try:
            validate_params(params, deps.cohort, max_bits=hmac_size)
        except ConfigurationError as exc:
            self._logger.error("Invalid RAPPOR configuration for %s: %s", encoder_id or "encoder", exc)
            raise

        self._params = params
        self._deps = deps
        self._cohort = int(deps.cohort)
        self._encoder_id = encoder_id

        self._bloom = BloomFilterBuilder(params.num_bits, params.num_hashes, deps.hash_func, logger=self._logger)
        self._prr = PermanentRandomizer(
            params.num_bits,
            params.prob_f,
            deps.hmac_func,
            deps.client_secret,
            digest_size=hmac_size,
            logger=self._logger,
        )
        self._irr = InstantaneousRandomizer(
            params.num_bits, params.prob_p, params.prob_q, deps.irr_rand, logger=self._logger
        )
        self._logger.debug(
            "Encoder %s ready: k=%d h=%d m=%d cohort=%d",
            encoder_id or "<anonymous>",
            params.num_bits,
            params.num_hashes,
            params.num_cohorts,
            self._cohort,
        )

    # ------------------------------------------------------------- accessors
    @property
    def params(self) -> Params:
        return self._params

    @property
    def deps(self) -> Deps:
        return self._deps

    @property
    def encoder_id(self) -> Optional[str]:
        return self._encoder_id

    @property
    def cohort(self) -> int:
        return self._cohort

    def set_cohort(self, cohort: int) -> None:
        """
        Replace the cohort binding.

        With ``RuntimeConfig.revalidate_cohort`` enabled (the default) the
        new cohort must satisfy ``0 <= cohort < num_cohorts``; otherwise the
        value is accepted unchecked and a warning is logged.
        """
        cohort = ensure_int(cohort, label="cohort", error=ConfigurationError)
        if get_config().revalidate_cohort:
            validate_cohort(cohort, self._params.num_cohorts)
        elif not 0 <= cohort < self._params.num_cohorts:
            self._logger.warning(
                "cohort %d is outside [0, %d); accepted because cohort re-validation is disabled",
                cohort,
                self._params.num_cohorts,
            )
            if cohort < 0:
                # 负数无法打包为 4 字节大端前缀
                raise ConfigurationError(f"cohort ({cohort}) must be non-negative")
        self._cohort = cohort

    # -------------------------------------------------------------- encoding
    def _run(self, value: bytes, bloom: Bits) -> EncodingResult:
        prr = self._prr.randomize(bloom, value)
        irr = self._irr.randomize(prr)
        return EncodingResult(bloom=bloom, prr=prr, irr=irr)

    def encode_internal(self, value: Union[str, BytesLike]) -> EncodingResult:
        """
        Helper for simulation and testing.

        Returns:
            The Bloom filter, PRR and IRR. The first two must never be sent
            over the network.
        """
        data = ensure_bytes(value)
        bloom = self._bloom.build(data, self._cohort)
        return self._run(data, bloom)

    def encode(self, value: Union[str, BytesLike]) -> Bits:
        """
        Encode a string or byte value with RAPPOR.

        Returns:
            The IRR (Instantaneous Randomized Response).
        """
        return self.encode_internal(value).irr

    def encode_bits(self, bits: int, width: int = 4) -> Bits:
        """Encode the big-endian ``width``-byte representation of a non-negative integer."""
        bits = ensure_int(bits, label="bits")
        return self.encode(to_big_endian(bits, width))

    def encode_bloom(self, bloom: Union[int, Bits]) -> Bits:
        """
        Basic RAPPOR: the caller's bits are used as the Bloom filter directly.

        The PRR is keyed on the big-endian representation of the bits (at
        least 4 bytes), so the same bits always produce the same PRR.
        """
        if isinstance(bloom, Bits):
            if bloom.num_bits != self._params.num_bits:
                raise ParamValidationError(f"bloom width {bloom.num_bits} != num_bits {self._params.num_bits}")
            filt = bloom
        else:
            filt = Bits(ensure_int(bloom, label="bloom"), self._params.num_bits)
        key = to_big_endian(filt.value, max(4, num_bytes_for(self._params.num_bits)))
        return self._run(key, filt).irr

    # -------------------------------------------------------------- metadata
    def get_metadata(self) -> Dict[str, Any]:
        """JSON-friendly description of this encoder; the client secret is masked."""
        deps = mask_sensitive_data(self._deps.describe(), ("client_secret",))
        deps["cohort"] = self._cohort
        return {
            "encoder_id": self._encoder_id,
            "params": self._params.to_dict(),
            "deps": deps,
            "stages": [self._bloom.get_metadata(), self._prr.get_metadata(), self._irr.get_metadata()],
        }

    def __repr__(self) -> str:
        return f"Encoder(encoder_id={self._encoder_id!r}, params={self._params!r}, cohort={self._cohort})"
