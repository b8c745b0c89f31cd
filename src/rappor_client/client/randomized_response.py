"""Permanent and Instantaneous Randomized Response stages of RAPPOR."""
# 说明：实现 RAPPOR 的两层随机响应：以 HMAC 摘要确定性派生的永久随机响应（PRR），以及每次报告重新抽样的瞬时随机响应（IRR）。
# 职责：
# - PermanentRandomizer：由 HMAC(secret, value) 的逐字节熵构造 uniform 与 f_mask，将 Bloom 比特以概率 f 替换为均匀随机比特
# - InstantaneousRandomizer：从注入随机源抽取 p/q 两个独立掩码，对 PRR 的 0/1 位分别以概率 p/q 报告 1
# - 任一能力返回非法结果或失败时抛出对应 EncodingError，绝不以默认比特替代

from __future__ import annotations

import logging
import numbers
from typing import Any, Mapping, Optional, Tuple

from rappor_client.core.utils.logging import get_logger
from rappor_client.client.errors import HmacFunctionError, RandomnessError
from rappor_client.client.hashing import HmacCallable
from rappor_client.client.randomness import IrrRandInterface
from rappor_client.client.types import Bits


class PermanentRandomizer:
    """
    Derive the PRR from the Bloom filter with HMAC-seeded noise.

    Suppose bit i of the Bloom filter is B_i. Then bit i of the PRR is
      - 1   with prob f/2
      - 0   with prob f/2
      - B_i with prob 1-f

    The PRR is a deterministic function of (secret, value), so repeated
    reports of the same value never leak additional information through it.
    """

    def __init__(
        self,
        num_bits: int,
        prob_f: float,
        hmac_func: HmacCallable,
        client_secret: bytes,
        *,
        digest_size: int = 32,
        logger: Optional[logging.Logger] = None,
    ):
        self.num_bits = int(num_bits)
        self.prob_f = float(prob_f)
        self.hmac_func = hmac_func
        self._secret = client_secret
        self.digest_size = int(digest_size)
        # 7 bit 随机数与 floor(f * 128) 比较，f = 1.0 时阈值为 128，所有比特都被替换
        self.threshold128 = int(self.prob_f * 128)
        self._logger = logger or get_logger(__name__)

    def masks(self, value: bytes) -> Tuple[Bits, Bits]:
        """Return ``(uniform, f_mask)`` derived from HMAC(secret, value)."""
        digest = self.hmac_func(self._secret, value)
        if not isinstance(digest, (bytes, bytearray)) or len(digest) != self.digest_size:
            size = len(digest) if isinstance(digest, (bytes, bytearray)) else None
            self._logger.error("GetPrrMasks failed: digest size %s, expected %d", size, self.digest_size)
            raise HmacFunctionError(f"HMAC digest must be exactly {self.digest_size} bytes (got {size})")

        uniform = 0
        f_mask = 0
        for i in range(self.num_bits):
            byte = digest[i]

            u_bit = byte & 0x01  # 1 bit of entropy
            uniform |= u_bit << i

            rand128 = byte >> 1  # 7 bits of entropy
            noise_bit = int(rand128 < self.threshold128)
            f_mask |= noise_bit << i

        return Bits(uniform, self.num_bits), Bits(f_mask, self.num_bits)

    def randomize(self, bloom: Bits, value: bytes) -> Bits:
        """``(bloom & ~f_mask) | (uniform & f_mask)``."""
        uniform, f_mask = self.masks(value)
        return (bloom & ~f_mask) | (uniform & f_mask)

    def get_metadata(self) -> Mapping[str, Any]:
        return {
            "type": "prr",
            "prob_f": self.prob_f,
            "hmac_func": getattr(self.hmac_func, "name", repr(self.hmac_func)),
            "digest_size": self.digest_size,
        }


class InstantaneousRandomizer:
    """
    Derive the IRR from the PRR with fresh noise on every call.

    If a PRR bit is 0, the IRR bit is 1 with probability p.
    If a PRR bit is 1, the IRR bit is 1 with probability q.
    """

    def __init__(
        self,
        num_bits: int,
        prob_p: float,
        prob_q: float,
        irr_rand: IrrRandInterface,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self.num_bits = int(num_bits)
        self.prob_p = float(prob_p)
        self.prob_q = float(prob_q)
        self.irr_rand = irr_rand
        self._logger = logger or get_logger(__name__)

    def _draw(self, prob: float, label: str) -> Bits:
        # 随机源失败或返回越界掩码都视为本次编码失败
        try:
            mask = self.irr_rand.get_mask(prob, self.num_bits)
        except RandomnessError:
            self._logger.error("%s failed", label)
            raise
        except OSError as exc:
            self._logger.error("%s failed: %s", label, exc)
            raise RandomnessError(f"{label} failed: {exc}") from exc

        if not isinstance(mask, bool) and isinstance(mask, numbers.Integral):
            mask = int(mask)
        if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0 or mask >> self.num_bits:
            self._logger.error("%s returned an invalid mask for %d bits", label, self.num_bits)
            raise RandomnessError(f"{label} returned an invalid mask for {self.num_bits} bits: {mask!r}")
        return Bits(mask, self.num_bits)

    def randomize(self, prr: Bits) -> Bits:
        """``(p_bits & ~prr) | (q_bits & prr)``."""
        p_bits = self._draw(self.prob_p, "PMask")
        q_bits = self._draw(self.prob_q, "QMask")
        return (p_bits & ~prr) | (q_bits & prr)

    def get_metadata(self) -> Mapping[str, Any]:
        return {
            "type": "irr",
            "prob_p": self.prob_p,
            "prob_q": self.prob_q,
            "irr_rand": self.irr_rand.__class__.__name__,
        }
