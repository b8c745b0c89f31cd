"""
Randomness sources for the Instantaneous Randomized Response.

Responsibilities
  - Define the mask-drawing contract used by the IRR stage.
  - Provide an OS-entropy source for production and a seeded numpy source
    for reproducible simulation.

Usage Context
  - Each encode call draws two masks (p and q); draws must be independent.

Limitations
  - ``NumpyIrrRand`` is not safe for concurrent use; call ``spawn`` to give
    each thread its own independent stream.
"""
# 说明：IRR 阶段使用的随机掩码来源，约定 get_mask(prob, num_bits) 返回每位独立以概率 prob 为 1 的整数掩码。
# 职责：
# - IrrRandInterface：随机掩码能力的抽象接口
# - SecureIrrRand：基于操作系统熵源（SystemRandom）的生产实现，读取失败时抛出 RandomnessError
# - NumpyIrrRand：基于 numpy Generator 的可复现实现，用于模拟与测试，并支持派生独立子流

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import numpy as np

from rappor_client.core.utils.config import get_config
from rappor_client.core.utils.random import create_rng, split_rng
from rappor_client.client.errors import RandomnessError
from rappor_client.client.rappor_utils import ensure_probability


class IrrRandInterface(ABC):
    """Returns an integer where each of the low ``num_bits`` bits is 1 with probability ``prob``."""

    @abstractmethod
    def get_mask(self, prob: float, num_bits: int) -> int:
        """
        Draw one mask.

        Raises:
            RandomnessError: if the source cannot produce a mask.
        """
        raise NotImplementedError


def _check_request(prob: float, num_bits: int) -> None:
    ensure_probability(prob, "prob", error=RandomnessError)
    if num_bits <= 0:
        raise RandomnessError("num_bits must be positive")


class SecureIrrRand(IrrRandInterface):
    """Draws mask bits from ``random.SystemRandom`` (``os.urandom``)."""
    # 使用操作系统熵源，线程安全；熵源读取失败时转换为 RandomnessError，绝不回退为全零掩码

    def __init__(self) -> None:
        self._rand = random.SystemRandom()

    def get_mask(self, prob: float, num_bits: int) -> int:
        _check_request(prob, num_bits)
        try:
            mask = 0
            for i in range(num_bits):
                bit = self._rand.random() < prob
                mask |= bit << i
            return mask
        except (OSError, NotImplementedError) as exc:
            raise RandomnessError(f"failed to read system entropy: {exc}") from exc


class NumpyIrrRand(IrrRandInterface):
    """
    Reproducible mask source backed by a numpy Generator.

    - Configuration
      - seed: Integer seed, SeedSequence or Generator; defaults to
        ``RuntimeConfig.rng_seed``.

    - Behavior
      - Each bit is ``rng.random() < prob``; bit ``i`` of the mask comes from
        the i-th uniform draw.
    """

    def __init__(self, seed: Optional[Any] = None):
        if seed is None:
            seed = get_config().rng_seed
        self._rng: np.random.Generator = create_rng(seed)

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def get_mask(self, prob: float, num_bits: int) -> int:
        _check_request(prob, num_bits)
        draws = self._rng.random(num_bits) < prob
        mask = 0
        for i in np.flatnonzero(draws):
            mask |= 1 << int(i)
        return mask

    def spawn(self, num: int) -> List["NumpyIrrRand"]:
        """Split into ``num`` independent sources, e.g. one per worker thread."""
        # 基于 SeedSequence.spawn 派生彼此独立的子流，父流状态不受影响
        return [NumpyIrrRand(child) for child in split_rng(self._rng, num)]
