"""Bloom filter builder for the RAPPOR encoding pipeline."""
# 说明：将输入值与 cohort 拼接后经单个注入哈希函数映射到定宽 Bloom Filter，作为 PRR 的前置步骤，编码不可逆。
# 职责：
# - 构造哈希输入：4 字节大端 cohort 前缀 + 原始值字节
# - 取摘要前 num_hashes 个字节，每个字节对 num_bits 取模得到一个置位位置
# - 摘要字节不足时报告 HashFunctionError，而不是输出残缺的过滤器

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from rappor_client.core.utils.logging import get_logger
from rappor_client.client.errors import HashFunctionError
from rappor_client.client.hashing import HashCallable
from rappor_client.client.rappor_utils import to_big_endian
from rappor_client.client.types import Bits


class BloomFilterBuilder:
    """
    Map a value and cohort to a ``num_bits``-wide Bloom filter.

    One underlying hash provides ``num_hashes`` sub-hashes by digest-byte
    indexing; two slots selecting the same bit set it once.
    """

    def __init__(
        self,
        num_bits: int,
        num_hashes: int,
        hash_func: HashCallable,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        # 参数范围已由 validate_params 保证，这里只保存配置
        self.num_bits = int(num_bits)
        self.num_hashes = int(num_hashes)
        self.hash_func = hash_func
        self._logger = logger or get_logger(__name__)

    @staticmethod
    def hash_input(value: bytes, cohort: int) -> bytes:
        """4-byte big-endian cohort followed by the raw value bytes."""
        return to_big_endian(cohort, 4) + value

    def bit_indices(self, value: bytes, cohort: int) -> List[int]:
        """Bit positions selected by each hash slot, collisions preserved."""
        # 返回每个哈希槽位选中的比特位置，可能包含重复位置
        digest = self.hash_func(self.hash_input(value, cohort))
        if not isinstance(digest, (bytes, bytearray)):
            self._logger.error("Hash function returned %s instead of bytes", type(digest).__name__)
            raise HashFunctionError("hash function must return bytes")
        if len(digest) < self.num_hashes:
            self._logger.error(
                "Hash function didn't return enough bytes (%d < %d)", len(digest), self.num_hashes
            )
            raise HashFunctionError(
                f"hash function returned {len(digest)} bytes, need at least {self.num_hashes}"
            )
        return [digest[i] % self.num_bits for i in range(self.num_hashes)]

    def build(self, value: bytes, cohort: int) -> Bits:
        """Return the Bloom filter for ``value`` under ``cohort``."""
        return Bits.from_indices(self.num_bits, self.bit_indices(value, cohort))

    def get_metadata(self) -> Mapping[str, Any]:
        return {
            "type": "bloom_filter",
            "num_bits": self.num_bits,
            "num_hashes": self.num_hashes,
            "hash_func": getattr(self.hash_func, "name", repr(self.hash_func)),
        }
