"""
Shared value types for the RAPPOR client.

Responsibilities
  - Define the fixed-width `Bits` value used for the Bloom filter, the PRR
    and the IRR.
  - Provide narrow integer and wide big-endian byte accessors for the wire.
  - Bundle the diagnostic (bloom, prr, irr) triple.

Usage Context
  - Bits are produced per call and never stored by the encoder.

Limitations
  - `to_uint32` is only available for widths up to 32 bits; wider reports
    must be transmitted with `to_bytes`.
"""
# 说明：客户端子系统中共享的值类型，覆盖 Bloom Filter、PRR 与 IRR 三种定宽比特掩码。
# 职责：
# - 以 (value, num_bits) 统一表示任意位宽的比特序列，并保证宽度之外的比特永不置位
# - 提供整数、大端字节串、bitarray、numpy 数组与二进制字符串等多种视图
# - 提供按位与/或/取反等在固定宽度内闭合的运算

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import numpy as np
from bitarray import bitarray

from rappor_client.core.utils.param_validation import ParamValidationError, ensure_int
from rappor_client.client.rappor_utils import make_bitarray, mask_for_width, num_bytes_for


@dataclass(frozen=True)
class Bits:
    """
    Immutable fixed-width bit mask; bit ``i`` is ``(value >> i) & 1``.

    - Configuration
      - value: Non-negative integer holding the bits.
      - num_bits: Width of the mask; no bit at position >= num_bits may be set.

    - Behavior
      - Bitwise operators stay within the width and require equal widths.
      - ``to_bytes`` emits the big-endian wire representation.
    """
    # 表示定宽比特掩码，构造时即校验宽度不变式，之后不可修改

    value: int
    num_bits: int

    def __post_init__(self) -> None:
        ensure_int(self.value, label="value")
        ensure_int(self.num_bits, label="num_bits")
        if self.num_bits <= 0:
            raise ParamValidationError("num_bits must be positive")
        if self.value < 0 or self.value >> self.num_bits:
            raise ParamValidationError(f"value {self.value:#x} does not fit in {self.num_bits} bits")

    @classmethod
    def zeros(cls, num_bits: int) -> "Bits":
        return cls(0, num_bits)

    @classmethod
    def from_indices(cls, num_bits: int, indices: Iterable[int]) -> "Bits":
        """Return a mask with the given positions set; repeated indices are idempotent."""
        # 以按位或的方式逐个置位，同一位置被多次选中不会重复计数
        value = 0
        for idx in indices:
            if not 0 <= idx < num_bits:
                raise ParamValidationError(f"bit index {idx} out of range for {num_bits} bits")
            value |= 1 << idx
        return cls(value, num_bits)

    @classmethod
    def from_bytes(cls, data: bytes, num_bits: int) -> "Bits":
        """Inverse of ``to_bytes``."""
        if len(data) != num_bytes_for(num_bits):
            raise ParamValidationError(f"expected {num_bytes_for(num_bits)} bytes for {num_bits} bits, got {len(data)}")
        return cls(int.from_bytes(data, "big"), num_bits)

    # ------------------------------------------------------------------ views
    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __len__(self) -> int:
        return self.num_bits

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < self.num_bits:
            raise IndexError(f"bit index {index} out of range")
        return (self.value >> index) & 1

    def to_uint32(self) -> int:
        """Native fixed-width accessor, only for widths up to 32 bits."""
        if self.num_bits > 32:
            raise ParamValidationError(f"{self.num_bits}-bit value does not fit in a uint32; use to_bytes()")
        return self.value

    def to_bytes(self) -> bytes:
        """Big-endian byte sequence of length ceil(num_bits / 8)."""
        return self.value.to_bytes(num_bytes_for(self.num_bits), "big")

    def indices(self) -> List[int]:
        """Positions of set bits in ascending order."""
        return [i for i in range(self.num_bits) if (self.value >> i) & 1]

    def count(self) -> int:
        return bin(self.value).count("1")

    def to_bitarray(self) -> bitarray:
        # 返回以位置 i 为下标的 bitarray 视图，便于与其他比特向量工具互通
        return make_bitarray(self.num_bits, self.indices())

    def to_numpy(self) -> np.ndarray:
        # 返回长度为 num_bits 的 0/1 数组，下标 i 对应第 i 位
        arr = np.zeros(self.num_bits, dtype=np.uint8)
        arr[self.indices()] = 1
        return arr

    def bit_string(self) -> str:
        """Like bin(), but with leading zeroes and no '0b'; most significant bit first."""
        return format(self.value, f"0{self.num_bits}b")

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "num_bits": self.num_bits, "hex": self.to_bytes().hex()}

    # -------------------------------------------------------------- operators
    def _coerce(self, other: Any) -> int:
        # 仅允许同宽度 Bits 或可容纳于当前宽度的非负整数参与运算
        if isinstance(other, Bits):
            if other.num_bits != self.num_bits:
                raise ParamValidationError(f"width mismatch: {self.num_bits} vs {other.num_bits}")
            return other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return Bits(other, self.num_bits).value
        return NotImplemented  # type: ignore[return-value]

    def __and__(self, other: Any) -> "Bits":
        rhs = self._coerce(other)
        if rhs is NotImplemented:
            return NotImplemented
        return Bits(self.value & rhs, self.num_bits)

    def __or__(self, other: Any) -> "Bits":
        rhs = self._coerce(other)
        if rhs is NotImplemented:
            return NotImplemented
        return Bits(self.value | rhs, self.num_bits)

    def __xor__(self, other: Any) -> "Bits":
        rhs = self._coerce(other)
        if rhs is NotImplemented:
            return NotImplemented
        return Bits(self.value ^ rhs, self.num_bits)

    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__

    def __invert__(self) -> "Bits":
        return Bits(~self.value & mask_for_width(self.num_bits), self.num_bits)


@dataclass(frozen=True)
class EncodingResult:
    """
    Diagnostic view of one encode call.

    - Configuration
      - bloom: Bloom filter of the value under the encoder's cohort.
      - prr: Permanent randomized response (never sent over the network).
      - irr: Instantaneous randomized response (the report).
    """
    # 单次编码的中间结果三元组，仅用于测试与调试；bloom 与 prr 不应离开本机

    bloom: Bits
    prr: Bits
    irr: Bits

    def to_dict(self) -> Dict[str, Any]:
        return {"bloom": self.bloom.to_dict(), "prr": self.prr.to_dict(), "irr": self.irr.to_dict()}
