"""RAPPOR-focused utility helpers for bit operations, byte packing, and parameter checks."""
# 说明：为客户端子系统提供比特向量操作、大端字节打包与概率参数校验等通用工具函数。
# 职责：
# - 提供基于 bitarray 的比特向量创建与统计操作
# - 在整数掩码与字节串之间做大端转换，统一哈希输入与线上输出格式
# - 校验概率参数是否落在 RAPPOR 要求的 (0, 1] 区间

from __future__ import annotations

import numbers
from typing import Iterable, List, Type, Union

from bitarray import bitarray

from rappor_client.core.utils.param_validation import ParamValidationError

BytesLike = Union[bytes, bytearray, memoryview]


def make_bitarray(length: int, indices: Iterable[int] = ()) -> bitarray:
    """
    Create a bit vector of given length and set positions in indices to 1.
    """
    # 创建指定长度的比特向量并将给定 indices 位置置为 1，越界索引被忽略
    if length < 0:
        raise ParamValidationError("length must be non-negative")
    bits = bitarray(length)
    bits.setall(False)
    for idx in indices:
        if 0 <= idx < length:
            bits[idx] = True
    return bits


def bitarray_to_indices(bits: Iterable[int]) -> List[int]:
    """Return indices where the bit vector has value 1."""
    return [i for i, bit in enumerate(bits) if bool(bit)]


def count_ones(bits: Iterable[int]) -> int:
    """Count the number of set bits."""
    if isinstance(bits, bitarray):
        return bits.count()
    return int(sum(1 for b in bits if b))


def mask_for_width(num_bits: int) -> int:
    # 返回低 num_bits 位全为 1 的整数掩码
    return (1 << num_bits) - 1


def num_bytes_for(num_bits: int) -> int:
    # 容纳 num_bits 个比特所需的最少字节数
    return (num_bits + 7) // 8


def to_big_endian(value: int, width: int = 4) -> bytes:
    """Convert a non-negative integer to a `width`-byte big endian string."""
    # 以网络字节序（大端）将整数打包为定长字节串，用于 cohort 前缀与整数输入编码
    if value < 0:
        raise ParamValidationError("value must be non-negative")
    try:
        return value.to_bytes(width, "big")
    except OverflowError as exc:
        raise ParamValidationError(f"value {value} does not fit in {width} bytes") from exc


def ensure_bytes(value: Union[str, BytesLike], *, label: str = "value") -> bytes:
    # 将 str 按 UTF-8 编码，其余类字节对象转为不可变 bytes；其他类型直接拒绝
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ParamValidationError(f"{label} must be str or bytes (got {type(value).__name__})")


def ensure_probability(
    p: float,
    name: str = "p",
    *,
    error: Type[Exception] = ParamValidationError,
) -> float:
    """Ensure p is within (0, 1]; 0.0 is treated as a missing initialization."""
    # 概率必须在 (0, 1] 内：0.0 视为未初始化，1.0 合法；NaN 会在比较中自然落入非法分支
    if isinstance(p, bool) or not isinstance(p, numbers.Real):
        raise error(f"{name} must be a number (got {p!r})")
    if not (0.0 < p <= 1.0):
        raise error(f"{name} should be between 0.0 and 1.0 (and non-zero) (got {p:.2f})")
    return float(p)
