"""
Hash and HMAC capabilities consumed by the RAPPOR encoder.

Responsibilities
  - Define the call contracts for the Bloom filter hash and the PRR HMAC.
  - Provide standard adapters (MD5, SHA-256, xxh128, murmur3-128,
    HMAC-SHA256, HMAC-DRBG).
  - Map string names to adapters so configuration and the CLI can select them.

Usage Context
  - Pass instances (or any callable with the same signature) through ``Deps``.

Limitations
  - MD5, xxh128 and murmur3 are only used for Bloom bit selection, where no
    cryptographic strength is required. The PRR must use a keyed PRF.
"""
# 说明：编码器依赖的哈希与 HMAC 能力接口及其标准实现，编码器只依赖调用约定而不依赖具体实现。
# 职责：
# - HashFunction：bytes -> 摘要，摘要前 num_hashes 个字节决定 Bloom Filter 置位
# - HmacFunction：(secret, message) -> 定长摘要，每个字节为 PRR 的一位提供随机性
# - HmacDrbg：基于 HMAC-SHA256 的 NIST SP 800-90A DRBG，为超过 32 位的宽输出生成足够字节
# - 注册表：按名称查找与注册实现，供配置与命令行使用

from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Union

import mmh3
import xxhash

from rappor_client.core.utils.param_validation import ParamValidationError

HashCallable = Callable[[bytes], bytes]
HmacCallable = Callable[[bytes, bytes], bytes]


class HashFunction(ABC):
    """Deterministic bytes -> digest capability used to build the Bloom filter."""

    name: str = "hash"
    digest_size: int = 0

    @abstractmethod
    def __call__(self, data: bytes) -> bytes:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(digest_size={self.digest_size})"


class Md5Hash(HashFunction):
    name = "md5"
    digest_size = 16

    def __call__(self, data: bytes) -> bytes:
        return hashlib.md5(data).digest()


class Sha256Hash(HashFunction):
    name = "sha256"
    digest_size = 32

    def __call__(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class XxHash128(HashFunction):
    """xxh3 128-bit digest; much faster than MD5 for large simulations."""

    name = "xxh128"
    digest_size = 16

    def __init__(self, seed: int = 0):
        self.seed = int(seed)

    def __call__(self, data: bytes) -> bytes:
        return xxhash.xxh3_128(data, seed=self.seed).digest()


class Murmur3Hash128(HashFunction):
    """MurmurHash3 x64 128-bit digest."""

    name = "murmur3"
    digest_size = 16

    def __init__(self, seed: int = 0):
        self.seed = int(seed)

    def __call__(self, data: bytes) -> bytes:
        return mmh3.hash_bytes(data, self.seed)


class HmacFunction(ABC):
    """Deterministic (secret, message) -> digest capability used for the PRR."""

    name: str = "hmac"
    digest_size: int = 0

    @abstractmethod
    def __call__(self, secret: bytes, message: bytes) -> bytes:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(digest_size={self.digest_size})"


class HmacSha256(HmacFunction):
    name = "hmac_sha256"
    digest_size = 32

    def __call__(self, secret: bytes, message: bytes) -> bytes:
        return hmac.new(secret, message, digestmod=hashlib.sha256).digest()


class HmacDrbg(HmacFunction):
    """
    HMAC_DRBG (NIST SP 800-90A) over SHA-256, seeded with ``secret || message``.

    - Configuration
      - output_size: Number of bytes returned per call; one byte per PRR bit.

    - Behavior
      - Instantiates a fresh generator per call, so the output is a
        deterministic function of (secret, message), like an HMAC with an
        arbitrary digest length.
    """
    # 每次调用都重新实例化 DRBG，输出只由 (secret, message) 决定，从而保持 PRR 的确定性

    name = "hmac_drbg"
    # 单次请求上限：2^19 bit
    MAX_OUTPUT_SIZE = 1 << 16

    def __init__(self, output_size: int = 32):
        if isinstance(output_size, bool) or not isinstance(output_size, int) or output_size <= 0:
            raise ParamValidationError("output_size must be a positive integer")
        if output_size > self.MAX_OUTPUT_SIZE:
            raise ParamValidationError(f"output_size can't be greater than {self.MAX_OUTPUT_SIZE}")
        self.digest_size = int(output_size)

    @staticmethod
    def _hmac(key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, digestmod=hashlib.sha256).digest()

    def _update(self, key: bytes, v: bytes, provided: Optional[bytes]) -> "tuple[bytes, bytes]":
        key = self._hmac(key, v + b"\x00" + (provided or b""))
        v = self._hmac(key, v)
        if provided:
            key = self._hmac(key, v + b"\x01" + provided)
            v = self._hmac(key, v)
        return key, v

    def __call__(self, secret: bytes, message: bytes) -> bytes:
        key = b"\x00" * 32
        v = b"\x01" * 32
        key, v = self._update(key, v, secret + message)

        out = bytearray()
        while len(out) < self.digest_size:
            v = self._hmac(key, v)
            out.extend(v)
        return bytes(out[: self.digest_size])


_HASH_REGISTRY: Dict[str, Callable[[], HashFunction]] = {
    "md5": Md5Hash,
    "sha256": Sha256Hash,
    "xxh128": XxHash128,
    "murmur3": Murmur3Hash128,
}

_HMAC_REGISTRY: Dict[str, Callable[[int], HmacFunction]] = {
    "hmac_sha256": lambda num_bits: HmacSha256(),
    "hmac_drbg": lambda num_bits: HmacDrbg(max(num_bits, 32)),
}


def register_hash_function(name: str, factory: Callable[[], HashFunction]) -> None:
    """Register a zero-argument hash factory under ``name``."""
    if not name:
        raise ParamValidationError("hash function name must be non-empty")
    _HASH_REGISTRY[str(name)] = factory


def register_hmac_function(name: str, factory: Callable[[int], HmacFunction]) -> None:
    """Register an HMAC factory taking the requested bit width under ``name``."""
    if not name:
        raise ParamValidationError("hmac function name must be non-empty")
    _HMAC_REGISTRY[str(name)] = factory


def get_hash_function(name: str) -> HashFunction:
    # 按名称实例化 Bloom Filter 哈希实现，未注册的名称抛出 ParamValidationError
    key = str(name).lower()
    if key not in _HASH_REGISTRY:
        raise ParamValidationError(f"hash function '{name}' not registered (known: {sorted(_HASH_REGISTRY)})")
    return _HASH_REGISTRY[key]()


def get_hmac_function(name: str, num_bits: int = 32) -> HmacFunction:
    # 按名称与目标位宽实例化 PRR 的 HMAC 实现；宽输出需要至少 num_bits 个摘要字节
    key = str(name).lower()
    if key not in _HMAC_REGISTRY:
        raise ParamValidationError(f"hmac function '{name}' not registered (known: {sorted(_HMAC_REGISTRY)})")
    return _HMAC_REGISTRY[key](int(num_bits))


def digest_size_of(func: Union[HashCallable, HmacCallable], default: int) -> int:
    """Declared digest size of a capability; plain callables fall back to ``default``."""
    size = getattr(func, "digest_size", None)
    if isinstance(size, int) and not isinstance(size, bool) and size > 0:
        return size
    return default


def registered_hash_functions() -> list:
    return sorted(_HASH_REGISTRY)


def registered_hmac_functions() -> list:
    return sorted(_HMAC_REGISTRY)
