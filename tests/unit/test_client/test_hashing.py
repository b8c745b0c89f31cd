"""
Unit tests for the hash and HMAC adapters and their registries.
"""
# 说明：Bloom Filter 哈希与 PRR HMAC 标准实现及名称注册表的单元测试。
# 覆盖：
# - MD5 / SHA-256 / HMAC-SHA256 与标准库结果一致，xxh128 / murmur3 输出定长且确定
# - HmacDrbg 的 NIST SP 800-90A 实例化与生成流程、输出长度与前缀一致性
# - 注册表按名称实例化、大小写不敏感、未知名称报错以及自定义注册

import hashlib
import hmac

import pytest

from rappor_client.client import hashing
from rappor_client.client.hashing import (
    HmacDrbg,
    HmacSha256,
    Md5Hash,
    Murmur3Hash128,
    Sha256Hash,
    XxHash128,
    digest_size_of,
    get_hash_function,
    get_hmac_function,
    register_hash_function,
)
from rappor_client.core.utils.param_validation import ParamValidationError


def _hmac(key, data):
    return hmac.new(key, data, hashlib.sha256).digest()


def test_standard_hashes_match_hashlib():
    data = b"\x00\x00\x00\x03foo"
    assert Md5Hash()(data) == hashlib.md5(data).digest()
    assert Sha256Hash()(data) == hashlib.sha256(data).digest()
    assert Md5Hash.digest_size == 16
    assert Sha256Hash.digest_size == 32


@pytest.mark.parametrize("cls", [XxHash128, Murmur3Hash128])
def test_fast_hashes_are_deterministic(cls):
    # 非密码学哈希只用于选位，要求输出 16 字节且对相同输入确定
    h = cls()
    out = h(b"foo")
    assert isinstance(out, bytes)
    assert len(out) == h.digest_size == 16
    assert h(b"foo") == out
    assert h(b"bar") != out
    assert cls(seed=1)(b"foo") != out


def test_hmac_sha256_matches_stdlib():
    assert HmacSha256()(b"secret", b"foo") == _hmac(b"secret", b"foo")
    assert HmacSha256.digest_size == 32


def test_hmac_drbg_follows_nist_construction():
    # 按 NIST SP 800-90A 手工执行一次实例化与生成，结果应与实现一致
    seed = b"secret" + b"foo"
    k = b"\x00" * 32
    v = b"\x01" * 32
    k = _hmac(k, v + b"\x00" + seed)
    v = _hmac(k, v)
    k = _hmac(k, v + b"\x01" + seed)
    v = _hmac(k, v)
    first = _hmac(k, v)
    second = _hmac(k, first)

    assert HmacDrbg(32)(b"secret", b"foo") == first
    assert HmacDrbg(64)(b"secret", b"foo") == first + second
    assert HmacDrbg(40)(b"secret", b"foo") == (first + second)[:40]


def test_hmac_drbg_is_keyed_and_deterministic():
    drbg = HmacDrbg(64)
    out = drbg(b"secret", b"foo")
    assert len(out) == 64
    assert drbg(b"secret", b"foo") == out
    assert drbg(b"other", b"foo") != out
    assert drbg(b"secret", b"bar") != out
    # 更宽的输出以较窄输出为前缀
    assert out[:32] == HmacDrbg(32)(b"secret", b"foo")


@pytest.mark.parametrize("bad", [0, -8, True, 8.0, HmacDrbg.MAX_OUTPUT_SIZE + 1])
def test_hmac_drbg_rejects_bad_output_size(bad):
    with pytest.raises(ParamValidationError):
        HmacDrbg(bad)


def test_registry_lookup():
    assert isinstance(get_hash_function("md5"), Md5Hash)
    assert isinstance(get_hash_function("MD5"), Md5Hash)
    assert isinstance(get_hash_function("xxh128"), XxHash128)
    assert isinstance(get_hmac_function("hmac_sha256"), HmacSha256)
    assert get_hmac_function("hmac_drbg", 64).digest_size == 64
    # DRBG 至少输出 32 字节
    assert get_hmac_function("hmac_drbg", 16).digest_size == 32
    with pytest.raises(ParamValidationError, match="not registered"):
        get_hash_function("crc32")
    with pytest.raises(ParamValidationError, match="not registered"):
        get_hmac_function("hmac_md5")


def test_register_hash_function(monkeypatch):
    # 自定义注册后可按名称获取，测试结束恢复注册表
    monkeypatch.setattr(hashing, "_HASH_REGISTRY", dict(hashing._HASH_REGISTRY))
    register_hash_function("sha1", lambda: Sha256Hash())
    assert "sha1" in hashing.registered_hash_functions()
    assert isinstance(get_hash_function("sha1"), Sha256Hash)
    with pytest.raises(ParamValidationError):
        register_hash_function("", Md5Hash)


def test_digest_size_of():
    assert digest_size_of(HmacDrbg(64), 32) == 64
    assert digest_size_of(lambda s, m: b"", 32) == 32
