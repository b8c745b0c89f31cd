"""
Unit tests for the encoder capability bundle.
"""
# 说明：编码器依赖集合 Deps 的单元测试。
# 覆盖：
# - 字符串密钥按 UTF-8 规范化为 bytes，repr 中不出现密钥
# - 非可调用能力、缺少 get_mask 的随机源与非整数 cohort 被拒绝
# - create(...) 按注册名称与运行时配置默认值装配标准依赖

import pytest

from rappor_client.client.deps import Deps
from rappor_client.client.hashing import HmacDrbg, HmacSha256, Md5Hash, Sha256Hash
from rappor_client.client.randomness import NumpyIrrRand, SecureIrrRand
from rappor_client.core.utils.config import configure
from rappor_client.core.utils.param_validation import ParamValidationError


def test_secret_normalized_and_hidden(mock_rand):
    deps = Deps(hash_func=Md5Hash(), client_secret="s3cret", hmac_func=HmacSha256(), irr_rand=mock_rand)
    assert deps.client_secret == b"s3cret"
    assert deps.cohort == 0
    assert "s3cret" not in repr(deps)


@pytest.mark.parametrize(
    "overrides",
    [
        {"hash_func": "md5"},
        {"hmac_func": None},
        {"irr_rand": object()},
        {"cohort": True},
        {"cohort": "3"},
        {"client_secret": 1234},
    ],
)
def test_invalid_capabilities_rejected(mock_rand, overrides):
    kwargs = dict(hash_func=Md5Hash(), client_secret=b"s", hmac_func=HmacSha256(), irr_rand=mock_rand)
    kwargs.update(overrides)
    with pytest.raises(ParamValidationError):
        Deps(**kwargs)


def test_plain_callables_accepted(mock_rand):
    deps = Deps(
        hash_func=lambda data: b"\x00" * 16,
        client_secret=b"s",
        hmac_func=lambda secret, value: b"\x00" * 32,
        irr_rand=mock_rand,
    )
    assert callable(deps.hash_func)


def test_create_uses_registry_defaults():
    deps = Deps.create("s3cret", cohort=5)
    assert isinstance(deps.hash_func, Md5Hash)
    assert isinstance(deps.hmac_func, HmacSha256)
    assert isinstance(deps.irr_rand, SecureIrrRand)
    assert deps.cohort == 5


def test_create_follows_runtime_config():
    configure(default_hash="sha256", default_hmac="hmac_drbg")
    deps = Deps.create(b"s3cret", num_bits=64, irr_rand=NumpyIrrRand(0))
    assert isinstance(deps.hash_func, Sha256Hash)
    assert isinstance(deps.hmac_func, HmacDrbg)
    assert deps.hmac_func.digest_size == 64
    assert isinstance(deps.irr_rand, NumpyIrrRand)


def test_create_rejects_unknown_names():
    with pytest.raises(ParamValidationError):
        Deps.create("s", hash_name="crc32")


def test_describe():
    info = Deps.create("s3cret", cohort=2).describe()
    assert info["hash_func"] == "md5"
    assert info["hmac_func"] == "hmac_sha256"
    assert info["irr_rand"] == "SecureIrrRand"
    assert info["cohort"] == 2
