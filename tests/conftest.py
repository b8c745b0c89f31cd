"""Shared pytest configuration, path setup and test doubles for the RAPPOR client."""
# 说明：测试共享配置：将 src/ 加入 sys.path，提供确定性随机源替身与常用参数夹具，并在每个测试后恢复全局运行时配置。

import dataclasses
import sys
from pathlib import Path

import pytest

# Ensure repo root and src/ are on sys.path for all tests
_ROOT = Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
for p in (str(_ROOT), str(_SRC)):
    if p not in sys.path:
        sys.path.insert(0, p)

from rappor_client.core.utils.config import get_config  # noqa: E402
from rappor_client.client.deps import Deps  # noqa: E402
from rappor_client.client.errors import RandomnessError  # noqa: E402
from rappor_client.client.hashing import HmacDrbg, HmacSha256, Md5Hash  # noqa: E402
from rappor_client.client.params import Params  # noqa: E402
from rappor_client.client.randomness import IrrRandInterface  # noqa: E402


class MockRand(IrrRandInterface):
    """Deterministic source: the p draw is all zeros, the q draw all ones, so IRR == PRR."""

    def __init__(self):
        self.calls = []

    def get_mask(self, prob, num_bits):
        # 偶数次调用为 p 掩码（全 0），奇数次调用为 q 掩码（全 1）
        index = len(self.calls)
        self.calls.append((prob, num_bits))
        if index % 2 == 0:
            return 0
        return (1 << num_bits) - 1


class FailingRand(IrrRandInterface):
    """Source whose entropy read always fails."""

    def __init__(self, exc=None):
        self.exc = exc or OSError("entropy source exhausted")

    def get_mask(self, prob, num_bits):
        raise self.exc


@pytest.fixture(autouse=True)
def _restore_runtime_config():
    # 测试可能修改全局配置单例，结束后逐字段恢复
    config = get_config()
    snapshot = dataclasses.replace(config, extra=dict(config.extra))
    yield
    for f in dataclasses.fields(snapshot):
        setattr(config, f.name, getattr(snapshot, f.name))


@pytest.fixture
def mock_rand():
    return MockRand()


@pytest.fixture
def failing_rand():
    return FailingRand()


@pytest.fixture
def params32():
    # 32 位输出、2 个哈希、128 个 cohort，f=0.25, p=0.75, q=0.5
    return Params(num_bits=32, num_hashes=2, num_cohorts=128, prob_f=0.25, prob_p=0.75, prob_q=0.5)


@pytest.fixture
def params64():
    return Params(num_bits=64, num_hashes=2, num_cohorts=128, prob_f=0.25, prob_p=0.75, prob_q=0.5)


@pytest.fixture
def deps32(mock_rand):
    return Deps(hash_func=Md5Hash(), client_secret=b"client-secret", hmac_func=HmacSha256(), irr_rand=mock_rand, cohort=3)


@pytest.fixture
def deps64(mock_rand):
    return Deps(hash_func=Md5Hash(), client_secret=b"client-secret", hmac_func=HmacDrbg(64), irr_rand=mock_rand, cohort=3)


@pytest.fixture
def failing_rand_cls():
    return FailingRand


@pytest.fixture
def mock_rand_cls():
    return MockRand
