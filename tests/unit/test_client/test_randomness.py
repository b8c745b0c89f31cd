"""
Unit tests for the IRR randomness sources.
"""
# 说明：IRR 随机掩码来源的单元测试。
# 覆盖：
# - SecureIrrRand：掩码位宽受限、概率为 1 时全 1、熵源失败转换为 RandomnessError
# - NumpyIrrRand：相同种子可复现、默认读取运行时配置种子、频率近似 prob、spawn 派生独立子流
# - 非法概率与位宽在抽样前即被拒绝

import numpy as np
import pytest

from rappor_client.client.errors import EncodingError, RandomnessError
from rappor_client.client.randomness import NumpyIrrRand, SecureIrrRand
from rappor_client.core.utils.config import configure


def test_secure_rand_masks_are_bounded():
    rand = SecureIrrRand()
    for _ in range(20):
        assert 0 <= rand.get_mask(0.5, 12) < (1 << 12)
    assert rand.get_mask(1.0, 16) == 0xFFFF


def test_secure_rand_wraps_entropy_failure(monkeypatch):
    rand = SecureIrrRand()

    def broken():
        raise OSError("no entropy")

    monkeypatch.setattr(rand._rand, "random", broken)
    with pytest.raises(RandomnessError) as exc_info:
        rand.get_mask(0.5, 8)
    assert exc_info.value.stage == "irr"
    assert isinstance(exc_info.value, EncodingError)


@pytest.mark.parametrize("rand", [SecureIrrRand(), NumpyIrrRand(0)])
def test_invalid_requests_rejected(rand):
    with pytest.raises(RandomnessError):
        rand.get_mask(0.0, 8)
    with pytest.raises(RandomnessError):
        rand.get_mask(1.5, 8)
    with pytest.raises(RandomnessError):
        rand.get_mask(0.5, 0)


def test_numpy_rand_is_reproducible():
    a = NumpyIrrRand(42)
    b = NumpyIrrRand(42)
    assert [a.get_mask(0.5, 64) for _ in range(5)] == [b.get_mask(0.5, 64) for _ in range(5)]
    assert NumpyIrrRand(42).get_mask(0.5, 64) != NumpyIrrRand(43).get_mask(0.5, 64)


def test_numpy_rand_defaults_to_config_seed():
    configure(rng_seed=7)
    assert NumpyIrrRand().get_mask(0.5, 64) == NumpyIrrRand(7).get_mask(0.5, 64)


def test_numpy_rand_accepts_generator():
    rng = np.random.default_rng(3)
    rand = NumpyIrrRand(rng)
    assert rand.rng is rng


def test_numpy_rand_bit_frequency():
    # 每位以概率 prob 独立为 1
    rand = NumpyIrrRand(2024)
    num_bits, rounds = 64, 200
    ones = sum(bin(rand.get_mask(0.25, num_bits)).count("1") for _ in range(rounds))
    assert abs(ones / (num_bits * rounds) - 0.25) < 0.03
    assert rand.get_mask(1.0, num_bits) == (1 << num_bits) - 1


def test_numpy_rand_spawn():
    children = NumpyIrrRand(11).spawn(3)
    assert len(children) == 3
    masks = [child.get_mask(0.5, 64) for child in children]
    assert len(set(masks)) == 3
    # 相同父种子派生出相同的子流
    again = [child.get_mask(0.5, 64) for child in NumpyIrrRand(11).spawn(3)]
    assert again == masks
    with pytest.raises(ValueError):
        NumpyIrrRand(11).spawn(0)
