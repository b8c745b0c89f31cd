"""
Unit tests for the permanent and instantaneous randomized response stages.
"""
# 说明：PRR 与 IRR 两个随机响应阶段的单元测试。
# 覆盖：
# - PRR 掩码逐字节派生：最低位为 uniform，高 7 位与 floor(f*128) 比较得到 f_mask
# - f = 1.0 时 PRR 等于 uniform，阈值取整为 0 时 PRR 等于 Bloom
# - HMAC 摘要长度不符时抛出 HmacFunctionError
# - IRR 的 p/q 组合公式、随机源失败的包装与非法掩码的拒绝

import hashlib
import hmac

import numpy as np
import pytest

from rappor_client.client.errors import HmacFunctionError, RandomnessError
from rappor_client.client.hashing import HmacSha256
from rappor_client.client.randomized_response import InstantaneousRandomizer, PermanentRandomizer
from rappor_client.client.randomness import IrrRandInterface
from rappor_client.client.types import Bits

SECRET = b"client-secret"


def _oracle_masks(value, num_bits, prob_f):
    digest = hmac.new(SECRET, value, hashlib.sha256).digest()
    threshold = int(prob_f * 128)
    uniform = sum((digest[i] & 1) << i for i in range(num_bits))
    f_mask = sum(int((digest[i] >> 1) < threshold) << i for i in range(num_bits))
    return uniform, f_mask


class ConstantRand(IrrRandInterface):
    def __init__(self, *masks):
        self.masks = list(masks)

    def get_mask(self, prob, num_bits):
        return self.masks.pop(0)


def test_prr_masks_match_hmac_bytes():
    prr = PermanentRandomizer(32, 0.25, HmacSha256(), SECRET)
    uniform, f_mask = prr.masks(b"foo")
    assert (uniform.value, f_mask.value) == _oracle_masks(b"foo", 32, 0.25)
    assert prr.threshold128 == 32


def test_prr_combines_bloom_and_noise():
    prr = PermanentRandomizer(32, 0.25, HmacSha256(), SECRET)
    bloom = Bits(0x00010010, 32)
    uniform, f_mask = _oracle_masks(b"foo", 32, 0.25)
    expected = (bloom.value & ~f_mask | uniform & f_mask) & 0xFFFFFFFF
    result = prr.randomize(bloom, b"foo")
    assert result.value == expected
    # 同一 (secret, value) 的 PRR 恒定
    assert prr.randomize(bloom, b"foo") == result


def test_prr_with_f_one_is_uniform():
    prr = PermanentRandomizer(16, 1.0, HmacSha256(), SECRET)
    uniform, f_mask = prr.masks(b"foo")
    assert f_mask.value == 0xFFFF
    assert prr.randomize(Bits(0xFFFF, 16), b"foo") == uniform
    assert prr.randomize(Bits(0, 16), b"foo") == uniform


def test_prr_with_zero_threshold_keeps_bloom():
    # floor(0.005 * 128) == 0，任何比特都不会被替换
    prr = PermanentRandomizer(16, 0.005, HmacSha256(), SECRET)
    bloom = Bits(0b1010_0000_0000_0101, 16)
    assert prr.randomize(bloom, b"foo") == bloom


@pytest.mark.parametrize("digest", [b"\x00" * 16, b"\x00" * 33, "not-bytes"])
def test_prr_rejects_wrong_digest(digest):
    prr = PermanentRandomizer(16, 0.5, lambda secret, value: digest, SECRET, digest_size=32)
    with pytest.raises(HmacFunctionError) as exc_info:
        prr.masks(b"foo")
    assert exc_info.value.stage == "prr"


def test_irr_reports_prr_when_p_zero_and_q_one(mock_rand):
    irr = InstantaneousRandomizer(32, 0.75, 0.5, mock_rand)
    prr = Bits(0xDEADBEEF, 32)
    assert irr.randomize(prr) == prr
    # 先抽 p 掩码，再抽 q 掩码
    assert mock_rand.calls == [(0.75, 32), (0.5, 32)]


def test_irr_inverts_prr_when_p_one_and_q_zero():
    irr = InstantaneousRandomizer(8, 0.5, 0.5, ConstantRand(0xFF, 0x00))
    assert irr.randomize(Bits(0b1100_1010, 8)).value == 0b0011_0101


def test_irr_accepts_numpy_integers():
    irr = InstantaneousRandomizer(8, 0.5, 0.5, ConstantRand(np.uint64(0x0F), np.int64(0xF0)))
    assert irr.randomize(Bits(0b1010_1010, 8)).value == 0b1010_0101


def test_irr_wraps_os_errors(failing_rand):
    irr = InstantaneousRandomizer(8, 0.5, 0.5, failing_rand)
    with pytest.raises(RandomnessError) as exc_info:
        irr.randomize(Bits(0, 8))
    assert exc_info.value.stage == "irr"
    assert isinstance(exc_info.value.__cause__, OSError)


def test_irr_propagates_randomness_errors(failing_rand_cls):
    original = RandomnessError("source closed")
    irr = InstantaneousRandomizer(8, 0.5, 0.5, failing_rand_cls(original))
    with pytest.raises(RandomnessError) as exc_info:
        irr.randomize(Bits(0, 8))
    assert exc_info.value is original


@pytest.mark.parametrize("mask", [1 << 8, -1, True, 0.5, None])
def test_irr_rejects_invalid_masks(mask):
    irr = InstantaneousRandomizer(8, 0.5, 0.5, ConstantRand(mask, 0))
    with pytest.raises(RandomnessError, match="invalid mask"):
        irr.randomize(Bits(0, 8))
