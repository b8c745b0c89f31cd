"""Capability bundle injected into the RAPPOR encoder."""
# 说明：编码器依赖的能力集合（哈希、HMAC、客户端密钥、IRR 随机源与 cohort），只读且可在编码器之间共享。
# 职责：
# - 以不可变 dataclass 打包调用约定而非具体实现，编码器对能力集合多态
# - create(...)：按注册名称与运行时配置默认值装配一套标准依赖

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from rappor_client.core.utils.config import get_config
from rappor_client.core.utils.param_validation import ParamValidationError, ensure_int
from rappor_client.client.hashing import (
    HashCallable,
    HmacCallable,
    get_hash_function,
    get_hmac_function,
)
from rappor_client.client.randomness import IrrRandInterface, SecureIrrRand
from rappor_client.client.rappor_utils import ensure_bytes


@dataclass(frozen=True)
class Deps:
    """
    Injected capabilities for one encoder identity.

    - Configuration
      - hash_func: bytes -> digest, used for Bloom bit selection.
      - client_secret: Secret bytes, constant for the device lifetime.
      - hmac_func: (secret, message) -> digest, used for the PRR.
      - irr_rand: Source of IRR masks.
      - cohort: Cohort assigned to this client.

    - Usage Notes
      - ``client_secret`` given as str is UTF-8 encoded.
    """

    hash_func: HashCallable
    client_secret: bytes = field(repr=False)
    hmac_func: HmacCallable
    irr_rand: IrrRandInterface
    cohort: int = 0

    def __post_init__(self) -> None:
        # frozen dataclass 需借助 object.__setattr__ 规范化密钥类型
        object.__setattr__(self, "client_secret", ensure_bytes(self.client_secret, label="client_secret"))
        ensure_int(self.cohort, label="cohort")
        if not callable(self.hash_func):
            raise ParamValidationError("hash_func must be callable")
        if not callable(self.hmac_func):
            raise ParamValidationError("hmac_func must be callable")
        if not callable(getattr(self.irr_rand, "get_mask", None)):
            raise ParamValidationError("irr_rand must provide get_mask(prob, num_bits)")

    @classmethod
    def create(
        cls,
        client_secret: Union[str, bytes],
        *,
        cohort: int = 0,
        num_bits: int = 32,
        hash_name: Optional[str] = None,
        hmac_name: Optional[str] = None,
        irr_rand: Optional[IrrRandInterface] = None,
    ) -> "Deps":
        """Assemble standard capabilities by registry name; defaults come from RuntimeConfig."""
        config = get_config()
        return cls(
            hash_func=get_hash_function(hash_name or config.default_hash),
            client_secret=client_secret,  # type: ignore[arg-type]
            hmac_func=get_hmac_function(hmac_name or config.default_hmac, num_bits),
            irr_rand=irr_rand if irr_rand is not None else SecureIrrRand(),
            cohort=cohort,
        )

    def describe(self) -> Dict[str, Any]:
        # 返回不含密钥明文的依赖描述，用于元数据与日志
        return {
            "hash_func": getattr(self.hash_func, "name", repr(self.hash_func)),
            "hmac_func": getattr(self.hmac_func, "name", repr(self.hmac_func)),
            "irr_rand": self.irr_rand.__class__.__name__,
            "cohort": self.cohort,
            "client_secret": self.client_secret,
        }
