"""
RAPPOR encoding parameters and their validation.

Responsibilities
  - Hold the immutable (k, h, m, f, p, q) parameter set.
  - Validate structural and probability parameters once, before any
    encoding happens.
  - Read/write the parameter set in the CSV and JSON layouts shared with
    the analysis tooling.

Usage Context
  - Construct one Params per metric and hand it to ``Encoder``.

Limitations
  - These parameters affect privacy; validation only checks legal ranges,
    it does not judge whether a setting is private enough.
"""
# 说明：RAPPOR 编码参数值对象与构造期参数校验器。
# 职责：
# - Params：不可变地保存位宽 k、哈希数 h、cohort 数 m 以及概率 f/p/q
# - validate_params：在编码器构造时一次性检查全部结构参数、概率参数与 cohort 绑定
# - 支持 CSV（k,h,m,p,q,f）与 JSON（numBits/probPrr 等）两种外部格式

from __future__ import annotations

import csv
import io
from dataclasses import asdict, dataclass
from typing import IO, Any, Dict, Mapping

from rappor_client.core.utils.param_validation import ensure_int
from rappor_client.core.utils.serialization import serialize_to_json
from rappor_client.client.errors import ConfigurationError
from rappor_client.client.rappor_utils import ensure_probability

# 每个比特消耗 HMAC-SHA256 摘要的 1 个字节来生成 PRR，SHA256 共 32 字节
MAX_BITS = 32
# 不能超过 MD5 摘要的字节数
MAX_HASHES = 16
# cohort 以 4 字节大端整数作为哈希输入前缀
MAX_COHORTS = 1 << 32

CSV_HEADER = ["k", "h", "m", "p", "q", "f"]


@dataclass(frozen=True)
class Params:
    """
    RAPPOR encoding parameters.

    - Configuration
      - num_bits: Number of Bloom filter bits (k).
      - num_hashes: Number of Bloom filter hashes (h).
      - num_cohorts: Number of cohorts (m).
      - prob_f: Probability f of replacing a Bloom bit in the PRR.
      - prob_p: Probability p of reporting 1 for a PRR bit of 0.
      - prob_q: Probability q of reporting 1 for a PRR bit of 1.

    - Behavior
      - Immutable; construction does not validate so that bad settings can
        be represented and rejected by ``validate_params``.
    """

    num_bits: int = 16
    num_hashes: int = 2
    num_cohorts: int = 64
    prob_f: float = 0.50
    prob_p: float = 0.50
    prob_q: float = 0.75

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Params":
        # 从字典恢复参数，缺省字段使用默认值，未知字段显式报错
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"unknown params fields: {sorted(unknown)}")
        return cls(**dict(data))

    def to_json(self) -> str:
        """Convert this instance to JSON using the analysis API key names."""
        return serialize_to_json(
            {
                "numBits": self.num_bits,
                "numHashes": self.num_hashes,
                "numCohorts": self.num_cohorts,
                "probPrr": self.prob_f,
                "probIrr0": self.prob_p,
                "probIrr1": self.prob_q,
            }
        )

    def to_csv(self) -> str:
        # 输出带表头的两行 CSV，与 from_csv 互逆
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerow([self.num_bits, self.num_hashes, self.num_cohorts, self.prob_p, self.prob_q, self.prob_f])
        return buf.getvalue()

    @classmethod
    def from_csv(cls, f: IO[str]) -> "Params":
        """
        Read the RAPPOR parameters from a CSV file handle.

        Raises:
            ConfigurationError: when the file is malformed.
        """
        rows = [row for row in csv.reader(f) if row]
        if not rows:
            raise ConfigurationError("params file is empty")
        if rows[0] != CSV_HEADER:
            raise ConfigurationError(f"Header {rows[0]} is malformed; expected {','.join(CSV_HEADER)}")
        if len(rows) < 2:
            raise ConfigurationError("Expected second row with params")
        if len(rows) > 2:
            raise ConfigurationError("Params file should only have two rows")
        row = rows[1]
        try:
            return cls(
                num_bits=int(row[0]),
                num_hashes=int(row[1]),
                num_cohorts=int(row[2]),
                prob_p=float(row[3]),
                prob_q=float(row[4]),
                prob_f=float(row[5]),
            )
        except (ValueError, IndexError) as exc:
            raise ConfigurationError(f"Row is malformed: {exc}") from exc


def validate_params(params: Params, cohort: int, *, max_bits: int = MAX_BITS) -> None:
    """
    Check every structural and probability parameter plus the cohort binding.

    ``max_bits`` is the number of PRR digest bytes available, one per bit
    (32 for HMAC-SHA256). Widths above 32 are emitted as byte vectors and
    must therefore be whole bytes.

    Raises:
        ConfigurationError: on the first violation found.
    """
    # 结构参数：先检查正数，再检查上限，顺序与错误信息保持稳定以便调用方匹配
    num_bits = ensure_int(params.num_bits, label="num_bits", error=ConfigurationError)
    num_hashes = ensure_int(params.num_hashes, label="num_hashes", error=ConfigurationError)
    num_cohorts = ensure_int(params.num_cohorts, label="num_cohorts", error=ConfigurationError)
    cohort = ensure_int(cohort, label="cohort", error=ConfigurationError)

    if num_bits <= 0:
        raise ConfigurationError("num_bits must be positive")
    if num_hashes <= 0:
        raise ConfigurationError("num_hashes must be positive")
    if num_cohorts <= 0:
        raise ConfigurationError("num_cohorts must be positive")

    if num_bits > max_bits:
        raise ConfigurationError(f"num_bits ({num_bits}) can't be greater than {max_bits}")
    if num_bits > MAX_BITS and num_bits % 8 != 0:
        raise ConfigurationError(f"num_bits ({num_bits}) must be divisible by 8 for byte-vector output")
    if num_hashes > MAX_HASHES:
        raise ConfigurationError(f"num_hashes ({num_hashes}) can't be greater than {MAX_HASHES}")
    if num_cohorts > MAX_COHORTS:
        raise ConfigurationError(f"num_cohorts ({num_cohorts}) can't be greater than {MAX_COHORTS}")
    validate_cohort(cohort, num_cohorts)

    ensure_probability(params.prob_f, "prob_f", error=ConfigurationError)
    ensure_probability(params.prob_p, "prob_p", error=ConfigurationError)
    ensure_probability(params.prob_q, "prob_q", error=ConfigurationError)


def validate_cohort(cohort: int, num_cohorts: int) -> None:
    # cohort 必须落在 [0, num_cohorts) 内
    cohort = ensure_int(cohort, label="cohort", error=ConfigurationError)
    if cohort < 0:
        raise ConfigurationError(f"cohort ({cohort}) must be non-negative")
    if cohort >= num_cohorts:
        raise ConfigurationError(f"cohort ({cohort}) can't be greater than or equal to num_cohorts ({num_cohorts})")
