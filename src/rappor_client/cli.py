"""
Command line front end for the RAPPOR client.

Subcommands
  - encode: encode values given as arguments (or one per stdin line) and
    print one JSON object per value.
  - sim: read ``client,cohort,value`` CSV rows and write
    ``client,cohort,bloom,prr,irr`` rows, one independent secret per client.

Usage:
    rappor-encode encode --secret s3cret --cohort 3 foo bar
    rappor-encode sim --params-csv params.csv --seed 0 < cases.csv > out.csv
"""
# 说明：RAPPOR 客户端命令行入口，库层只抛出类型化异常，CLI 层负责把异常转为退出码（配置错误 2，编码错误 1）。
# 职责：
# - build_parser：统一构建参数解析器，参数可来自命令行或 k,h,m,p,q,f 格式的参数 CSV
# - encode 子命令：逐个编码输入值并以 JSON 行输出，原始值默认掩码
# - sim 子命令：模拟多客户端上报流程，为每个客户端派生独立密钥并输出比特串 CSV

from __future__ import annotations

import argparse
import csv
import sys
from typing import IO, Iterable, List, Optional

from rappor_client.core.utils.config import get_config
from rappor_client.core.utils.logging import configure_logging, get_logger
from rappor_client.core.utils.serialization import serialize_to_json
from rappor_client.client.deps import Deps
from rappor_client.client.encoder import Encoder
from rappor_client.client.errors import ConfigurationError, EncodingError
from rappor_client.client.hashing import registered_hash_functions, registered_hmac_functions
from rappor_client.client.params import Params
from rappor_client.client.randomness import IrrRandInterface, NumpyIrrRand, SecureIrrRand

EXIT_OK = 0
EXIT_ENCODING_ERROR = 1
EXIT_CONFIG_ERROR = 2

logger = get_logger("rappor_client.cli")


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    defaults = Params()
    parser.add_argument("--params-csv", type=argparse.FileType("r"), default=None,
                        help="CSV file with header k,h,m,p,q,f; overrides the individual flags")
    parser.add_argument("--num-bits", "-k", type=int, default=defaults.num_bits, help="Bloom filter bits (k)")
    parser.add_argument("--num-hashes", "-H", type=int, default=defaults.num_hashes, help="Bloom filter hashes (h)")
    parser.add_argument("--num-cohorts", "-m", type=int, default=defaults.num_cohorts, help="number of cohorts (m)")
    parser.add_argument("--prob-f", "-f", type=float, default=defaults.prob_f, help="PRR probability f")
    parser.add_argument("--prob-p", "-p", type=float, default=defaults.prob_p, help="IRR probability p")
    parser.add_argument("--prob-q", "-q", type=float, default=defaults.prob_q, help="IRR probability q")
    parser.add_argument("--hash", default=None, choices=registered_hash_functions(),
                        help="Bloom filter hash (default: runtime config)")
    parser.add_argument("--hmac", default=None, choices=registered_hmac_functions(),
                        help="PRR HMAC (default: runtime config; use hmac_drbg for more than 32 bits)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed a reproducible numpy randomness source instead of OS entropy")
    parser.add_argument("--log-level", default=None, help="logging level (default: RAPPOR_LOG_LEVEL or INFO)")


def build_parser() -> argparse.ArgumentParser:
    """Build the ``rappor-encode`` argument parser."""
    parser = argparse.ArgumentParser(prog="rappor-encode", description="RAPPOR client-side encoder")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="encode values and print JSON lines")
    _add_common_args(enc)
    enc.add_argument("--secret", required=True, help="client secret (keys the PRR)")
    enc.add_argument("--cohort", type=int, default=0, help="cohort of this client")
    enc.add_argument("--encoder-id", default=None, help="metric name, used in logs")
    enc.add_argument("--debug", action="store_true", help="also print the Bloom filter and PRR (never transmit these)")
    enc.add_argument("--show-value", action="store_true", help="include the raw value in the output")
    enc.add_argument("values", nargs="*", help="values to encode; read from stdin when omitted")

    sim = sub.add_parser("sim", help="simulate many clients from a client,cohort,value CSV")
    _add_common_args(sim)
    sim.add_argument("--secret", default="sim-secret", help="base secret; each client uses '<secret>:<client>'")
    sim.add_argument("--infile", type=argparse.FileType("r"), default=None, help="input CSV (default: stdin)")
    sim.add_argument("--outfile", type=argparse.FileType("w"), default=None, help="output CSV (default: stdout)")
    return parser


def _params_from_args(args: argparse.Namespace) -> Params:
    if args.params_csv is not None:
        with args.params_csv as f:
            return Params.from_csv(f)
    return Params(
        num_bits=args.num_bits,
        num_hashes=args.num_hashes,
        num_cohorts=args.num_cohorts,
        prob_f=args.prob_f,
        prob_p=args.prob_p,
        prob_q=args.prob_q,
    )


def _irr_rand_from_args(args: argparse.Namespace) -> IrrRandInterface:
    seed = args.seed if args.seed is not None else get_config().rng_seed
    if seed is None:
        return SecureIrrRand()
    return NumpyIrrRand(seed)


def _iter_values(values: List[str], stream: IO[str]) -> Iterable[str]:
    if values:
        yield from values
        return
    for line in stream:
        line = line.rstrip("\n")
        if line:
            yield line


def _run_encode(args: argparse.Namespace, out: IO[str], stdin: IO[str]) -> int:
    params = _params_from_args(args)
    deps = Deps.create(
        args.secret,
        cohort=args.cohort,
        num_bits=params.num_bits,
        hash_name=args.hash,
        hmac_name=args.hmac,
        irr_rand=_irr_rand_from_args(args),
    )
    encoder = Encoder(params, deps, encoder_id=args.encoder_id)

    status = EXIT_OK
    for value in _iter_values(args.values, stdin):
        try:
            result = encoder.encode_internal(value)
        except EncodingError as exc:
            logger.error("failed to encode value: %s", exc)
            status = EXIT_ENCODING_ERROR
            continue
        record = {
            "value": value if args.show_value else "***",
            "cohort": encoder.cohort,
            "irr": result.irr.value,
            "irr_hex": result.irr.to_bytes().hex(),
        }
        if args.debug:
            record["bloom"] = result.bloom.bit_string()
            record["prr"] = result.prr.bit_string()
        out.write(serialize_to_json(record) + "\n")
    return status


def _run_sim(args: argparse.Namespace, out: IO[str], stdin: IO[str]) -> int:
    params = _params_from_args(args)
    irr_rand = _irr_rand_from_args(args)
    reader = csv.reader(args.infile or stdin)
    writer = csv.writer(args.outfile or out, lineterminator="\n")
    writer.writerow(["client", "cohort", "bloom", "prr", "irr"])

    encoders = {}
    status = EXIT_OK
    for i, row in enumerate(reader):
        if not row or (i == 0 and row[:3] == ["client", "cohort", "value"]):
            continue
        if len(row) != 3:
            raise ConfigurationError(f"line {i + 1}: expected client,cohort,value (got {row!r})")
        client, cohort_text, value = row
        key = (client, cohort_text)
        if key not in encoders:
            deps = Deps.create(
                f"{args.secret}:{client}",
                cohort=int(cohort_text),
                num_bits=params.num_bits,
                hash_name=args.hash,
                hmac_name=args.hmac,
                irr_rand=irr_rand,
            )
            encoders[key] = Encoder(params, deps, encoder_id=client)
        try:
            result = encoders[key].encode_internal(value)
        except EncodingError as exc:
            logger.error("client %s: failed to encode value: %s", client, exc)
            status = EXIT_ENCODING_ERROR
            continue
        writer.writerow([client, cohort_text, result.bloom.bit_string(), result.prr.bit_string(), result.irr.bit_string()])
    return status


def main(argv: Optional[List[str]] = None, *, out: Optional[IO[str]] = None, stdin: Optional[IO[str]] = None) -> int:
    """Entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    out = out or sys.stdout
    stdin = stdin or sys.stdin
    try:
        if args.command == "encode":
            return _run_encode(args, out, stdin)
        return _run_sim(args, out, stdin)
    except ConfigurationError as exc:
        logger.error("invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR
    except ValueError as exc:
        # 例如 sim 输入中 cohort 不是整数
        logger.error("invalid input: %s", exc)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
