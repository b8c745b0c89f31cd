"""
Example 00: Encoding values with a RAPPOR client.

Goal:
    Build an Encoder from Params and Deps, encode a few strings and an
    integer, and show the Bloom filter, PRR and IRR of each. The PRR stays
    the same across calls for the same value while the IRR changes.

Usage:
    python examples/basic/00_encode_values.py --seed 123
"""
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[2]
src_root = project_root / "src"
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from examples._shared import cli, io
from rappor_client import Deps, Encoder, NumpyIrrRand, Params

def main(argv=None):
    args = cli.parse_args("Basic RAPPOR encoding", argv)
    
    # 1. Parameters and capabilities
    params = Params(num_bits=32, num_hashes=2, num_cohorts=64, prob_f=0.5, prob_p=0.5, prob_q=0.75)
    deps = Deps.create("example-secret", cohort=7, num_bits=params.num_bits, irr_rand=NumpyIrrRand(args.seed))
    encoder = Encoder(params, deps, encoder_id="example.homepage")
    
    # 2. Encode the same value several times
    reports = []
    for value in ["foo", "foo", "foo", "bar"]:
        result = encoder.encode_internal(value)
        reports.append({
            "value": value,
            "bloom": result.bloom.bit_string(),
            "prr": result.prr.bit_string(),
            "irr": result.irr.bit_string(),
        })
    
    # 3. Integers are encoded as 4 big-endian bytes
    irr_int = encoder.encode_bits(42)
    
    result = {
        "name": "basic/00_encode_values",
        "config": {
            "seed": args.seed,
            "params": params.to_json(),
        },
        "outputs": {
            "reports": reports,
            "encoded_42": irr_int.to_bytes().hex(),
            "encoder": encoder.get_metadata(),
        },
        "metrics": {
            "distinct_prr_for_foo": len({r["prr"] for r in reports if r["value"] == "foo"}),
            "distinct_irr_for_foo": len({r["irr"] for r in reports if r["value"] == "foo"}),
        },
        "artifacts": {}
    }
    
    out_path = io.write_json(result, Path(args.outdir) / "00_encode_values.json")
    result["artifacts"]["json"] = str(out_path)
    
    return result

if __name__ == "__main__":
    res = main()
    io.print_summary(res)
