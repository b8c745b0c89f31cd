"""
Input/Output helpers for examples.
"""
from pathlib import Path
from typing import Any, Dict, Union

from rappor_client.core.utils.serialization import serialize_to_json

def write_json(data: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write data to a JSON file; client secrets are masked."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(serialize_to_json(data, sensitive_fields=("client_secret",)), encoding="utf-8")
    return p

def print_summary(result: Dict[str, Any]) -> None:
    """
    Print a summary of the example result to stdout.
    
    Expects result dict to have keys: 'name', 'config', 'metrics', 'artifacts'.
    """
    print("=" * 60)
    print(f"EXAMPLE: {result.get('name', 'Unknown')}")
    print("-" * 60)
    
    for section in ("config", "metrics", "artifacts"):
        if result.get(section):
            print(f"{section.capitalize()}:")
            for k, v in result[section].items():
                print(f"  {k}: {v}")
            print("-" * 60)
