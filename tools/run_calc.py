#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/run_calc.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from calc_core import calculate, load_catalog  # noqa: E402
from calc_core.logging_config import setup_logging  # noqa: E402
from calc_core.model import CATEGORIES, Snapshot  # noqa: E402

DEFAULT_CATALOG = ROOT / "data" / "materials.json"


def summary_table(results) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "operation": category,
                "enabled": bool(results.dependencies.get(category)),
                "per_piece_t": round(results.per_piece_category_tonnage(category), 3),
                "batch_t": round(results.category_tonnage(category), 3),
            }
            for category in CATEGORIES
        ]
    )


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Calculate press tonnage for one snapshot (material, parameters, operations)."
    )
    ap.add_argument("--input", required=True, help="Snapshot JSON path.")
    ap.add_argument("--catalog", default=str(DEFAULT_CATALOG), help="Material catalog JSON path.")
    ap.add_argument("--out", default=None, help="Optional path to write the full results JSON.")
    ap.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    args = ap.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    catalog = load_catalog(args.catalog)
    data = json.loads(Path(args.input).read_text(encoding="utf-8"))
    snapshot = Snapshot.from_dict(data, catalog=catalog)

    results = calculate(snapshot)
    if results is None:
        print("NO_CALC: select a material and a positive thickness")
        return 1

    print("OK")
    print("material:", results.material_id, f"({results.temperature_effects.regime})")
    print("temperature_factor:", round(results.temperature_effects.factor, 4))
    print(summary_table(results).to_string(index=False))
    print("per_piece_total_t:", round(results.per_piece_total_tonnage, 3))
    print("total_t:", round(results.total_tonnage, 3))
    print("reverse_t:", round(results.reverse_tonnage, 3))
    for d in results.diagnostics:
        print("warning:", d.code, d.message)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(results.to_dict(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
