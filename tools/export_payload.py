#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from calc_core import calculate, load_catalog  # noqa: E402
from calc_core.export_payload import build_payload  # noqa: E402
from calc_core.model import Snapshot  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Calculate a snapshot and export it as a saved-calculation payload."
    )
    ap.add_argument("--input", required=True, help="Snapshot JSON path.")
    ap.add_argument("--catalog", default=str(ROOT / "data" / "materials.json"), help="Material catalog JSON path.")
    ap.add_argument("--name", required=True, help="Calculation name.")
    ap.add_argument("--out", required=True, help="Output JSON path.")
    args = ap.parse_args()

    catalog = load_catalog(args.catalog)
    data = json.loads(Path(args.input).read_text(encoding="utf-8"))
    snapshot = Snapshot.from_dict(data, catalog=catalog)
    results = calculate(snapshot)
    if results is None:
        print("NO_CALC: select a material and a positive thickness", file=sys.stderr)
        return 1

    payload = build_payload(results, snapshot, args.name)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
