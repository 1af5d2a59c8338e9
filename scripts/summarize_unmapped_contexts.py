"""Summarize unmapped context labels collected by the normalizer.

Usage:
  python scripts/summarize_unmapped_contexts.py --input /tmp/mind-note-unmapped.jsonl
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize unmapped context labels")
    parser.add_argument("--input", required=True, help="Path to unmapped queue JSONL file")
    parser.add_argument("--top", type=int, default=30, help="Rows to show (default: 30)")
    parser.add_argument("--format", choices=["json", "table"], default="table")
    return parser.parse_args()


def load_records(path: Path) -> list[dict]:
    if not path.exists():
        return []

    records: list[dict] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return records


def summarize(records: list[dict]) -> list[dict]:
    grouped: dict[str, dict] = {}
    for record in records:
        raw = str(record.get("raw", "")).strip()
        if not raw:
            continue

        row = grouped.setdefault(raw, {"raw": raw, "count": 0, "languages": set(), "latest_ts": None})
        row["count"] += 1
        if record.get("language"):
            row["languages"].add(record["language"])
        ts = record.get("ts")
        if isinstance(ts, str) and (row["latest_ts"] is None or ts > row["latest_ts"]):
            row["latest_ts"] = ts

    rows = [{**row, "languages": sorted(row["languages"])} for row in grouped.values()]
    rows.sort(key=lambda row: (-row["count"], row["raw"]))
    return rows


def render_table(rows: list[dict]) -> str:
    lines = ["count | raw | languages | latest_ts", "--- | --- | --- | ---"]
    for row in rows:
        lines.append(
            f"{row['count']} | {row['raw']} | {','.join(row['languages']) or '-'} | {row['latest_ts']}"
        )
    return "\n".join(lines)


def main() -> int:
    args = parse_args()
    rows = summarize(load_records(Path(args.input)))[: args.top]

    if args.format == "json":
        print(json.dumps(rows, ensure_ascii=False, indent=2))
    else:
        print(render_table(rows))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
