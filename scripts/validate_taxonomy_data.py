"""Validate taxonomy data consistency.

Checks:
1. The default category is one of the canonical categories.
2. Canonical categories are unique.
3. Alias targets reference existing canonical categories.
4. Alias locales are supported memo languages.
5. No two aliases fold to the same text while pointing to different categories.
"""

from __future__ import annotations

import json
import re
import unicodedata
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
DATA_ROOT = ROOT / "src" / "mind_note" / "taxonomy" / "data"
SUPPORTED_LOCALES = {"en", "ko", "ja", "es", "fr", "de"}


def fold_text(value: str) -> str:
    text = unicodedata.normalize("NFKC", value).lower().strip()
    text = text.replace("_", " ").replace("-", " ")
    text = re.sub(r"[^\w\s]", " ", text)
    return re.sub(r"\s+", "", text)


def fail(message: str) -> None:
    print(f"[taxonomy-check] ERROR: {message}")
    raise SystemExit(1)


def load_json(path: Path):
    if not path.exists():
        fail(f"Missing JSON file: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def validate_categories(data: dict, label: str) -> list[str]:
    categories = data.get("categories")
    if not isinstance(categories, list) or not all(isinstance(item, str) for item in categories):
        fail(f"{label}: 'categories' must be a list of strings")
    if len(set(categories)) != len(categories):
        fail(f"{label}: duplicate canonical categories")
    if data.get("default_category") not in categories:
        fail(f"{label}: default_category {data.get('default_category')!r} is not canonical")
    return categories


def validate_aliases(aliases: list[dict], categories: list[str], label: str) -> None:
    canonical = set(categories)
    seen: dict[str, str] = {}
    for alias in aliases:
        locale = alias.get("locale")
        raw = alias.get("alias")
        category = alias.get("category")
        if not isinstance(raw, str) or not isinstance(category, str):
            fail(f"{label}: invalid alias entry: {alias}")
        if locale not in SUPPORTED_LOCALES:
            fail(f"{label}: unsupported alias locale: {alias}")
        if category not in canonical:
            fail(f"{label}: alias references unknown category: {alias}")

        signature = fold_text(raw)
        if signature in seen and seen[signature] != category:
            fail(
                f"{label}: conflicting alias {raw!r}: "
                f"{seen[signature]} vs {category}"
            )
        seen[signature] = category


def iter_taxonomy_versions() -> list[Path]:
    versions = [
        path
        for path in sorted(DATA_ROOT.iterdir())
        if path.is_dir() and (path / "categories.json").exists()
    ]
    if not versions:
        fail(f"No taxonomy versions found under {DATA_ROOT}")
    return versions


def main() -> int:
    for version_dir in iter_taxonomy_versions():
        label = version_dir.name
        categories = validate_categories(load_json(version_dir / "categories.json"), label)
        aliases = load_json(version_dir / "aliases.json")
        if not isinstance(aliases, list):
            fail(f"{label}: aliases.json must contain a list")
        validate_aliases(aliases, categories, label)

    print("[taxonomy-check] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
