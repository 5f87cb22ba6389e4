from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional


def normalize_name(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip().lower()


def english_text(entries: Optional[Iterable[Mapping[str, Any]]], field: str) -> str:
    # first entry whose language is "en", "" if none
    for e in entries or []:
        if (e.get("language") or {}).get("name") == "en":
            return e.get(field) or ""
    return ""


def tenths(v: Any) -> Optional[float]:
    try:
        if v is None: return None
        return float(v) / 10
    except (TypeError, ValueError):
        return None
