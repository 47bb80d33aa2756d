from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

_SHORT_DATE = re.compile(r"^(\d{2})(\d{2})(\d{2})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def normalize_date(slug: str) -> Optional[str]:
    """
    "250312" -> "2025-03-12", "2025-03-12" unchanged. Anything else, or a
    month/day out of range, gives None.
    """
    s = str(slug or "").strip()

    m = _SHORT_DATE.match(s)
    if m:
        year, month, day = f"20{m.group(1)}", m.group(2), m.group(3)
    else:
        m = _ISO_DATE.match(s)
        if not m:
            return None
        year, month, day = m.group(1), m.group(2), m.group(3)

    if not 1 <= int(month) <= 12 or not 1 <= int(day) <= 31:
        return None
    return f"{year}-{month}-{day}"


def available_dates(data: Mapping[str, Mapping[str, Any]], theme: str) -> List[str]:
    """Dates that hold at least one question, newest first."""
    bucket = data.get(theme) or {}
    return sorted((d for d, qs in bucket.items() if qs), reverse=True)


def archive_structure(dates: List[str]) -> Dict[str, Any]:
    years: Dict[int, Dict[int, List[str]]] = {}
    for d in dates:
        parts = d.split("-")
        if len(parts) < 2:
            continue
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError:
            continue
        years.setdefault(year, {}).setdefault(month, []).append(d)

    return {
        "years": [
            {
                "year": y,
                "months": [
                    {"month": m, "dates": sorted(years[y][m], reverse=True)}
                    for m in sorted(years[y], reverse=True)
                ],
            }
            for y in sorted(years, reverse=True)
        ]
    }


def most_recent_date(data: Mapping[str, Mapping[str, Any]], theme: str) -> Optional[str]:
    dates = available_dates(data, theme)
    return dates[0] if dates else None


def has_questions(data: Mapping[str, Mapping[str, Any]], theme: str, date: str) -> bool:
    return bool((data.get(theme) or {}).get(date))
