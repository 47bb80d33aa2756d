# app/utils/text.py
from typing import Any, List, Optional
from urllib.parse import urlparse


def is_blank(s: Optional[str]) -> bool:
    return not (s or "").strip()


def norm_answer(s: Optional[str]) -> str:
    # free-text answers: trim + case-fold, nothing fuzzier
    return (s or "").strip().casefold()


def is_valid_url(url: str) -> bool:
    try:
        p = urlparse((url or "").strip())
    except ValueError:
        return False
    return bool(p.scheme and p.netloc)


def as_str_list(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    if isinstance(v, (list, tuple)):
        return ["" if x is None else str(x) for x in v]
    return []
