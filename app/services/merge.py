from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Sequence

from app.constants import GAME_TYPE_MAP, THEMES
from app.errors import PayloadError
from app.stores.base import QuestionStore

log = logging.getLogger(__name__)


def _qid(q: Any) -> Any:
    if isinstance(q, dict):
        qid = q.get("id")
    else:
        qid = getattr(q, "id", None)
    try:
        hash(qid)
    except TypeError:
        # list / object ids from the wire
        return ("json", json.dumps(qid, sort_keys=True, default=str))
    return qid


def merge(existing: Sequence[Any], incoming: Sequence[Any]) -> List[Any]:
    """
    Id-keyed upsert. Existing entries keep their position, an incoming entry
    with a known id replaces it whole, unknown ids are appended in order.
    Nothing is validated here.
    """
    by_id: Dict[Any, Any] = {}
    for q in existing:
        by_id[_qid(q)] = q
    for q in incoming:
        by_id[_qid(q)] = q
    return list(by_id.values())


def resolve_game_type(game_type: str) -> str:
    """Theme name or game slug (g1/g2/g3) -> theme."""
    gt = str(game_type or "").strip()
    if gt in THEMES:
        return gt
    if gt.lower() in GAME_TYPE_MAP:
        return GAME_TYPE_MAP[gt.lower()]
    raise PayloadError(f"Unknown gameType: {gt!r}")


def ingest(store: QuestionStore, payload: Any) -> Dict[str, Any]:
    """
    Remote save: merge `data.questions` into the stored (gameType, quizDate)
    bucket and write it back.

    Raises PayloadError on a malformed payload and StoreError when the
    store cannot be read or written.
    """
    if not isinstance(payload, dict):
        raise PayloadError("Invalid payload. Need gameType, quizDate, data.questions[].")

    game_type = payload.get("gameType")
    quiz_date = payload.get("quizDate")
    data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
    incoming = data.get("questions")
    if incoming is None:
        incoming = []

    if not game_type or not quiz_date or not isinstance(incoming, list):
        raise PayloadError("Invalid payload. Need gameType, quizDate, data.questions[].")

    theme = resolve_game_type(game_type)
    quiz_date = str(quiz_date)

    existing = store.read_raw(theme, quiz_date)
    merged = merge(existing, incoming)
    store.put_raw(theme, quiz_date, merged)

    log.info(
        "Ingested quiz theme=%s date=%s incoming=%d total=%d",
        theme,
        quiz_date,
        len(incoming),
        len(merged),
    )

    return {
        "gameType": game_type,
        "quizDate": quiz_date,
        "totalQuestions": len(merged),
        "addedOrUpdated": len(incoming),
    }

