"""
Mappings between the canonical Question and its two dict shapes:

- storage: what the stores persist (`answer` is the literal correct string)
- editor:  what the admin HTTP surface exchanges (`correct_index` into choices)

All functions are pure. Converting editor -> storage -> editor recovers
`correct_index` whenever the answer string is one of the choices.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.constants import (
    DEFAULT_THEME,
    FREE_TEXT,
    MULTIPLE_CHOICE,
    QUESTION_TYPE_ALIASES,
    THEMES,
)
from app.errors import PayloadError
from app.models.quiz import Question, RelatedArticle
from app.utils.text import as_str_list


# -----------------------------
# answer <-> index
# -----------------------------
def index_to_answer(choices: List[str], index: Optional[int]) -> str:
    if index is None or not (0 <= index < len(choices)):
        return ""
    return choices[index]


def answer_to_index(choices: List[str], answer: Optional[str]) -> Optional[int]:
    if answer is None:
        return None
    try:
        return list(choices).index(answer)
    except ValueError:
        return None


def normalize_question_type(raw: Any, *, has_options: bool = True) -> str:
    key = str(raw or "").strip().lower()
    if key in QUESTION_TYPE_ALIASES:
        return QUESTION_TYPE_ALIASES[key]
    return MULTIPLE_CHOICE if has_options else FREE_TEXT


def _hint_out(hint) -> Any:
    if not hint:
        return None
    if isinstance(hint, list):
        return list(hint)
    return hint


def _hint_in(raw) -> Any:
    if raw is None or raw == "" or raw == []:
        return None
    if isinstance(raw, str):
        return raw
    return as_str_list(raw)


def _article_in(raw: Any) -> Optional[RelatedArticle]:
    if not isinstance(raw, dict):
        return None
    a = RelatedArticle(
        title=str(raw.get("title") or ""),
        snippet=str(raw.get("snippet") or raw.get("excerpt") or ""),
        url=str(raw.get("url") or ""),
    )
    return None if a.is_empty() else a


# -----------------------------
# storage
# -----------------------------
def to_storage(q: Question) -> Dict[str, Any]:
    art = q.related_article
    out: Dict[str, Any] = {
        "id": q.id,
        "questionType": q.question_type,
        "question": q.text,
        "answer": q.correct_answer,
        "explanation": q.explanation or "",
        "newsLink": art.url if art else "",
        "creator": q.creator or "",
    }
    if q.is_multiple_choice:
        out["options"] = list(q.choices)
    else:
        hint = _hint_out(q.hint)
        if hint is not None:
            out["hint"] = hint
    if q.tags:
        out["tags"] = q.tags
    if art and (art.title or art.snippet):
        out["relatedArticle"] = {
            "title": art.title,
            "excerpt": art.snippet,
            "url": art.url,
        }
    return out


def from_storage(d: Dict[str, Any], theme: str, date: str) -> Question:
    if not isinstance(d, dict):
        raise PayloadError("stored question must be an object")

    options = d.get("options")
    qtype = normalize_question_type(d.get("questionType"), has_options=bool(options))
    choices = as_str_list(options)
    answer = str(d.get("answer") or "")

    article = _article_in(d.get("relatedArticle"))
    link = str(d.get("newsLink") or "")
    if link:
        if article is None:
            article = RelatedArticle(url=link)
        elif not article.url:
            article.url = link

    return Question(
        id=str(d.get("id") or ""),
        date=date,
        theme=theme,
        question_type=qtype,
        text=str(d.get("question") or ""),
        choices=choices if qtype == MULTIPLE_CHOICE else [],
        correct_index=answer_to_index(choices, answer) if qtype == MULTIPLE_CHOICE else None,
        answer=answer if qtype == FREE_TEXT else "",
        hint=_hint_in(d.get("hint")) if qtype == FREE_TEXT else None,
        explanation=str(d.get("explanation") or ""),
        related_article=article,
        creator=str(d.get("creator") or ""),
        tags=d.get("tags") or None,
    )


# -----------------------------
# editor
# -----------------------------
def to_editor(q: Question) -> Dict[str, Any]:
    art = q.related_article
    return {
        "id": q.id,
        "date": q.date,
        "theme": q.theme,
        "card_type": q.card_type,
        "title": q.title,
        "question_type": q.question_type,
        "question_text": q.text,
        "choices": list(q.choices),
        "correct_index": q.correct_index,
        "answer": q.answer if not q.is_multiple_choice else q.correct_answer,
        "explanation": q.explanation or "",
        "hints": q.hints(),
        "related_article": (
            {"title": art.title, "snippet": art.snippet, "url": art.url} if art else None
        ),
        "image": q.image,
        "creator": q.creator or "",
        "tags": q.tags,
    }


def from_editor(d: Dict[str, Any], *, date: Optional[str] = None) -> Question:
    if not isinstance(d, dict):
        raise PayloadError("question must be an object")

    theme = d.get("theme") or DEFAULT_THEME
    if theme not in THEMES:
        raise PayloadError(f"unknown theme: {theme!r}")

    choices = as_str_list(d.get("choices"))
    qtype = normalize_question_type(
        d.get("question_type"), has_options=bool(choices) or d.get("correct_index") is not None
    )

    raw_idx = d.get("correct_index")
    correct_index: Optional[int]
    if raw_idx is None or raw_idx == "":
        correct_index = None
    else:
        try:
            correct_index = int(raw_idx)
        except (TypeError, ValueError):
            raise PayloadError(f"correct_index must be an integer, got {raw_idx!r}")

    hints = d.get("hints")
    if hints is None:
        hints = d.get("hint")

    return Question(
        id=str(d.get("id") or ""),
        date=str(date or d.get("date") or ""),
        theme=theme,
        question_type=qtype,
        text=str(d.get("question_text") or ""),
        choices=choices,
        correct_index=correct_index if qtype == MULTIPLE_CHOICE else None,
        answer=str(d.get("answer") or "") if qtype == FREE_TEXT else "",
        hint=_hint_in(hints),
        explanation=str(d.get("explanation") or ""),
        related_article=_article_in(d.get("related_article")),
        creator=str(d.get("creator") or ""),
        tags=d.get("tags") or None,
        title=d.get("title"),
        image=d.get("image"),
        card_type=d.get("card_type"),
    )
