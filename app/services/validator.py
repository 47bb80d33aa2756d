"""
Completeness checks a question must pass before it may be persisted.

Every rule runs; issues come back in rule order so the editor can show them
all at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from app.constants import (
    ISSUE_BAD_URL,
    ISSUE_CHOICE_COUNT,
    ISSUE_DUPLICATE_CHOICES,
    ISSUE_EMPTY_TEXT,
    ISSUE_NO_ANSWER,
    ISSUE_NO_CREATOR,
    MAX_CHOICES,
    MIN_CHOICES,
)
from app.models.quiz import Question
from app.utils.text import is_blank, is_valid_url


# -----------------------------
# Result structure
# -----------------------------
@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    issues: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "ok" if self.valid else "missing"


# -----------------------------
# Rules
# -----------------------------
def _rule_text(q: Question) -> Optional[str]:
    if is_blank(q.text):
        return ISSUE_EMPTY_TEXT
    return None


def _rule_choices(q: Question) -> Optional[str]:
    if not q.is_multiple_choice:
        return None
    if not (MIN_CHOICES <= len(q.choices or []) <= MAX_CHOICES):
        return ISSUE_CHOICE_COUNT
    # the stored answer is the choice text, so it must pick out one choice
    if len(set(q.choices)) != len(q.choices):
        return ISSUE_DUPLICATE_CHOICES
    return None


def _rule_answer(q: Question) -> Optional[str]:
    if q.is_multiple_choice:
        i = q.correct_index
        if i is None or not (0 <= i < len(q.choices or [])):
            return ISSUE_NO_ANSWER
        return None
    if is_blank(q.answer):
        return ISSUE_NO_ANSWER
    return None


def _rule_creator(q: Question) -> Optional[str]:
    if is_blank(q.creator):
        return ISSUE_NO_CREATOR
    return None


def _rule_article_url(q: Question) -> Optional[str]:
    art = q.related_article
    if art is None or not art.url:
        return None
    if not is_valid_url(art.url):
        return ISSUE_BAD_URL
    return None


_RULES = [
    _rule_text,
    _rule_choices,
    _rule_answer,
    _rule_creator,
    _rule_article_url,
]


# -----------------------------
# Public entry points
# -----------------------------
def validate(question: Question) -> ValidationResult:
    issues: List[str] = []
    for fn in _RULES:
        msg = fn(question)
        if msg:
            issues.append(msg)
    return ValidationResult(valid=not issues, issues=issues)


def validate_all(questions: Sequence[Question]) -> List[Tuple[int, List[str]]]:
    """(position, issues) for every invalid question, in list order."""
    out: List[Tuple[int, List[str]]] = []
    for pos, q in enumerate(questions):
        res = validate(q)
        if not res.valid:
            out.append((pos, res.issues))
    return out
