from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from app.constants import DEFAULT_THEME, FREE_TEXT, MULTIPLE_CHOICE, THEMES

Hint = Union[str, List[str], None]


@dataclass
class RelatedArticle:
    title: str = ""
    snippet: str = ""
    url: str = ""

    def is_empty(self) -> bool:
        return not (self.title or self.snippet or self.url)


@dataclass
class Question:
    """
    Canonical quiz question.

    The correct answer is held once: `correct_index` for multiple-choice,
    `answer` for free-text. Storage and editor dict shapes are produced by
    app.services.codec and never kept alongside this object.
    """

    id: str
    date: str
    theme: str = DEFAULT_THEME
    question_type: str = MULTIPLE_CHOICE
    text: str = ""
    choices: List[str] = field(default_factory=list)
    correct_index: Optional[int] = None
    answer: str = ""
    hint: Hint = None
    explanation: str = ""
    related_article: Optional[RelatedArticle] = None
    creator: str = ""
    tags: Optional[str] = None
    title: Optional[str] = None
    image: Optional[str] = None
    card_type: Optional[str] = None

    def __post_init__(self):
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme!r}")
        if self.question_type not in (MULTIPLE_CHOICE, FREE_TEXT):
            raise ValueError(f"Unknown question type: {self.question_type!r}")

    @property
    def is_multiple_choice(self) -> bool:
        return self.question_type == MULTIPLE_CHOICE

    @property
    def correct_answer(self) -> str:
        if not self.is_multiple_choice:
            return self.answer or ""
        i = self.correct_index
        if i is None or not (0 <= i < len(self.choices)):
            return ""
        return self.choices[i]

    def hints(self) -> List[str]:
        if not self.hint:
            return []
        if isinstance(self.hint, str):
            return [self.hint]
        return [str(h) for h in self.hint]

    def copy(self, **changes) -> "Question":
        c = replace(self, **changes)
        c.choices = list(c.choices)
        if isinstance(c.hint, list):
            c.hint = list(c.hint)
        if c.related_article is not None and "related_article" not in changes:
            c.related_article = replace(c.related_article)
        return c
