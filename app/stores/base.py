from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from app.constants import THEMES
from app.errors import StoreError
from app.models.quiz import Question

log = logging.getLogger(__name__)

QuizData = Dict[str, Dict[str, List[Dict[str, Any]]]]


def empty_quiz_data() -> QuizData:
    return {t: {} for t in THEMES}


def group_by_theme(questions: List[Question]) -> Dict[str, List[Question]]:
    grouped: Dict[str, List[Question]] = {t: [] for t in THEMES}
    for q in questions:
        grouped[q.theme].append(q)
    return grouped


@dataclass
class BatchResult:
    written: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class QuestionStore:
    """
    Read/write of (theme, date) question buckets.

    Subclasses implement `read`, `put`, `remove` and `dump`. An empty bucket
    is the same as a missing one: writing [] removes the key.
    """

    name = "base"

    def read(self, theme: str, date: str) -> List[Question]:
        raise NotImplementedError

    def put(self, theme: str, date: str, questions: List[Question]) -> None:
        raise NotImplementedError

    def remove(self, theme: str, date: str) -> None:
        raise NotImplementedError

    def dump(self) -> QuizData:
        raise NotImplementedError

    # storage-shaped rows, unvalidated (ingestion path)
    def read_raw(self, theme: str, date: str) -> List[Dict[str, Any]]:
        return list(self.dump().get(theme, {}).get(date) or [])

    def put_raw(self, theme: str, date: str, rows: List[Dict[str, Any]]) -> None:
        raise StoreError(f"{self.name} store does not accept raw rows")

    # -------------------------
    # Shared behaviour
    # -------------------------
    def read_date(self, date: str) -> List[Question]:
        out: List[Question] = []
        for theme in THEMES:
            out.extend(self.read(theme, date))
        return out

    def write_batch(self, date: str, grouped: Dict[str, List[Question]]) -> BatchResult:
        """
        Set or delete every theme's bucket for `date`. Themes are written
        independently; a failing theme is reported, the others still go through.
        """
        res = BatchResult()
        for theme in THEMES:
            qs = list(grouped.get(theme) or [])
            try:
                if qs:
                    self.put(theme, date, qs)
                    res.written.append(theme)
                else:
                    self.remove(theme, date)
                    res.deleted.append(theme)
            except StoreError as e:
                log.warning("write_batch failed store=%s theme=%s date=%s: %s", self.name, theme, date, e)
                res.failed[theme] = str(e)
        return res

    def delete(self, date: str) -> BatchResult:
        return self.write_batch(date, {})
