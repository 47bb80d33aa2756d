from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.constants import THEMES
from app.errors import PayloadError, StoreError
from app.models.quiz import Question
from app.services.codec import from_storage, to_storage
from app.stores.base import BatchResult, QuestionStore, QuizData, empty_quiz_data

log = logging.getLogger(__name__)


class JsonFileStore(QuestionStore):
    """
    One combined JSON document: {theme: {date: [storage questions]}}.
    """

    name = "file"

    def __init__(self, path: str):
        self.path = Path(path)

    # -------------------------
    # Raw document
    # -------------------------
    def _load(self) -> QuizData:
        if not self.path.exists():
            return empty_quiz_data()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StoreError(f"cannot read {self.path}: {e}") from e
        if not isinstance(raw, dict):
            raise StoreError(f"{self.path} does not hold a JSON object")

        data = empty_quiz_data()
        for theme in THEMES:
            bucket = raw.get(theme)
            if isinstance(bucket, dict):
                data[theme] = bucket
        return data

    def _save(self, data: QuizData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".quiz-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StoreError(f"cannot write {self.path}: {e}") from e

    # -------------------------
    # QuestionStore
    # -------------------------
    def dump(self) -> QuizData:
        try:
            return self._load()
        except StoreError:
            log.exception("Quiz data file unreadable, serving empty data")
            return empty_quiz_data()

    def read(self, theme: str, date: str) -> List[Question]:
        rows = self.dump().get(theme, {}).get(date) or []
        out: List[Question] = []
        for r in rows:
            try:
                out.append(from_storage(r, theme, date))
            except (PayloadError, ValueError):
                log.warning("Skipping malformed stored question theme=%s date=%s", theme, date)
        return out

    def read_raw(self, theme: str, date: str) -> List[Dict[str, Any]]:
        return list(self._load().get(theme, {}).get(date) or [])

    def put_raw(self, theme: str, date: str, rows: List[Dict[str, Any]]) -> None:
        data = self._load()
        if rows:
            data[theme][date] = list(rows)
        else:
            data[theme].pop(date, None)
        self._save(data)

    def put(self, theme: str, date: str, questions: List[Question]) -> None:
        res = self.write_batch(date, {theme: questions}, only=[theme])
        if not res.ok:
            raise StoreError(res.failed[theme])

    def remove(self, theme: str, date: str) -> None:
        res = self.write_batch(date, {}, only=[theme])
        if not res.ok:
            raise StoreError(res.failed[theme])

    def write_batch(
        self,
        date: str,
        grouped: Dict[str, List[Question]],
        *,
        only: Optional[List[str]] = None,
    ) -> BatchResult:
        themes = only or THEMES
        res = BatchResult()
        try:
            data = self._load()
        except StoreError as e:
            for t in themes:
                res.failed[t] = str(e)
            return res

        for theme in themes:
            qs = list(grouped.get(theme) or [])
            if qs:
                data[theme][date] = [to_storage(q) for q in qs]
                res.written.append(theme)
            else:
                data[theme].pop(date, None)
                res.deleted.append(theme)

        try:
            self._save(data)
        except StoreError as e:
            return BatchResult(failed={t: str(e) for t in themes})

        log.info("Saved quiz file date=%s written=%s deleted=%s", date, res.written, res.deleted)
        return res
