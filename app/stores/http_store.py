from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.constants import THEMES
from app.errors import PayloadError, StoreError, UnauthorizedError
from app.models.quiz import Question
from app.services.codec import from_editor, to_editor
from app.stores.base import BatchResult, QuestionStore, QuizData, empty_quiz_data, group_by_theme

log = logging.getLogger(__name__)

ADMIN_PATH = "/api/admin/quiz"
DATA_PATH = "/api/quiz"


class HttpQuestionStore(QuestionStore):
    """
    Talks to a running quiz server's admin API.

    Writes go out as one POST per date, so a batch either lands whole or
    fails whole.
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        credential: str = "",
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = 15.0,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.credential = credential or ""
        self._client = client
        self.timeout = timeout

    # -------------------------
    # Transport
    # -------------------------
    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.credential:
            headers["Authorization"] = f"Bearer {self.credential}"
        try:
            if self._client is not None:
                r = self._client.request(method, self.base_url + path, headers=headers, **kwargs)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    r = client.request(method, self.base_url + path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {path} failed: {e}") from e

        if r.status_code == 401:
            raise UnauthorizedError("Admin password rejected")
        if r.status_code >= 400:
            raise StoreError(f"{method} {path} -> HTTP {r.status_code}: {r.text[:200]}")
        return r

    def _json(self, r: httpx.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise StoreError(f"bad JSON from {r.request.url}: {e}") from e

    # -------------------------
    # Reads
    # -------------------------
    def _fetch_date(self, date: str) -> List[Question]:
        body = self._json(self._request("GET", ADMIN_PATH, params={"date": date}))
        out: List[Question] = []
        for row in (body or {}).get("questions") or []:
            try:
                out.append(from_editor(row, date=date))
            except (PayloadError, ValueError):
                log.warning("Skipping malformed question from %s", self.base_url)
        return out

    def read_date(self, date: str) -> List[Question]:
        try:
            return self._fetch_date(date)
        except (StoreError, UnauthorizedError) as e:
            log.warning("HTTP read failed date=%s: %s", date, e)
            return []

    def read(self, theme: str, date: str) -> List[Question]:
        return [q for q in self.read_date(date) if q.theme == theme]

    def dump(self) -> QuizData:
        try:
            body = self._json(self._request("GET", DATA_PATH))
        except (StoreError, UnauthorizedError) as e:
            log.warning("HTTP dump failed: %s", e)
            return empty_quiz_data()

        data = empty_quiz_data()
        if isinstance(body, dict):
            for theme in THEMES:
                bucket = body.get(theme)
                if isinstance(bucket, dict):
                    data[theme] = bucket
        return data

    # -------------------------
    # Writes
    # -------------------------
    def write_batch(self, date: str, grouped: Dict[str, List[Question]]) -> BatchResult:
        questions: List[Question] = []
        for theme in THEMES:
            questions.extend(grouped.get(theme) or [])

        payload = {"date": date, "questions": [to_editor(q) for q in questions]}
        try:
            self._request("POST", ADMIN_PATH, json=payload)
        except StoreError as e:
            log.warning("HTTP write failed date=%s: %s", date, e)
            return BatchResult(failed={t: str(e) for t in THEMES})

        res = BatchResult()
        for theme in THEMES:
            (res.written if grouped.get(theme) else res.deleted).append(theme)
        return res

    def delete(self, date: str) -> BatchResult:
        try:
            self._request("DELETE", ADMIN_PATH, params={"date": date})
        except StoreError as e:
            return BatchResult(failed={t: str(e) for t in THEMES})
        return BatchResult(deleted=list(THEMES))

    def _replace_theme(self, theme: str, date: str, questions: List[Question]) -> None:
        grouped = group_by_theme(self._fetch_date(date))
        grouped[theme] = list(questions)
        res = self.write_batch(date, grouped)
        if not res.ok:
            raise StoreError(res.failed.get(theme, "write failed"))

    def put(self, theme: str, date: str, questions: List[Question]) -> None:
        self._replace_theme(theme, date, questions)

    def remove(self, theme: str, date: str) -> None:
        self._replace_theme(theme, date, [])
