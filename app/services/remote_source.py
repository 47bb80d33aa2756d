from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import httpx

from app.constants import THEMES
from app.stores.base import QuizData, empty_quiz_data

log = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: QuizData
    fetched_at: float


class QuizCache:
    """Single-slot cache with a staleness window. The clock is injectable for tests."""

    def __init__(self, ttl: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl)
        self.clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def value(self) -> Optional[QuizData]:
        return self._entry.value if self._entry else None

    @property
    def fetched_at(self) -> Optional[float]:
        return self._entry.fetched_at if self._entry else None

    def fresh(self) -> Optional[QuizData]:
        if self._entry is None:
            return None
        if self.clock() - self._entry.fetched_at >= self.ttl:
            return None
        return self._entry.value

    def stale(self) -> Optional[QuizData]:
        return self.value

    def set(self, value: QuizData) -> None:
        self._entry = CacheEntry(value=value, fetched_at=self.clock())

    def clear(self) -> None:
        self._entry = None
        log.debug("Quiz data cache cleared")


def unwrap_body(raw: Any) -> List[Any]:
    """
    The upstream may answer with a gateway envelope whose `body` is a JSON
    string, with an already-decoded `body`, or with the bare item list.
    """
    body = raw
    if isinstance(raw, dict) and "body" in raw:
        body = raw["body"]
        if isinstance(body, str):
            body = json.loads(body)
    if not isinstance(body, list):
        raise ValueError(f"expected a list of quiz items, got {type(body).__name__}")
    return body


def transform_items(items: List[Any]) -> QuizData:
    """[{gameType, quizDate, data: {questions}}] -> {theme: {date: questions}}"""
    out = empty_quiz_data()
    for item in items:
        if not isinstance(item, dict):
            continue
        theme = item.get("gameType")
        if theme not in THEMES or not item.get("quizDate"):
            continue
        data = item.get("data") or {}
        questions = data.get("questions") if isinstance(data, dict) else None
        if questions is None:
            questions = []
        if not isinstance(questions, list):
            log.warning("Skipping quiz item theme=%s date=%s: questions is not a list", theme, item.get("quizDate"))
            continue
        out[theme][str(item.get("quizDate"))] = list(questions)
    return out


def _default_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=15, headers={"Content-Type": "application/json"})


class RemoteQuizSource:
    """
    Read-through fetch of the full cross-theme dataset.

    fetch() never raises: on any failure the last good value is served,
    or the empty structure when there is none. `last_ok` tells the caller
    which of the two happened.
    """

    def __init__(
        self,
        url: str,
        *,
        cache: Optional[QuizCache] = None,
        client_factory: Callable[[], httpx.AsyncClient] = _default_client,
    ):
        self.url = url
        self.cache = cache or QuizCache()
        self.client_factory = client_factory
        self.last_ok = True

    async def _download(self) -> QuizData:
        async with self.client_factory() as client:
            r = await client.get(self.url)
        r.raise_for_status()
        return transform_items(unwrap_body(r.json()))

    async def fetch(self) -> QuizData:
        cached = self.cache.fresh()
        if cached is not None:
            log.debug("Using cached quiz data")
            self.last_ok = True
            return cached

        try:
            log.info("Fetching quiz data from %s", self.url)
            data = await self._download()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("Quiz data fetch failed: %s", e)
            self.last_ok = False
            stale = self.cache.stale()
            if stale is not None:
                log.info("Serving stale cached quiz data")
                return stale
            return empty_quiz_data()

        self.cache.set(data)
        self.last_ok = True
        return data
