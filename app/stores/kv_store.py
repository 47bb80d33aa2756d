from __future__ import annotations

import logging
import sqlite3
from typing import List

from app.constants import THEMES
from app.db import KeyStore
from app.errors import PayloadError, StoreError
from app.models.quiz import Question
from app.services.codec import from_storage, to_storage
from app.stores.base import QuestionStore, QuizData, empty_quiz_data

log = logging.getLogger(__name__)


class KeyValueStore(QuestionStore):
    """
    Question sets as rows keyed by (gameType, quizDate), each holding
    {"questions": [...]} in storage shape.
    """

    name = "kv"

    def __init__(self, db: KeyStore):
        self.db = db

    def read(self, theme: str, date: str) -> List[Question]:
        try:
            item = self.db.get_quiz(theme, date)
        except (sqlite3.Error, ValueError):
            log.exception("KV read failed theme=%s date=%s", theme, date)
            return []

        rows = (item or {}).get("questions") or []
        out: List[Question] = []
        for r in rows:
            try:
                out.append(from_storage(r, theme, date))
            except (PayloadError, ValueError):
                log.warning("Skipping malformed stored question theme=%s date=%s", theme, date)
        return out

    def read_raw(self, theme: str, date: str) -> list:
        try:
            item = self.db.get_quiz(theme, date)
        except (sqlite3.Error, ValueError) as e:
            raise StoreError(f"KV read failed: {e}") from e
        return list((item or {}).get("questions") or [])

    def put_raw(self, theme: str, date: str, rows: list) -> None:
        try:
            if rows:
                self.db.put_quiz(theme, date, {"questions": rows})
            else:
                self.db.delete_quiz(theme, date)
        except sqlite3.Error as e:
            raise StoreError(f"KV write failed: {e}") from e

    def put(self, theme: str, date: str, questions: List[Question]) -> None:
        self.put_raw(theme, date, [to_storage(q) for q in questions])

    def remove(self, theme: str, date: str) -> None:
        self.put_raw(theme, date, [])

    def dump(self) -> QuizData:
        data = empty_quiz_data()
        try:
            rows = self.db.list_quizzes()
        except sqlite3.Error:
            log.exception("KV dump failed")
            return data

        for game_type, quiz_date, item in rows:
            if game_type not in THEMES:
                continue
            questions = (item or {}).get("questions") or []
            if questions:
                data[game_type][quiz_date] = questions
        return data
