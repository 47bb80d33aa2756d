from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Request

from config import (
    ADMIN_PASSWORD,
    DB_PATH,
    INGEST_SECRET,
    QUIZ_API_URL,
    QUIZ_CACHE_TTL,
    QUIZ_DATA_PATH,
    QUIZ_STORE,
    REMOTE_QUIZ_URL,
)
from app.db import KeyStore
from app.services.remote_source import QuizCache, RemoteQuizSource
from app.stores import QuestionStore, build_store
from app.stores.progress_store import KeyStoreProgress
from app.web.core.security import Credential

log = logging.getLogger(__name__)


# -----------------------------
# Builders (read config)
# -----------------------------
def build_db(path: str = DB_PATH) -> KeyStore:
    return KeyStore(path)


def build_question_store(db: Optional[KeyStore] = None) -> QuestionStore:
    store = build_store(
        QUIZ_STORE,
        data_path=QUIZ_DATA_PATH,
        db=db,
        api_url=QUIZ_API_URL,
        credential=ADMIN_PASSWORD,
    )
    log.debug("Question store: %s", store.name)
    return store


def build_source(url: str = REMOTE_QUIZ_URL) -> Optional[RemoteQuizSource]:
    if not url:
        return None
    return RemoteQuizSource(url, cache=QuizCache(ttl=QUIZ_CACHE_TTL))


def admin_credential() -> Credential:
    return Credential(ADMIN_PASSWORD)


def ingest_credential() -> Credential:
    return Credential(INGEST_SECRET)


# -----------------------------
# Request helpers
# -----------------------------
def sid(request: Request) -> str:
    s = request.session.get("sid")
    if not s:
        s = secrets.token_urlsafe(16)
        request.session["sid"] = s
    return s


def get_store(request: Request) -> QuestionStore:
    return request.app.state.store


def progress_for(request: Request) -> KeyStoreProgress:
    return KeyStoreProgress(request.app.state.db, sid(request))
