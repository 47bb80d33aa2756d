from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.sessions import SessionMiddleware

from config import IS_PROD, WEB_SESSION_SECRET
from app.constants import APP_NAME, APP_VERSION
from app.db import KeyStore
from app.stores import QuestionStore
from app.web.core.deps import (
    admin_credential,
    build_db,
    build_question_store,
    build_source,
    ingest_credential,
)
from app.web.core.ratelimit import limiter
from app.web.core.security import Credential

from app.web.routes.admin import router as admin_router
from app.web.routes.ingest import router as ingest_router
from app.web.routes.play import router as play_router
from app.web.routes.quiz import router as quiz_router


_UNSET = object()


def create_app(
    *,
    store: Optional[QuestionStore] = None,
    db: Optional[KeyStore] = None,
    source=_UNSET,
    credential: Optional[Credential] = None,
    ingest_secret: Optional[Credential] = None,
    session_secret: str = WEB_SESSION_SECRET,
) -> FastAPI:
    """
    Anything not passed in is built from config. `source=None` turns the
    remote aggregation off and serves /api/quiz from the local store.
    """
    app = FastAPI(title=APP_NAME, version=APP_VERSION)

    # -----------------------------
    # Rate limiting
    # -----------------------------
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def ratelimit_handler(request: Request, exc: RateLimitExceeded):
        return PlainTextResponse("Too Many Requests", status_code=429)

    # -----------------------------
    # Sessions (player progress is keyed by sid)
    # -----------------------------
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        same_site="lax",
        https_only=bool(IS_PROD),
        max_age=60 * 60 * 24 * 30,
    )

    # -----------------------------
    # Shared state
    # -----------------------------
    db = db if db is not None else build_db()
    app.state.db = db
    app.state.store = store if store is not None else build_question_store(db)
    app.state.source = build_source() if source is _UNSET else source
    app.state.admin_credential = credential if credential is not None else admin_credential()
    app.state.ingest_credential = ingest_secret if ingest_secret is not None else ingest_credential()

    # -----------------------------
    # Security headers
    # -----------------------------
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        return response

    # -----------------------------
    # Routes
    # -----------------------------
    app.include_router(quiz_router)
    app.include_router(admin_router)
    app.include_router(ingest_router)
    app.include_router(play_router)

    return app
