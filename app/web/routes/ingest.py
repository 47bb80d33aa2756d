import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.errors import PayloadError, StoreError
from app.services.merge import ingest
from app.web.core.deps import get_store
from app.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Methods": "OPTIONS,POST",
}


def _reply(body, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


@router.options("/api/quizzes/save")
def ingest_preflight(request: Request):
    return _reply({"ok": True})


@router.post("/api/quizzes/save")
@limiter.limit("30/minute")
async def ingest_save(request: Request):
    cred = request.app.state.ingest_credential
    if cred.configured and not cred.matches(request.headers.get("x-admin-secret")):
        return _reply({"error": "Unauthorized"}, 401)

    try:
        payload = await request.json()
    except ValueError:
        return _reply({"error": "Body is not valid JSON"}, 400)

    try:
        saved = await run_in_threadpool(ingest, get_store(request), payload)
    except PayloadError as e:
        return _reply({"error": str(e), "received": payload}, 400)
    except StoreError as e:
        log.exception("Save quiz error")
        return _reply({"error": "Failed to save quiz", "details": str(e)}, 500)

    return _reply({"success": True, "saved": saved})
