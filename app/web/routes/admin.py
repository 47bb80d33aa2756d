import logging
from typing import List

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.errors import PayloadError, StoreError, UnauthorizedError
from app.models.quiz import Question
from app.services.codec import from_editor, to_editor
from app.services.editor_session import EditorSession
from app.web.core.deps import get_store
from app.web.core.ratelimit import limiter
from app.web.core.security import bearer_token

log = logging.getLogger(__name__)

router = APIRouter()


def _authorized(request: Request) -> bool:
    return request.app.state.admin_credential.matches(bearer_token(request))


@router.get("/api/admin/quiz")
@limiter.limit("120/minute")
def admin_load(request: Request, date: str = Query(default="")):
    date = (date or "").strip()
    if not date:
        return JSONResponse({"error": "Date parameter is required"}, status_code=400)

    try:
        questions = get_store(request).read_date(date)
    except StoreError:
        log.exception("Failed to load quiz data date=%s", date)
        return JSONResponse({"error": "Failed to load quiz data"}, status_code=500)

    return JSONResponse({"questions": [to_editor(q) for q in questions]})


@router.post("/api/admin/quiz")
@limiter.limit("30/minute")
async def admin_save(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    date = str(body.get("date") or "").strip()
    rows = body.get("questions")
    if not date or not isinstance(rows, list):
        return JSONResponse({"error": "Date and questions are required"}, status_code=400)

    if not _authorized(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    questions: List[Question] = []
    try:
        for row in rows:
            questions.append(from_editor(row, date=date))
    except (PayloadError, ValueError) as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    session = EditorSession(get_store(request), date)
    session.questions = questions

    try:
        result = await run_in_threadpool(session.save)
    except UnauthorizedError:
        log.warning("Backing store rejected the admin credential date=%s", date)
        return JSONResponse({"error": "Backing store rejected the credential"}, status_code=500)

    if result.issues:
        return JSONResponse(
            {
                "error": "Validation failed",
                "status": session.status,
                "issues": [{"position": pos, "issues": issues} for pos, issues in result.issues],
            },
            status_code=400,
        )

    if not result.ok:
        return JSONResponse(
            {
                "error": "Failed to save quiz data",
                "status": session.status,
                "written": result.written,
                "deleted": result.deleted,
                "failed": result.failed,
            },
            status_code=500,
        )

    return JSONResponse(
        {"success": True, "status": session.status, "written": result.written, "deleted": result.deleted}
    )


@router.delete("/api/admin/quiz")
@limiter.limit("30/minute")
def admin_delete(request: Request, date: str = Query(default="")):
    date = (date or "").strip()
    if not date:
        return JSONResponse({"error": "Date parameter is required"}, status_code=400)

    if not _authorized(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        result = get_store(request).delete(date)
    except UnauthorizedError:
        return JSONResponse({"error": "Backing store rejected the credential"}, status_code=500)

    if not result.ok:
        log.warning("Delete failed date=%s failed=%s", date, sorted(result.failed))
        return JSONResponse({"error": "Failed to delete quiz data", "failed": result.failed}, status_code=500)

    log.info("Deleted quiz data date=%s", date)
    return JSONResponse({"success": True})
