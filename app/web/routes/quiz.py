import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.errors import PayloadError, StoreError
from app.services.archive import archive_structure, available_dates
from app.services.merge import resolve_game_type
from app.stores.base import empty_quiz_data
from app.web.core.deps import get_store
from app.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter()

CACHE_OK = "public, s-maxage=300, stale-while-revalidate=600"
CACHE_FAILED = "public, s-maxage=60, stale-while-revalidate=120"


@router.get("/api/quiz")
@limiter.limit("120/minute")
async def quiz_data(request: Request):
    source = request.app.state.source

    if source is not None:
        data = await source.fetch()
        ok = source.last_ok
    else:
        try:
            data = await run_in_threadpool(get_store(request).dump)
            ok = True
        except StoreError:
            log.exception("Failed to dump quiz data")
            data, ok = empty_quiz_data(), False

    return JSONResponse(data, headers={"Cache-Control": CACHE_OK if ok else CACHE_FAILED})


@router.get("/api/quiz/{theme}/dates")
@limiter.limit("120/minute")
def quiz_dates(request: Request, theme: str):
    try:
        theme = resolve_game_type(theme)
    except PayloadError:
        return JSONResponse({"error": "Unknown theme"}, status_code=404)

    try:
        data = get_store(request).dump()
    except StoreError:
        log.exception("Failed to list dates theme=%s", theme)
        data = empty_quiz_data()

    dates = available_dates(data, theme)
    return JSONResponse(
        {
            "theme": theme,
            "dates": dates,
            "archive": archive_structure(dates),
            "mostRecent": dates[0] if dates else None,
        }
    )
