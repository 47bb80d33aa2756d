import logging
from typing import Any, Dict, Optional, Tuple, Union

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from app.constants import THEME_LABELS, THEME_STYLES
from app.errors import PayloadError
from app.models.progress import QuestionState
from app.models.quiz import Question
from app.services.archive import normalize_date
from app.services.merge import resolve_game_type
from app.services.quiz_session import QuizSession
from app.web.core.deps import get_store, progress_for
from app.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/play")


# -----------------------------
# helpers
# -----------------------------
def _open(request: Request, theme: str, date: str) -> Union[QuizSession, JSONResponse]:
    try:
        theme = resolve_game_type(theme)
    except PayloadError:
        return JSONResponse({"error": "Unknown theme"}, status_code=404)

    iso = normalize_date(date)
    if iso is None:
        return JSONResponse({"error": "Invalid date"}, status_code=404)

    questions = get_store(request).read(theme, iso)
    if not questions:
        return JSONResponse({"error": "No questions for this date"}, status_code=404)

    return QuizSession(questions, game_type=theme, date=iso, progress_store=progress_for(request))


def _index(payload: Dict[str, Any]) -> Optional[int]:
    idx = payload.get("index")
    if isinstance(idx, bool) or not isinstance(idx, int):
        return None
    return idx


def _question_view(q: Question, st: QuestionState) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": q.id,
        "questionType": q.question_type,
        "question": q.text,
        "hasHint": bool(q.hints()),
    }
    if q.is_multiple_choice:
        out["options"] = list(q.choices)
    if st.hint_visible:
        out["hint"] = q.hints()

    # answers only leave the server once the position is answered
    if st.is_answered:
        art = q.related_article
        out["answer"] = q.correct_answer
        out["explanation"] = q.explanation or ""
        out["newsLink"] = art.url if art else ""
    return out


def _progress_view(s: QuizSession) -> Dict[str, Any]:
    snap = s.snapshot()
    snap.update(
        {
            "total": len(s.questions),
            "answered": s.answered_count,
            "progressPct": s.progress_pct,
            "percentage": s.percentage,
        }
    )
    return snap


def _session_view(s: QuizSession) -> Dict[str, Any]:
    return {
        "theme": s.game_type,
        "label": THEME_LABELS.get(s.game_type, s.game_type),
        "style": THEME_STYLES.get(s.game_type, {}),
        "date": s.date,
        "resumed": s.resumed,
        "questions": [_question_view(q, st) for q, st in zip(s.questions, s.states)],
        "progress": _progress_view(s),
    }


def _bad_index() -> JSONResponse:
    return JSONResponse({"error": "index must be an integer"}, status_code=400)


def _open_with_index(
    request: Request, theme: str, date: str, payload: Dict[str, Any]
) -> Tuple[Optional[QuizSession], Optional[int], Optional[JSONResponse]]:
    s = _open(request, theme, date)
    if isinstance(s, JSONResponse):
        return None, None, s
    i = _index(payload)
    if i is None:
        return None, None, _bad_index()
    return s, i, None


# -----------------------------
# routes
# -----------------------------
@router.get("/{theme}/{date}")
@limiter.limit("120/minute")
def play_load(request: Request, theme: str, date: str):
    s = _open(request, theme, date)
    if isinstance(s, JSONResponse):
        return s
    return JSONResponse(_session_view(s))


@router.post("/{theme}/{date}/answer")
@limiter.limit("120/minute")
def play_answer(request: Request, theme: str, date: str, payload: Dict[str, Any] = Body(...)):
    s, i, err = _open_with_index(request, theme, date, payload)
    if err is not None:
        return err

    if 0 <= i < len(s.questions) and s.questions[i].is_multiple_choice:
        choice = payload.get("choice")
        if not isinstance(choice, str):
            return JSONResponse({"error": "choice is required"}, status_code=400)
        accepted = s.answer_multiple_choice(i, choice)
    else:
        text = payload.get("input")
        accepted = s.answer_free_text(i, text if isinstance(text, str) else None)

    body = _session_view(s)
    body["accepted"] = accepted
    if accepted:
        body["isCorrect"] = s.states[i].is_correct
    return JSONResponse(body)


@router.post("/{theme}/{date}/input")
@limiter.limit("240/minute")
def play_input(request: Request, theme: str, date: str, payload: Dict[str, Any] = Body(...)):
    s, i, err = _open_with_index(request, theme, date, payload)
    if err is not None:
        return err

    s.set_input(i, str(payload.get("text") or ""))
    return JSONResponse({"ok": True, "progress": _progress_view(s)})


@router.post("/{theme}/{date}/hint")
@limiter.limit("120/minute")
def play_hint(request: Request, theme: str, date: str, payload: Dict[str, Any] = Body(...)):
    s, i, err = _open_with_index(request, theme, date, payload)
    if err is not None:
        return err

    visible = s.toggle_hint(i)
    hint = s.questions[i].hints() if visible else None
    return JSONResponse({"ok": True, "visible": visible, "hint": hint})


@router.post("/{theme}/{date}/restart")
@limiter.limit("30/minute")
def play_restart(request: Request, theme: str, date: str):
    s = _open(request, theme, date)
    if isinstance(s, JSONResponse):
        return s

    s.restart()
    log.debug("Quiz restarted theme=%s date=%s", s.game_type, s.date)
    return JSONResponse(_session_view(s))
