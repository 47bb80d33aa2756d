from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Dict, List, Optional, Tuple

from app.constants import DEFAULT_THEME, MAX_CHOICES, MIN_CHOICES, MULTIPLE_CHOICE, THEMES
from app.models.quiz import Question
from app.services.validator import validate, validate_all
from app.stores.base import QuestionStore, group_by_theme

log = logging.getLogger(__name__)

_QUESTION_FIELDS = {f.name for f in fields(Question)}


def new_question_id() -> str:
    return f"q-{uuid.uuid4().hex[:12]}"


@dataclass
class SaveResult:
    ok: bool
    issues: List[Tuple[int, List[str]]] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class EditorSession:
    """
    Admin-side working copy of one date's questions, all themes in one list.

    Flow:
    - load(date) replaces the list from the store (never left empty)
    - add / duplicate / delete / update_active edit it in memory
    - save() validates everything, then writes per theme
    """

    def __init__(
        self,
        store: QuestionStore,
        date: str,
        *,
        id_factory: Callable[[], str] = new_question_id,
        default_theme: str = DEFAULT_THEME,
    ):
        self.store = store
        self.date = date
        self.id_factory = id_factory
        self.default_theme = default_theme

        self.questions: List[Question] = []
        self.active_index = 0
        self.status = "idle"

    # -----------------------------
    # helpers / guards
    # -----------------------------
    def _check_index(self, i: int) -> None:
        if not 0 <= i < len(self.questions):
            raise IndexError(f"Question index {i} out of range")

    def _ensure_not_empty(self) -> None:
        if not self.questions:
            self.add_question()

    @property
    def active(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.active_index]

    # -----------------------------
    # load
    # -----------------------------
    def load(self, date: Optional[str] = None) -> List[Question]:
        if date is not None:
            self.date = date
        self.questions = list(self.store.read_date(self.date))
        self.active_index = 0
        self.status = "idle"
        log.debug("Editor loaded date=%s count=%d", self.date, len(self.questions))
        self._ensure_not_empty()
        return self.questions

    # -----------------------------
    # CRUD
    # -----------------------------
    def add_question(self) -> Question:
        q = Question(
            id=self.id_factory(),
            date=self.date,
            theme=self.default_theme,
            question_type=MULTIPLE_CHOICE,
            text="",
            choices=["", ""],
            correct_index=None,
            creator="",
        )
        self.questions.append(q)
        self.active_index = len(self.questions) - 1
        return q

    def duplicate_question(self, i: int) -> Question:
        self._check_index(i)
        dup = self.questions[i].copy(id=self.id_factory())
        self.questions.insert(i + 1, dup)
        self.active_index = i + 1
        return dup

    def delete_question(self, i: int) -> None:
        self._check_index(i)
        self.questions.pop(i)
        if self.active_index >= len(self.questions):
            self.active_index = max(0, len(self.questions) - 1)
        self._ensure_not_empty()

    def update_active(self, updates: Optional[dict] = None, **fields_) -> Question:
        changes = dict(updates or {})
        changes.update(fields_)
        unknown = set(changes) - _QUESTION_FIELDS
        if unknown:
            raise ValueError(f"Unknown question fields: {sorted(unknown)}")

        self._check_index(self.active_index)
        q = replace(self.questions[self.active_index], **changes)
        self.questions[self.active_index] = q
        self.status = "idle"
        return q

    # -----------------------------
    # choices of the active question
    # -----------------------------
    def add_choice(self) -> bool:
        q = self.active
        if q is None or len(q.choices) >= MAX_CHOICES:
            return False
        self.update_active(choices=list(q.choices) + [""])
        return True

    def remove_choice(self, j: int) -> bool:
        q = self.active
        if q is None or len(q.choices) <= MIN_CHOICES or not 0 <= j < len(q.choices):
            return False

        choices = [c for k, c in enumerate(q.choices) if k != j]
        idx = q.correct_index
        if idx == j:
            idx = None
        elif idx is not None and idx > j:
            idx -= 1
        self.update_active(choices=choices, correct_index=idx)
        return True

    # -----------------------------
    # navigation
    # -----------------------------
    def select(self, i: int) -> int:
        self._check_index(i)
        self.active_index = i
        return i

    def previous(self) -> int:
        self.active_index = max(0, self.active_index - 1)
        return self.active_index

    def next(self) -> int:
        self.active_index = min(len(self.questions) - 1, self.active_index + 1)
        return self.active_index

    # -----------------------------
    # review list
    # -----------------------------
    def review(self, status: str = "all", theme: str = "all") -> List[Tuple[int, str, List[str]]]:
        rows: List[Tuple[int, str, List[str]]] = []
        for pos, q in enumerate(self.questions):
            if theme != "all" and q.theme != theme:
                continue
            res = validate(q)
            if status != "all" and res.status != status:
                continue
            rows.append((pos, res.status, res.issues))
        return rows

    # -----------------------------
    # save
    # -----------------------------
    def save(self) -> SaveResult:
        """
        Nothing is written unless every question validates. Each theme is then
        written (or its bucket deleted when empty) independently; failed themes
        are reported and not retried. The in-memory list is never changed here.
        UnauthorizedError from the store propagates.
        """
        issues = validate_all(self.questions)
        if issues:
            self.status = "error"
            return SaveResult(ok=False, issues=issues)

        grouped = group_by_theme(self.questions)
        batch = self.store.write_batch(self.date, grouped)

        self.status = "saved" if batch.ok else "error"
        if batch.failed:
            log.warning("Editor save partial failure date=%s failed=%s", self.date, sorted(batch.failed))
        else:
            log.info(
                "Editor saved date=%s counts=%s",
                self.date,
                {t: len(grouped[t]) for t in THEMES},
            )

        return SaveResult(
            ok=batch.ok,
            written=batch.written,
            deleted=batch.deleted,
            failed=batch.failed,
        )
