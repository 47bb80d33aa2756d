from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from app.models.progress import QuestionState, fresh_states, progress_key
from app.models.quiz import Question
from app.utils.text import is_blank, norm_answer

log = logging.getLogger(__name__)


class ProgressStore(Protocol):
    def load(self, key: str) -> Optional[Dict[str, Any]]: ...

    def save(self, key: str, snapshot: Dict[str, Any]) -> None: ...


class QuizSession:
    """
    Player-side state for one (gameType, date) question set.

    Each position goes Unanswered -> Answered exactly once. Score and
    completion are derived from the position states, never stored apart.
    With no progress store the session is ephemeral (preview play).
    """

    def __init__(
        self,
        questions: Sequence[Question],
        *,
        game_type: str,
        date: str,
        progress_store: Optional[ProgressStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.questions: List[Question] = list(questions)
        self.game_type = game_type
        self.date = date
        self.progress_store = progress_store
        self.clock = clock

        self.states: List[QuestionState] = fresh_states(len(self.questions))
        self.resumed = False

        if self.progress_store is not None:
            saved = None
            try:
                saved = self.progress_store.load(self.key)
            except Exception:
                log.exception("Failed to load quiz progress key=%s", self.key)
            self.resume(saved)

    # -----------------------------
    # derived state
    # -----------------------------
    @property
    def key(self) -> str:
        return progress_key(self.game_type, self.date)

    @property
    def score(self) -> int:
        return sum(1 for s in self.states if s.is_answered and s.is_correct)

    @property
    def answered_count(self) -> int:
        return sum(1 for s in self.states if s.is_answered)

    @property
    def complete(self) -> bool:
        return bool(self.states) and all(s.is_answered for s in self.states)

    @property
    def progress_pct(self) -> float:
        if not self.questions:
            return 0.0
        return (self.answered_count / len(self.questions)) * 100.0

    @property
    def percentage(self) -> int:
        if not self.questions:
            return 0
        return int(round((self.score / len(self.questions)) * 100))

    def _state(self, i: int) -> Optional[QuestionState]:
        if 0 <= i < len(self.states):
            return self.states[i]
        return None

    # -----------------------------
    # persistence
    # -----------------------------
    def snapshot(self) -> Dict[str, Any]:
        return {
            "questionStates": [s.to_dict() for s in self.states],
            "score": self.score,
            "isComplete": self.complete,
            "timestamp": int(self.clock() * 1000),
        }

    def _persist(self) -> None:
        if self.progress_store is None:
            return
        try:
            self.progress_store.save(self.key, self.snapshot())
        except Exception:
            log.exception("Failed to write quiz progress key=%s", self.key)

    def resume(self, saved: Optional[Dict[str, Any]]) -> bool:
        """
        Adopt a saved snapshot only when it has one state per current question.
        Anything else is dropped and the fresh state stays.
        """
        rows = (saved or {}).get("questionStates") if isinstance(saved, dict) else None
        if not isinstance(rows, list) or len(rows) != len(self.questions):
            if saved:
                log.debug("Discarding stale progress key=%s", self.key)
            return False

        self.states = [QuestionState.from_dict(r if isinstance(r, dict) else {}) for r in rows]
        self.resumed = True
        return True

    # -----------------------------
    # interactions
    # -----------------------------
    def answer_multiple_choice(self, i: int, choice: str) -> bool:
        st = self._state(i)
        if st is None or st.is_answered:
            return False

        st.selected_answer = choice
        st.is_correct = choice == self.questions[i].correct_answer
        st.is_answered = True
        self._persist()

        if self.complete:
            log.debug("Quiz complete key=%s score=%d/%d", self.key, self.score, len(self.questions))
        return True

    def answer_free_text(self, i: int, text: Optional[str] = None) -> bool:
        st = self._state(i)
        if st is None or st.is_answered:
            return False
        if text is not None:
            st.user_input = text
        if is_blank(st.user_input):
            return False

        st.is_correct = norm_answer(st.user_input) == norm_answer(self.questions[i].correct_answer)
        st.is_answered = True
        self._persist()
        return True

    def toggle_hint(self, i: int) -> bool:
        st = self._state(i)
        if st is None:
            return False
        st.hint_visible = not st.hint_visible
        self._persist()
        return st.hint_visible

    def set_input(self, i: int, text: str) -> None:
        st = self._state(i)
        if st is None:
            return
        st.user_input = text or ""
        self._persist()

    def restart(self) -> None:
        self.states = fresh_states(len(self.questions))
        self._persist()
