from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.constants import PROGRESS_KEY_PREFIX


@dataclass
class QuestionState:
    selected_answer: Optional[str] = None
    user_input: str = ""
    is_answered: bool = False
    is_correct: bool = False
    hint_visible: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedAnswer": self.selected_answer,
            "userAnswer": self.user_input,
            "isAnswered": self.is_answered,
            "isCorrect": self.is_correct,
            "showHint": self.hint_visible,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "QuestionState":
        d = d or {}
        selected = d.get("selectedAnswer")
        return cls(
            selected_answer=str(selected) if selected is not None else None,
            user_input=str(d.get("userAnswer") or ""),
            is_answered=bool(d.get("isAnswered", False)),
            is_correct=bool(d.get("isCorrect", False)),
            hint_visible=bool(d.get("showHint", False)),
        )


def fresh_states(n: int) -> List[QuestionState]:
    return [QuestionState() for _ in range(max(0, int(n)))]


def progress_key(game_type: str, date: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}-{game_type}-{date}"
