import pytest

from app.models.quiz import Question
from app.services.quiz_session import QuizSession
from app.stores.progress_store import KeyStoreProgress, MemoryProgress


def _free_text(answer="seoul", **kw):
    return Question(
        id=kw.pop("id", "ft"),
        date="2025-03-12",
        question_type="free-text",
        text="Capital of Korea?",
        answer=answer,
        hint=kw.pop("hint", "Starts with S"),
        creator="desk",
        **kw,
    )


@pytest.fixture
def questions(make_question):
    return [make_question(), make_question(), _free_text()]


def _session(questions, store=None, **kw):
    return QuizSession(questions, game_type="BlackSwan", date="2025-03-12", progress_store=store, **kw)


def test_fresh_session_is_unanswered(questions):
    s = _session(questions)
    assert s.score == 0
    assert s.answered_count == 0
    assert not s.complete
    assert not s.resumed


def test_multiple_choice_is_exact_match(questions):
    s = _session(questions)
    assert s.answer_multiple_choice(0, "2.75%") is True
    assert s.answer_multiple_choice(1, "2.75% ") is True
    assert s.states[0].is_correct is True
    assert s.states[1].is_correct is False
    assert s.score == 1


def test_second_answer_is_a_noop(questions):
    s = _session(questions)
    s.answer_multiple_choice(0, "2.5%")
    before = (s.score, s.states[0].to_dict())

    assert s.answer_multiple_choice(0, "2.75%") is False
    assert (s.score, s.states[0].to_dict()) == before

    s.set_input(2, "Seoul")
    assert s.answer_free_text(2) is True
    assert s.answer_free_text(2, "nope") is False
    assert s.states[2].is_correct is True
    assert s.score == 1


def test_free_text_trims_and_casefolds():
    s = _session([_free_text("seoul", id="a"), _free_text("seoul", id="b")])
    assert s.answer_free_text(0, " Seoul ") is True
    assert s.answer_free_text(1, " Seo ul") is True
    assert s.states[0].is_correct is True
    assert s.states[1].is_correct is False


def test_blank_free_text_input_is_ignored():
    s = _session([_free_text()])
    s.set_input(0, "   ")
    assert s.answer_free_text(0) is False
    assert not s.states[0].is_answered


def test_complete_flips_on_last_answer(questions):
    store = MemoryProgress()
    s = _session(questions, store)
    s.answer_multiple_choice(0, "2.75%")
    s.answer_multiple_choice(1, "3.0%")
    assert not s.complete
    assert store.items[s.key]["isComplete"] is False

    s.answer_free_text(2, "SEOUL")
    assert s.complete
    assert s.score == 2
    assert s.percentage == 67
    assert s.progress_pct == 100.0
    assert store.items[s.key]["isComplete"] is True
    assert store.items[s.key]["score"] == 2


def test_empty_question_list_is_never_complete():
    s = _session([])
    assert not s.complete
    assert s.percentage == 0


def test_out_of_range_positions_are_ignored(questions):
    s = _session(questions)
    assert s.answer_multiple_choice(9, "x") is False
    assert s.answer_free_text(-1, "x") is False
    assert s.toggle_hint(3) is False
    s.set_input(42, "x")
    assert s.answered_count == 0


def test_toggle_hint_flips_and_persists(questions):
    store = MemoryProgress()
    s = _session(questions, store)
    assert s.toggle_hint(2) is True
    assert store.items[s.key]["questionStates"][2]["showHint"] is True
    assert s.toggle_hint(2) is False


def test_resume_with_matching_length_restores_state(questions):
    store = MemoryProgress()
    first = _session(questions, store)
    first.answer_multiple_choice(0, "2.75%")
    first.set_input(2, "Busan")

    again = _session(questions, store)
    assert again.resumed
    assert [st.to_dict() for st in again.states] == [st.to_dict() for st in first.states]
    assert again.score == 1


def test_resume_with_other_length_starts_fresh(questions):
    store = MemoryProgress()
    first = _session(questions, store)
    first.answer_multiple_choice(0, "2.75%")

    shorter = _session(questions[:2], store)
    assert not shorter.resumed
    assert len(shorter.states) == 2
    assert shorter.answered_count == 0


def test_restart_resets_and_persists(questions):
    store = MemoryProgress()
    s = _session(questions, store)
    s.answer_multiple_choice(0, "2.75%")
    s.restart()

    assert s.score == 0
    assert not s.complete
    saved = store.items[s.key]
    assert saved["score"] == 0
    assert all(not st["isAnswered"] for st in saved["questionStates"])


def test_snapshot_timestamp_uses_clock(questions):
    s = _session(questions, clock=lambda: 1_700_000_000.5)
    snap = s.snapshot()
    assert snap["timestamp"] == 1_700_000_000_500
    assert len(snap["questionStates"]) == 3


class _BrokenProgress:
    def load(self, key):
        raise RuntimeError("disk gone")

    def save(self, key, snapshot):
        raise RuntimeError("disk gone")


def test_progress_failures_never_reach_the_player(questions):
    s = _session(questions, _BrokenProgress())
    assert s.answer_multiple_choice(0, "2.75%") is True
    assert s.score == 1


def test_keystore_progress_is_scoped_by_owner(questions, keystore):
    alice = _session(questions, KeyStoreProgress(keystore, "sid-a"))
    alice.answer_multiple_choice(0, "2.75%")

    assert _session(questions, KeyStoreProgress(keystore, "sid-a")).score == 1
    assert _session(questions, KeyStoreProgress(keystore, "sid-b")).score == 0
