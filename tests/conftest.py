import pytest
from fastapi.testclient import TestClient

from app.db import KeyStore
from app.models.quiz import Question, RelatedArticle
from app.stores.file_store import JsonFileStore
from app.web.core.ratelimit import limiter
from app.web.core.security import Credential
from app.web.main import create_app

ADMIN_SECRET = "s3cret-pass"
DATE = "2025-03-12"


@pytest.fixture(autouse=True)
def _no_rate_limit():
    prev = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = prev


@pytest.fixture
def make_question():
    counter = {"n": 0}

    def _make(**changes) -> Question:
        counter["n"] += 1
        base = dict(
            id=f"q{counter['n']}",
            date=DATE,
            theme="BlackSwan",
            question_type="multiple-choice",
            text="Which rate did the central bank hold?",
            choices=["2.5%", "2.75%", "3.0%"],
            correct_index=1,
            explanation="It held at 2.75%.",
            related_article=RelatedArticle(
                title="Rates on hold",
                snippet="The bank kept its policy rate.",
                url="https://news.example.com/rates",
            ),
            creator="econ-desk",
        )
        base.update(changes)
        return Question(**base)

    return _make


@pytest.fixture
def file_store(tmp_path):
    return JsonFileStore(str(tmp_path / "quizData_combined.json"))


@pytest.fixture
def keystore(tmp_path):
    return KeyStore(str(tmp_path / "quizzes.sqlite3"))


@pytest.fixture
def app(file_store, keystore):
    return create_app(
        store=file_store,
        db=keystore,
        source=None,
        credential=Credential(ADMIN_SECRET),
        ingest_secret=Credential(""),
        session_secret="test-session-secret",
    )


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}
