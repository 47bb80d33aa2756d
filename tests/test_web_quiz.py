import json

import httpx
from fastapi.testclient import TestClient

from app.services.remote_source import QuizCache, RemoteQuizSource
from app.web.core.security import Credential
from app.web.main import create_app

DATE = "2025-03-12"
EMPTY = {"BlackSwan": {}, "SignalDecoding": {}, "PrisonersDilemma": {}}


def _app_with_upstream(file_store, keystore, handler):
    source = RemoteQuizSource(
        "https://api.example.com/quizzes/all",
        cache=QuizCache(ttl=300),
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return create_app(store=file_store, db=keystore, source=source, credential=Credential("x"))


# -----------------------------
# /api/quiz
# -----------------------------
def test_local_dump_when_no_upstream(client, file_store):
    file_store.put_raw("BlackSwan", DATE, [{"id": "a", "question": "?"}])

    r = client.get("/api/quiz")
    assert r.status_code == 200
    assert r.json()["BlackSwan"] == {DATE: [{"id": "a", "question": "?"}]}
    assert r.headers["Cache-Control"] == "public, s-maxage=300, stale-while-revalidate=600"


def test_upstream_data_is_transformed(file_store, keystore):
    items = [{"gameType": "SignalDecoding", "quizDate": DATE, "data": {"questions": [{"id": "s"}]}}]

    def handler(request):
        return httpx.Response(200, json={"statusCode": 200, "body": json.dumps(items)})

    c = TestClient(_app_with_upstream(file_store, keystore, handler))
    r = c.get("/api/quiz")
    assert r.json() == {"BlackSwan": {}, "SignalDecoding": {DATE: [{"id": "s"}]}, "PrisonersDilemma": {}}
    assert "s-maxage=300" in r.headers["Cache-Control"]


def test_upstream_failure_serves_empty_with_short_cache(file_store, keystore):
    def handler(request):
        return httpx.Response(500)

    c = TestClient(_app_with_upstream(file_store, keystore, handler))
    r = c.get("/api/quiz")
    assert r.status_code == 200
    assert r.json() == EMPTY
    assert r.headers["Cache-Control"] == "public, s-maxage=60, stale-while-revalidate=120"


# -----------------------------
# /api/quiz/{theme}/dates
# -----------------------------
def test_dates_and_archive(client, file_store):
    file_store.put_raw("BlackSwan", "2025-03-12", [{"id": "a"}])
    file_store.put_raw("BlackSwan", "2025-02-01", [{"id": "b"}])
    file_store.put_raw("SignalDecoding", "2025-03-13", [{"id": "c"}])

    r = client.get("/api/quiz/g1/dates")
    assert r.status_code == 200
    body = r.json()
    assert body["theme"] == "BlackSwan"
    assert body["dates"] == ["2025-03-12", "2025-02-01"]
    assert body["mostRecent"] == "2025-03-12"
    assert body["archive"]["years"][0]["months"][0] == {"month": 3, "dates": ["2025-03-12"]}


def test_dates_unknown_theme_is_404(client):
    assert client.get("/api/quiz/Chess/dates").status_code == 404


# -----------------------------
# /api/quizzes/save
# -----------------------------
def test_ingest_preflight_has_cors(client):
    r = client.options("/api/quizzes/save")
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert r.headers["Access-Control-Allow-Methods"] == "OPTIONS,POST"


def test_ingest_merges(client, file_store):
    file_store.put_raw("PrisonersDilemma", DATE, [{"id": "a", "v": 1}, {"id": "b", "v": 1}])
    payload = {
        "gameType": "PrisonersDilemma",
        "quizDate": DATE,
        "data": {"questions": [{"id": "b", "v": 2}, {"id": "c", "v": 1}]},
    }

    r = client.post("/api/quizzes/save", json=payload)
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert r.json() == {
        "success": True,
        "saved": {"gameType": "PrisonersDilemma", "quizDate": DATE, "totalQuestions": 3, "addedOrUpdated": 2},
    }
    assert file_store.read_raw("PrisonersDilemma", DATE) == [
        {"id": "a", "v": 1},
        {"id": "b", "v": 2},
        {"id": "c", "v": 1},
    ]


def test_ingest_accepts_list_ids(client, file_store):
    payload = {"gameType": "BlackSwan", "quizDate": DATE, "data": {"questions": [{"id": ["x"], "question": "q"}]}}

    r = client.post("/api/quizzes/save", json=payload)
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert r.json()["saved"]["totalQuestions"] == 1

    again = client.post("/api/quizzes/save", json=payload).json()
    assert again["saved"]["totalQuestions"] == 1
    assert file_store.read_raw("BlackSwan", DATE) == [{"id": ["x"], "question": "q"}]


def test_ingest_bad_payload_is_400(client):
    r = client.post("/api/quizzes/save", json={"gameType": "BlackSwan"})
    assert r.status_code == 400
    assert r.json()["received"] == {"gameType": "BlackSwan"}
    assert client.post("/api/quizzes/save", content=b"{oops").status_code == 400


def test_ingest_secret_when_configured(file_store, keystore):
    app = create_app(
        store=file_store,
        db=keystore,
        source=None,
        credential=Credential("x"),
        ingest_secret=Credential("ingest-key"),
    )
    c = TestClient(app)
    payload = {"gameType": "BlackSwan", "quizDate": DATE, "data": {"questions": [{"id": "a"}]}}

    assert c.post("/api/quizzes/save", json=payload).status_code == 401
    assert c.post("/api/quizzes/save", json=payload, headers={"x-admin-secret": "wrong"}).status_code == 401
    assert c.post("/api/quizzes/save", json=payload, headers={"x-admin-secret": "ingest-key"}).status_code == 200
