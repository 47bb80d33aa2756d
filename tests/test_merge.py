import pytest

from app.errors import PayloadError
from app.services.merge import ingest, merge, resolve_game_type
from app.stores.kv_store import KeyValueStore


def test_mixed_merge_replaces_and_appends():
    existing = [{"id": "a", "v": 1}, {"id": "b", "v": 1}]
    incoming = [{"id": "b", "v": 2}, {"id": "c", "v": 1}]
    assert merge(existing, incoming) == [{"id": "a", "v": 1}, {"id": "b", "v": 2}, {"id": "c", "v": 1}]


def test_noop_merge():
    existing = [{"id": "a", "v": 1}, {"id": "b", "v": 1}]
    assert merge(existing, []) == [{"id": "a", "v": 1}, {"id": "b", "v": 1}]


def test_pure_replace_merge():
    existing = [{"id": "a", "v": 1}, {"id": "b", "v": 1}]
    incoming = [{"id": "b", "v": 2}, {"id": "a", "v": 3}]
    assert merge(existing, incoming) == [{"id": "a", "v": 3}, {"id": "b", "v": 2}]


def test_pure_insert_merge():
    assert merge([], [{"id": "x", "v": 1}, {"id": "y", "v": 1}]) == [{"id": "x", "v": 1}, {"id": "y", "v": 1}]


def test_replacement_is_whole_record():
    merged = merge([{"id": "a", "question": "old", "answer": "1"}], [{"id": "a", "question": "new"}])
    assert merged == [{"id": "a", "question": "new"}]


def test_unhashable_ids_merge_by_value():
    existing = [{"id": ["x"], "v": 1}, {"id": '["x"]', "v": 1}]
    incoming = [{"id": ["x"], "v": 2}, {"id": {"k": 1}, "v": 1}]
    assert merge(existing, incoming) == [
        {"id": ["x"], "v": 2},
        {"id": '["x"]', "v": 1},
        {"id": {"k": 1}, "v": 1},
    ]


def test_resolve_game_type():
    assert resolve_game_type("BlackSwan") == "BlackSwan"
    assert resolve_game_type("g2") == "PrisonersDilemma"
    assert resolve_game_type("G3") == "SignalDecoding"
    with pytest.raises(PayloadError):
        resolve_game_type("Chess")


def test_ingest_merges_into_stored_bucket(file_store):
    file_store.put_raw("BlackSwan", "2025-03-12", [{"id": "a", "question": "one"}])

    saved = ingest(
        file_store,
        {
            "gameType": "BlackSwan",
            "quizDate": "2025-03-12",
            "data": {"questions": [{"id": "a", "question": "one v2"}, {"id": "b", "question": "two"}]},
        },
    )

    assert saved == {
        "gameType": "BlackSwan",
        "quizDate": "2025-03-12",
        "totalQuestions": 2,
        "addedOrUpdated": 2,
    }
    assert file_store.read_raw("BlackSwan", "2025-03-12") == [
        {"id": "a", "question": "one v2"},
        {"id": "b", "question": "two"},
    ]


def test_ingest_stores_unvalidated_rows(keystore):
    store = KeyValueStore(keystore)
    ingest(store, {"gameType": "g1", "quizDate": "2025-03-12", "data": {"questions": [{"id": "x"}]}})
    assert store.read_raw("BlackSwan", "2025-03-12") == [{"id": "x"}]


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"gameType": "BlackSwan", "data": {"questions": []}},
        {"quizDate": "2025-03-12", "data": {"questions": []}},
        {"gameType": "BlackSwan", "quizDate": "2025-03-12", "data": {"questions": "nope"}},
    ],
)
def test_ingest_rejects_bad_payloads(file_store, payload):
    with pytest.raises(PayloadError):
        ingest(file_store, payload)


def test_ingest_without_data_is_an_empty_batch(file_store):
    saved = ingest(file_store, {"gameType": "BlackSwan", "quizDate": "2025-03-12"})
    assert saved["totalQuestions"] == 0
    assert file_store.read_raw("BlackSwan", "2025-03-12") == []
