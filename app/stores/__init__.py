from .base import BatchResult, QuestionStore, empty_quiz_data, group_by_theme
from .file_store import JsonFileStore
from .http_store import HttpQuestionStore
from .kv_store import KeyValueStore

__all__ = [
    "BatchResult",
    "QuestionStore",
    "JsonFileStore",
    "HttpQuestionStore",
    "KeyValueStore",
    "build_store",
    "empty_quiz_data",
    "group_by_theme",
]


def build_store(kind: str, *, data_path: str, db=None, api_url: str = "", credential: str = "") -> QuestionStore:
    kind = (kind or "file").strip().lower()
    if kind == "kv":
        if db is None:
            raise ValueError("kv store needs a KeyStore")
        return KeyValueStore(db)
    if kind == "http":
        return HttpQuestionStore(api_url, credential)
    return JsonFileStore(data_path)
