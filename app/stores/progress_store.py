from __future__ import annotations

from typing import Any, Dict, Optional

from app.db import KeyStore


class KeyStoreProgress:
    """Progress snapshots for one client, kept in the sqlite KeyStore."""

    def __init__(self, db: KeyStore, owner_key: str):
        self.db = db
        self.owner_key = owner_key

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        return self.db.get_progress(self.owner_key, key)

    def save(self, key: str, snapshot: Dict[str, Any]) -> None:
        self.db.set_progress(self.owner_key, key, snapshot)


class MemoryProgress:
    def __init__(self):
        self.items: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        return self.items.get(key)

    def save(self, key: str, snapshot: Dict[str, Any]) -> None:
        self.items[key] = snapshot
