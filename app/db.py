import json
import os
import sqlite3
from typing import Any, Dict, List, Optional, Tuple


class KeyStore:
    def __init__(self, db_path: str):
        self.db_path = db_path
        self._init_db()

    # -------------------------
    # Connection
    # -------------------------
    def _connect(self) -> sqlite3.Connection:
        con = sqlite3.connect(self.db_path)
        con.row_factory = sqlite3.Row
        return con

    def _ensure_columns(self, con: sqlite3.Connection, table: str, cols: dict) -> None:
        cur = con.execute(f"PRAGMA table_info({table})")
        existing = {row[1] for row in cur.fetchall()}
        for col, ddl in cols.items():
            if col not in existing:
                con.execute(f"ALTER TABLE {table} ADD COLUMN {col} {ddl}")

    def _init_db(self) -> None:
        os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)

        with self._connect() as con:
            # -------------------------
            # Question sets, one row per (gameType, quizDate)
            # -------------------------
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS quizzes (
                    game_type TEXT NOT NULL,
                    quiz_date TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    PRIMARY KEY (game_type, quiz_date)
                )
                """
            )

            # migrations (safe on existing DBs)
            self._ensure_columns(
                con,
                "quizzes",
                {"updated_at": "DATETIME"},
            )

            con.execute("CREATE INDEX IF NOT EXISTS idx_quizzes_date ON quizzes(quiz_date)")

            # -------------------------
            # Player progress snapshots
            # -------------------------
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS quiz_progress (
                    owner_key TEXT NOT NULL,
                    progress_key TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (owner_key, progress_key)
                )
                """
            )

            con.commit()

    # -------------------------
    # Question sets
    # -------------------------
    def get_quiz(self, game_type: str, quiz_date: str) -> Optional[Dict[str, Any]]:
        with self._connect() as con:
            row = con.execute(
                "SELECT data_json FROM quizzes WHERE game_type = ? AND quiz_date = ?",
                (str(game_type), str(quiz_date)),
            ).fetchone()
        if not row:
            return None
        return json.loads(row["data_json"])

    def put_quiz(self, game_type: str, quiz_date: str, data: Dict[str, Any]) -> None:
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO quizzes (game_type, quiz_date, data_json, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(game_type, quiz_date) DO UPDATE SET
                    data_json = excluded.data_json,
                    updated_at = excluded.updated_at
                """,
                (str(game_type), str(quiz_date), json.dumps(data, ensure_ascii=False)),
            )
            con.commit()

    def delete_quiz(self, game_type: str, quiz_date: str) -> None:
        with self._connect() as con:
            con.execute(
                "DELETE FROM quizzes WHERE game_type = ? AND quiz_date = ?",
                (str(game_type), str(quiz_date)),
            )
            con.commit()

    def list_quizzes(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        with self._connect() as con:
            rows = con.execute(
                "SELECT game_type, quiz_date, data_json FROM quizzes ORDER BY game_type, quiz_date"
            ).fetchall()

        out: List[Tuple[str, str, Dict[str, Any]]] = []
        for r in rows or []:
            try:
                out.append((r["game_type"], r["quiz_date"], json.loads(r["data_json"])))
            except ValueError:
                continue
        return out

    # -------------------------
    # Progress
    # -------------------------
    def get_progress(self, owner_key: str, progress_key: str) -> Optional[Dict[str, Any]]:
        with self._connect() as con:
            row = con.execute(
                "SELECT data_json FROM quiz_progress WHERE owner_key = ? AND progress_key = ?",
                (str(owner_key), str(progress_key)),
            ).fetchone()
        if not row:
            return None
        try:
            return json.loads(row["data_json"])
        except ValueError:
            return None

    def set_progress(self, owner_key: str, progress_key: str, data: Dict[str, Any]) -> None:
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO quiz_progress (owner_key, progress_key, data_json, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(owner_key, progress_key) DO UPDATE SET
                    data_json = excluded.data_json,
                    updated_at = excluded.updated_at
                """,
                (str(owner_key), str(progress_key), json.dumps(data, ensure_ascii=False)),
            )
            con.commit()
