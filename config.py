import os
import logging
from pathlib import Path
from dotenv import load_dotenv

log = logging.getLogger("config")

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH, override=False)

# file | kv | http
QUIZ_STORE = os.getenv("QUIZ_STORE", "file").strip().lower()
QUIZ_DATA_PATH = os.getenv("QUIZ_DATA_PATH", "./data/quizData_combined.json")
DB_PATH = os.getenv("DB_PATH", "./data/quizzes.sqlite3")
QUIZ_API_URL = os.getenv("QUIZ_API_URL", "http://127.0.0.1:8000")

REMOTE_QUIZ_URL = os.getenv("REMOTE_QUIZ_URL", "")
QUIZ_CACHE_TTL = int(os.getenv("QUIZ_CACHE_TTL", "300"))

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
INGEST_SECRET = os.getenv("INGEST_SECRET", "")
WEB_SESSION_SECRET = os.getenv("WEB_SESSION_SECRET", "dev-session-secret")

ENV = os.getenv("ENV", "").lower()
IS_PROD = ENV == "prod"
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "1") not in ("0", "false", "no")

log.debug("BASE_DIR=%s", BASE_DIR)
log.debug("ENV_PATH=%s exists=%s", ENV_PATH, ENV_PATH.exists())
log.debug("QUIZ_STORE=%s", QUIZ_STORE)
log.debug("QUIZ_DATA_PATH=%s", QUIZ_DATA_PATH)
log.debug("DB_PATH=%s", DB_PATH)
log.debug("REMOTE_QUIZ_URL=%s", REMOTE_QUIZ_URL)
log.debug("ADMIN_PASSWORD_LEN=%s", len(ADMIN_PASSWORD or ""))
