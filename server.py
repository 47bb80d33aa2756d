import logging

import uvicorn

from app.constants import APP_MODE, APP_VERSION
from app.utils.logger_setup import setup_logging
from app.utils.startup_banner import startup_banner

from config import HOST, PORT, QUIZ_STORE, REMOTE_QUIZ_URL, ADMIN_PASSWORD


def build_app():
    from app.web.main import create_app

    app = create_app()

    startup_banner(
        store=QUIZ_STORE,
        source=REMOTE_QUIZ_URL.replace("http://", "").replace("https://", "") or "local store",
        link=f"{HOST}:{PORT}",
        routes=len(app.routes),
        version=APP_VERSION,
        mode=APP_MODE,
    )
    return app


def main() -> None:
    setup_logging(console_level="INFO", file_level="DEBUG")
    log = logging.getLogger(__name__)

    if not ADMIN_PASSWORD:
        log.warning("ADMIN_PASSWORD is empty: admin writes will be rejected")

    app = build_app()
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
