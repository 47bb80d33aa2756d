import platform
import sys
import logging

log = logging.getLogger("NewsQuiz")


def startup_banner(
    *,
    store: str,
    source: str,
    link: str,
    routes: int,
    version: str,
    mode: str,
) -> None:
    python_ver = sys.version.split()[0]
    os_name = platform.system()

    rows = [
        ("CORE", f"News Quiz v{version}"),
        ("ENV", mode),
        ("RUNTIME", f"Python {python_ver}"),
        ("HOST", os_name),
        ("STORE", store),
        ("SOURCE", source),
        ("LINK", link),
        ("ROUTES", str(routes)),
        ("STATUS", "OPERATIONAL"),
    ]

    width = 44
    line = "─" * width

    log.info(line)
    log.info(" >>> News Quiz is online")
    log.info("")

    label_width = max(len(k) for k, _ in rows)

    for k, v in rows:
        log.info(f"{k.ljust(label_width)} : {v}")

    log.info(line)
