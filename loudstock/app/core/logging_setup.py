from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
LOG_FILE_NAME = "loudstock.log"


def setup_logging(settings) -> Path | None:
    """
    Configure le logging racine : console + fichier rotatif si LOG_DIR est défini.
    Retourne le chemin du fichier de log (ou None).
    """
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    handlers: list[logging.Handler] = []

    # évite les doublons si l'app est rechargée
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)
        handlers.append(stream)

    log_path: Path | None = None
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE_NAME

        if not any(getattr(h, "baseFilename", "").endswith(LOG_FILE_NAME) for h in root.handlers):
            file_handler = logging.handlers.RotatingFileHandler(
                log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
            )
            file_handler.setFormatter(fmt)
            root.addHandler(file_handler)
            handlers.append(file_handler)

    # uvicorn a ses propres handlers : on y branche les nôtres
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        for h in handlers:
            if h not in lg.handlers:
                lg.addHandler(h)

    return log_path
