import logging
from types import SimpleNamespace

from loudstock.app.core.logging_setup import LOG_FILE_NAME, setup_logging


def test_file_handler_is_added_once(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    settings = SimpleNamespace(LOG_LEVEL="debug", LOG_DIR=str(tmp_path / "logs"))

    try:
        path = setup_logging(settings)
        setup_logging(settings)

        assert path == tmp_path / "logs" / LOG_FILE_NAME
        files = [h for h in root.handlers if getattr(h, "baseFilename", "").endswith(LOG_FILE_NAME)]
        assert len(files) == 1
        assert root.level == logging.DEBUG
        assert files[0] in logging.getLogger("uvicorn.error").handlers
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
                for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
                    logging.getLogger(name).removeHandler(h)
                h.close()
        root.setLevel(logging.WARNING)


def test_no_file_without_log_dir():
    assert setup_logging(SimpleNamespace(LOG_LEVEL="INFO", LOG_DIR=None)) is None
