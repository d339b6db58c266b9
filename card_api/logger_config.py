import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import TimedRotatingFileHandler

DEFAULT_LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "logs")

# set per request by RequestIDMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def _log_dir() -> str:
    return os.environ.get("CARDS_LOG_DIR", DEFAULT_LOG_DIR)


def _install_record_factory():
    old_factory = logging.getLogRecordFactory()
    if getattr(old_factory, "_with_request_id", False):
        return

    def record_factory(*args, **kwargs):
        rec = old_factory(*args, **kwargs)
        rec.request_id = request_id_var.get()
        return rec

    record_factory._with_request_id = True
    logging.setLogRecordFactory(record_factory)


def setup_logging():
    """Configure application-wide logging with console + rotating file."""
    _install_record_factory()

    root = logging.getLogger()
    if any(getattr(h, "_card_api", False) for h in root.handlers):
        # Avoid double configuration if reloaded
        return

    root.setLevel(os.environ.get("CARDS_LOG_LEVEL", "INFO").upper())

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] [%(request_id)s] %(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    console._card_api = True
    root.addHandler(console)

    log_dir = _log_dir()
    os.makedirs(log_dir, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        os.path.join(log_dir, "app.log"), when="midnight", backupCount=7, encoding="utf-8"
    )
    file_handler.setFormatter(fmt)
    file_handler._card_api = True
    root.addHandler(file_handler)
