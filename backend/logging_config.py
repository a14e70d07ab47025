"""Logging setup for the API process.

Three rotating files live under ``settings.log_dir``:

- ``mealtracker.log``: everything at INFO and above, also echoed to the console
- ``mealtracker_api.log``: one START/COMPLETE pair per HTTP request
- ``mealtracker_sql.log``: SQL statements from ``sqlalchemy.engine.Engine``
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from backend.config import Settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
API_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
API_LOGGER_NAME = "mealtracker.api"

# file name -> (max bytes, backups kept)
ROTATION = {
    "mealtracker.log": (1024 * 1024, 5),
    "mealtracker_sql.log": (1024 * 1024, 5),
    "mealtracker_api.log": (2 * 1024 * 1024, 15),
}

SQL_NOISE = ('BEGIN', 'COMMIT', 'ROLLBACK', 'generated in', 'cached since')
SQL_STATEMENTS = ('SELECT', 'INSERT', 'UPDATE', 'DELETE')


class SQLStatementFilter(logging.Filter):
    """Drop transaction chatter and fold multi-line statements onto one line."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno != logging.INFO:
            return True

        message = record.getMessage()
        if any(marker in message for marker in SQL_NOISE):
            return False
        if any(keyword in message for keyword in SQL_STATEMENTS):
            record.msg = ' '.join(message.split())
            record.args = ()
        return True


def _rotating_handler(log_dir: Path, filename: str, fmt: str) -> RotatingFileHandler:
    max_bytes, backups = ROTATION[filename]
    handler = RotatingFileHandler(log_dir / filename, maxBytes=max_bytes, backupCount=backups, encoding='utf-8')
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _isolate(logger: logging.Logger, handler: logging.Handler, level: int = logging.INFO) -> None:
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configure_logging(settings: Settings) -> logging.Logger:
    """Install handlers and return the request logger used by the HTTP middleware."""
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    general_handler = _rotating_handler(log_dir, "mealtracker.log", LOG_FORMAT)

    # force=True replaces handlers uvicorn may already have installed
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(), general_handler],
        force=True,
    )

    access_logger = logging.getLogger("uvicorn.access")
    access_logger.setLevel(logging.INFO)
    if general_handler not in access_logger.handlers:
        access_logger.addHandler(general_handler)

    sql_handler = _rotating_handler(log_dir, "mealtracker_sql.log", LOG_FORMAT)
    sql_handler.addFilter(SQLStatementFilter())
    _isolate(logging.getLogger("sqlalchemy.engine.Engine"), sql_handler)

    api_logger = logging.getLogger(API_LOGGER_NAME)
    _isolate(api_logger, _rotating_handler(log_dir, "mealtracker_api.log", API_LOG_FORMAT))
    return api_logger
