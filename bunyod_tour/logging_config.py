"""
로깅 설정

Everything the service logs goes under the ``bunyod_tour`` logger and is
written three ways: console text, rotating text files (all + errors only)
and a rotating JSON file for log shipping.
"""

import logging
import logging.config
from pathlib import Path

from bunyod_tour.config import Settings

ROOT_LOGGER_NAME = "bunyod_tour"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s - %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(filename)s %(lineno)d %(funcName)s %(message)s"


def _rotating_file(path: Path, formatter: str, level: str = "DEBUG") -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(path),
        "maxBytes": LOG_FILE_MAX_BYTES,
        "backupCount": LOG_FILE_BACKUPS,
        "encoding": "utf8",
    }


def get_logging_config(settings: Settings) -> dict:
    """dictConfig 용 설정 (log_dir, log_level, debug 반영)"""
    log_dir = Path(settings.log_dir)
    app_level = "DEBUG" if settings.debug else settings.log_level

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": TEXT_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "detailed": {"format": DETAILED_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {"()": "pythonjsonlogger.json.JsonFormatter", "format": JSON_FIELDS},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "file": _rotating_file(log_dir / "app.log", "detailed"),
            "error_file": _rotating_file(log_dir / "error.log", "detailed", level="ERROR"),
            "json_file": _rotating_file(log_dir / "app.json", "json"),
        },
        "loggers": {
            ROOT_LOGGER_NAME: {
                "level": app_level,
                "handlers": ["console", "file", "error_file", "json_file"],
                "propagate": False,
            },
            "uvicorn": {"level": "INFO", "handlers": ["console", "file"], "propagate": False},
            # SQL 문장은 debug 모드에서만
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.debug else "WARNING",
                "handlers": ["file"],
                "propagate": False,
            },
        },
        "root": {"level": "INFO", "handlers": ["console", "file"]},
    }


def setup_logging(settings: Settings) -> logging.Logger:
    """로그 디렉토리를 만들고 dictConfig 적용"""
    Path(settings.log_dir).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(get_logging_config(settings))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.info("Logging initialised (text + JSON handlers in %s)", settings.log_dir)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """``bunyod_tour.<name>`` 로거 반환"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)
