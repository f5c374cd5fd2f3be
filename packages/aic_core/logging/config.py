import logging
import logging.config
import logging.handlers
import os


# Log directory is relative to the working directory unless overridden
LOG_DIR = os.path.abspath(os.getenv("AIC_LOG_DIR", "logs"))
AGENT_LOG_DIR = os.path.join(LOG_DIR, "agent")
CONSOLE_LEVEL = os.getenv("AIC_LOG_LEVEL", "INFO").upper()

os.makedirs(AGENT_LOG_DIR, exist_ok=True)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _rotating_file(filename: str, level: str) -> dict:
    """dictConfig entry for a midnight-rotating file kept for 30 days."""
    return {
        "level": level,
        "class": "logging.handlers.TimedRotatingFileHandler",
        "filename": os.path.join(AGENT_LOG_DIR, filename),
        "when": "midnight",
        "interval": 1,
        "backupCount": 30,
        "encoding": "utf-8",
        "formatter": "standard",
    }


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
    },
    "handlers": {
        "console": {
            "level": CONSOLE_LEVEL,
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
        "file_agent": _rotating_file("agent.log", "DEBUG"),
        "file_error": _rotating_file("agent.error.log", "ERROR"),
    },
    "loggers": {
        # Session, media and provider modules all log under aic.*
        "aic": {
            "level": "DEBUG",
            "handlers": ["file_agent", "file_error"],
            "propagate": True,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
}


def setup_logging():
    """Apply default logging configuration."""
    logging.config.dictConfig(LOGGING_CONFIG)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def add_runtime_file_handler(subdir: str = "runtime") -> logging.Handler:
    """
    Attach a midnight-rotating INFO file handler to the root logger.
    Used by the HTTP server so uvicorn records land next to the agent logs.
    The caller removes and closes the handler on shutdown.
    """
    log_dir = os.path.join(LOG_DIR, subdir)
    os.makedirs(log_dir, exist_ok=True)

    handler = logging.handlers.TimedRotatingFileHandler(
        filename=os.path.join(log_dir, f"{subdir}.log"),
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(logging.INFO)
    logging.getLogger().addHandler(handler)
    return handler


setup_logging()
