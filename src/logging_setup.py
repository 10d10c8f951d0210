import logging
import logging.config

from config import LOG_LEVEL


def setup_logging() -> logging.Logger:
    """Configura el logging de la aplicación (consola)."""
    level = LOG_LEVEL if isinstance(logging.getLevelName(LOG_LEVEL), int) else "INFO"

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    })

    # APScheduler es muy verboso en INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    return logging.getLogger("esign")
