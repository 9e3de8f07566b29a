"""Process-wide logging setup, called once from the application lifespan.

Components never configure logging themselves; they receive a named
``logging.Logger`` through their constructors.
"""

import logging.config

_LOCAL_FORMAT = "%(levelname)-7s %(name)s: %(message)s"
_PRODUCTION_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", environment: str = "local") -> None:
    production = environment == "production"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": _PRODUCTION_FORMAT if production else _LOCAL_FORMAT,
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "gift": {"level": level.upper(), "handlers": ["console"], "propagate": False},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )
