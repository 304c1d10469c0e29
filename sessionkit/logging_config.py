"""
Logging configuration for the SessionKit API.

Access log lines for polling endpoints (load balancer health checks) are
dropped so session activity stays readable.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Tuple

QUIET_PATHS: Tuple[str, ...] = ("/health",)


class QuietPathFilter(logging.Filter):
    """Drop uvicorn access records for the given request paths."""

    def __init__(self, paths: Iterable[str] = QUIET_PATHS):
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        # uvicorn passes (client, method, path, http_version, status)
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            path = str(args[2]).split("?", 1)[0]
            return path not in self.paths
        return True


def get_logging_config(level: str = "INFO", quiet_paths: Iterable[str] = QUIET_PATHS) -> Dict[str, Any]:
    """
    Get the dictConfig mapping for the API process.

    Args:
        level: Level for the sessionkit and uvicorn loggers
        quiet_paths: Request paths whose access log lines are suppressed
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "quiet_paths": {
                "()": QuietPathFilter,
                "paths": list(quiet_paths),
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["quiet_paths"]
            }
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            # Unknown-token and sweep warnings come from here
            "sessionkit": {"handlers": ["default"], "level": level, "propagate": False},
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }
