"""Logging configuration for wingplan."""
import json
import sys
from typing import Any, Dict

from loguru import logger


class JSONFormatter:
    """Render loguru records as one JSON document per line."""

    def __call__(self, record: Dict[str, Any]) -> str:
        log_data = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "module": record["module"],
            "function": record["function"],
            "line": record["line"],
        }
        if record["exception"] is not None:
            log_data["exception"] = {
                "type": record["exception"].type.__name__ if record["exception"].type else None,
                "value": str(record["exception"].value) if record["exception"].value else None,
            }
        log_data.update(record["extra"])

        # Escape braces so loguru does not treat the JSON as a format string
        return json.dumps(log_data, ensure_ascii=False, default=str).replace("{", "{{").replace("}", "}}") + "\n"


def setup_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the process-wide loguru sink.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of the coloured console format
    """
    logger.remove()

    if json_format:
        logger.add(sys.stderr, format=JSONFormatter(), level=level, colorize=False)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            level=level,
            colorize=True,
        )
