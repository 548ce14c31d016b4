import logging
import os
from typing import Any

import structlog

# Comma separated event names dropped before rendering, e.g. "existence_checked,rename_resolved"
SUPPRESSED_EVENTS: set[str] = set()


def _load_suppressed_events() -> None:
    global SUPPRESSED_EVENTS
    suppressed = os.getenv("DAVOPS_SUPPRESS_EVENTS", "")
    SUPPRESSED_EVENTS = {e.strip() for e in suppressed.split(",") if e.strip()}


def _event_filter(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if event_dict.get("event") in SUPPRESSED_EVENTS:
        raise structlog.DropEvent
    return event_dict


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Route davops events through the `davops` stdlib logger.

    Arguments default to DAVOPS_LOG_LEVEL (INFO) and DAVOPS_LOG_FORMAT. A format of
    "dev" renders for the console, anything else renders one JSON object per line.
    Calling it again replaces the previous handler.
    """
    level = level or os.getenv("DAVOPS_LOG_LEVEL", "INFO")
    log_format = log_format or os.getenv("DAVOPS_LOG_FORMAT", "json")

    _load_suppressed_events()

    processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _event_filter,
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if log_format == "dev":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    handler = logging.StreamHandler()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    davops_logger = logging.getLogger("davops")
    davops_logger.handlers.clear()
    davops_logger.addHandler(handler)
    davops_logger.setLevel(level)
