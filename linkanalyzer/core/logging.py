"""
structlog setup for the analyzer.

Every event carries the service name and version. Events emitted while a page
is being analysed also carry the `url` (and `bulk_index` inside a bulk run)
bound through structlog.contextvars by the engines.
"""

import logging
import sys
from typing import IO, Any

import structlog
from structlog.types import EventDict, Processor

from linkanalyzer.core.config import Settings, get_settings

SERVICE_NAME = "linkanalyzer"
# stdlib loggers of the HTTP stack; they log every request at INFO/DEBUG
HTTP_LOGGERS = ("httpx", "httpcore")


def service_context(version: str, env: str) -> Processor:
    def add_service(logger: Any, method: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("version", version)
        event_dict.setdefault("env", env)
        return event_dict

    return add_service


def configure_logging(settings: Settings | None = None, stream: IO[str] | None = None) -> None:
    settings = settings or get_settings()
    stream = stream or sys.stdout
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        service_context(settings.APP_VERSION, settings.ENV),
    ]

    if settings.LOG_FORMAT == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=stream, level=log_level)

    # Per-request transport chatter only when debugging the crawler itself
    http_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
