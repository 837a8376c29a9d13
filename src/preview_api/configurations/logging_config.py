import logging
import sys

import google.cloud.logging
import structlog

from preview_api.configurations.config import settings

# Per-request chatter from the outbound client, favicon probes included
NOISY_LOGGERS = ("httpx", "httpcore")


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.dev.set_exc_info,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty(), pad_level=False),
            ],
        )
    )
    return handler


def _log_level() -> int:
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging():
    level = _log_level()

    if settings.env == "prod":
        client = google.cloud.logging.Client(project=settings.gcp_project_id or None)
        client.setup_logging(log_level=level)
    else:
        root_logger = logging.getLogger()
        root_logger.handlers = [_console_handler()]
        root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
