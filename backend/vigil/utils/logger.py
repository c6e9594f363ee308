"""
structlog setup shared by the API and scripts.

Console output in local/staging, JSON lines elsewhere. Request fields bound
with ``bind_request_context`` are merged into every line logged while the
request is handled.
"""
import logging
import os

import structlog

LOGGING_LEVEL = logging.getLevelNamesMapping().get(
    os.getenv("LOGGING_LEVEL", "DEBUG").upper(),
    logging.DEBUG
)


def _output_processors():
    # dict_tracebacks pairs with JSONRenderer, format_exc_info with ConsoleRenderer
    if os.getenv("ENV_MODE", "local").lower() in ("local", "staging"):
        return [structlog.processors.format_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        *_output_processors(),
    ],
    cache_logger_on_first_use=True,
    wrapper_class=structlog.make_filtering_bound_logger(LOGGING_LEVEL),
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


def bind_request_context(**values) -> None:
    """Reset contextvars and bind the per-request fields merged into every log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
