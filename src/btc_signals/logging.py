"""structlog setup for the analysis engine.

Engine modules log through ``get_logger(__name__)``. The CLI calls
``setup_logging`` once with the level and format from AppSettings, and log
lines go to stderr so the analysis JSON printed on stdout stays parseable.
"""

import logging
import sys
from typing import Literal, TextIO

import structlog

LogFormat = Literal["console", "json"]

#: Processors applied to both structlog and foreign stdlib records.
_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    log_level: str = "INFO",
    log_format: LogFormat = "console",
    stream: TextIO | None = None,
) -> None:
    """Route structlog events through a single root handler.

    Args:
        log_level: Stdlib level name. Unknown names fall back to INFO.
        log_format: "json" for one JSON object per line, else key=value text.
        stream: Destination for log lines. None = stderr.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
