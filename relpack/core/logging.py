"""Console logging via structlog.

Configures structlog once per process. Library modules keep using
`logging.getLogger(__name__)`; a ProcessorFormatter on the root handler
renders those stdlib records through the same structlog processors, so
everything reaches stderr in one format.

Level selection:
  verbose=False — WARNING: step failures and warnings only.
  verbose=True  — DEBUG: every step plus every staged/archived entry.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Calling multiple times is safe — the root handler is replaced.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    stream = stream if stream is not None else sys.stderr

    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def get_logger(name: str | None = None):
    """Return a structlog logger bound to name."""
    return structlog.get_logger(name)
