"""structlog configuration for themeguard.

Log records go to stderr, rendered for a terminal or as JSON lines
(``--log-json``). stdlib loggers share the same pipeline through
``ProcessorFormatter``, so compiler messages look like everything else.

The ``themeguard.sass`` channel carries what the Sass compiler itself
prints (``@warn`` output, deprecation notices from theme packages). A
full Material theme produces hundreds of those, so the channel only
speaks up for errors unless ``--verbose`` is given.
"""

from __future__ import annotations

import logging
import sys

import structlog

SASS_LOGGER = "themeguard.sass"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: DEBUG for ``themeguard.*`` and compiler warnings shown.
        log_json: JSON lines instead of console output.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("themeguard").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger(SASS_LOGGER).setLevel(logging.DEBUG if verbose else logging.ERROR)
