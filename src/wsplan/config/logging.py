"""Logging setup: structlog rendering for every ``wsplan.*`` logger.

stdout belongs to plans and JSON results, so all log output goes to
stderr, either as console lines or (``--log-json``) one JSON object per
line. Library modules keep using ``logging.getLogger(__name__)``; the
ProcessorFormatter installed here renders those records through the same
structlog chain as native structlog loggers.
"""

from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE_LOGGER = "wsplan"


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to stderr.

    The ``wsplan`` logger is opened to DEBUG with *verbose*, otherwise only
    warnings (skipped manifests, undiscovered dependencies) get through.
    Third-party loggers stay at WARNING either way. Safe to call more than
    once: the root handler is replaced, not stacked.
    """
    pre_chain = _pre_chain()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
