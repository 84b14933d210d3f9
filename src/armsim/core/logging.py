"""
Structured logging for ArmSim.

Built on structlog (https://www.structlog.org/). Library modules only call
:func:`get_logger`; the CLI calls :func:`configure_logging` once. Events are
snake_case names with key/value context::

    logger = get_logger(__name__)
    logger.info("phase_changed", previous="APPROACH", phase="DESCEND")

While a tick is being processed the controller binds the tick index with
:func:`tick_context`, so every event emitted inside it carries ``tick=N``.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    level: str = "WARNING",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Route structlog through the stdlib root logger.

    Args:
        level: Minimum log level name. Unknown names fall back to WARNING,
            which keeps a long headless run quiet.
        json_output: Emit JSON lines instead of colored console output.
        log_file: Optional file that receives a copy of every record.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_output),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def tick_context(tick: int) -> Iterator[None]:
    """Bind ``tick`` to every event logged inside the ``with`` block."""
    with structlog.contextvars.bound_contextvars(tick=tick):
        yield
