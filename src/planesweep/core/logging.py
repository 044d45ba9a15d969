"""
Structured logging configuration for planesweep.

Uses structlog (https://www.structlog.org/) to provide structured, context-rich
logging throughout the library. Supports both JSON output (batch jobs) and
colored console output (development).

Until an application calls ``configure_logging``, planesweep's loggers only
print warnings and errors, so per-height debug events stay silent.

Usage::

    from planesweep.core.logging import configure_logging, get_logger

    configure_logging(json_output=False)  # Call once at startup
    logger = get_logger(__name__)
    logger.info("sweep_complete", heights=11, segments=11)
"""

import logging
import sys
from typing import Any, ContextManager, MutableMapping, Optional

import structlog

# event keys holding heights or steps
HEIGHT_KEYS = ("z", "min_z", "max_z", "sweep_step")
HEIGHT_DIGITS = 9


def round_heights(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Round height-like values so ``0.30000000000000004`` logs as ``0.3``."""
    for key in HEIGHT_KEYS:
        value = event_dict.get(key)
        if isinstance(value, float):
            event_dict[key] = round(value, HEIGHT_DIGITS)
    return event_dict


def configure_library_defaults(level: str = "WARNING") -> None:
    """
    Print only events at ``level`` or above to stdout.

    Applied on import when nothing has configured structlog yet;
    ``configure_logging`` replaces it.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            round_heights,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the entire application.

    Call this once at startup (the CLI does it before running a command).

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, output JSON lines.
                     If False, output colored console-friendly lines.
        log_file: Optional path to write logs to a file in addition to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        round_heights,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # module loggers exist before this runs, so resolve config on every call
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger for the given module name.

    Args:
        name: Module name, typically ``__name__``.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


def bind_sweep(mode: str, step: float, heights: int) -> ContextManager[None]:
    """
    Bind sweep identity to every log event emitted inside the block.

    Usage::

        with bind_sweep("additive", 0.2, 51):
            logger.debug("height_sliced", z=1.4, loops=2)
    """
    return structlog.contextvars.bound_contextvars(
        sweep_mode=mode, sweep_step=step, sweep_heights=heights
    )


if not structlog.is_configured():
    configure_library_defaults()
