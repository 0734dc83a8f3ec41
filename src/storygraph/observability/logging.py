"""Structured logging for storygraph.

Events are emitted through structlog and routed to the stdlib logging
handlers, each rendering them with its own ProcessorFormatter:

- console: rich handler on stderr, level chosen by the -v count
- file: one JSON object per line in ``{log_dir}/storygraph.jsonl`` (--log)
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 - Used at runtime for path operations
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor, WrappedLogger

LOG_FILENAME = "storygraph.jsonl"

_configured = False
_file_handler: logging.FileHandler | None = None


def _drop_console_meta(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """Rich prints its own time and level columns."""
    event_dict.pop("timestamp", None)
    event_dict.pop("level", None)
    event_dict.pop("logger", None)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _console_handler(verbosity: int, level: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbosity >= 2,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=level,
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _drop_console_meta,
                structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
            ],
        )
    )
    return handler


def _jsonl_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.EventRenamer("message"),
                structlog.processors.JSONRenderer(default=str),
            ],
        )
    )
    return handler


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Configure console and optional file logging.

    Safe to call again; a previous file handler is closed first.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG
        log_to_file: If True, append JSONL events to ``{log_dir}/storygraph.jsonl``.
        log_dir: Directory for file logging. Required if log_to_file=True.

    Raises:
        ValueError: If log_to_file=True but log_dir is not provided.
    """
    global _configured, _file_handler

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    close_file_logging()

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    handlers: list[logging.Handler] = [_console_handler(verbosity, console_level)]

    if log_to_file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        _file_handler = _jsonl_handler(log_dir / LOG_FILENAME)
        handlers.append(_file_handler)

    root_level = logging.DEBUG if (verbosity > 0 or log_to_file) else logging.WARNING
    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    # EpollSelector chatter at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structured logger, configuring defaults on first use.

    Args:
        name: Logger name (typically __name__).
    """
    if not _configured:
        configure_logging()

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


def close_file_logging() -> None:
    """Flush and close the JSONL handler, if one is open."""
    global _file_handler
    if _file_handler is not None:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
