"""
Structured logging for the inbox CRM.

structlog is configured once, on import, from Config (LOG_LEVEL, LOG_JSON):
console output for development, JSON lines for deployed services. Entries
logged inside `logging_context` carry the analysis trace id and the id of
the email being worked on.
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .config import config

_trace_id: ContextVar[str | None] = ContextVar('trace_id', default=None)
_email_id: ContextVar[str | None] = ContextVar('email_id', default=None)


def get_trace_id() -> str | None:
    return _trace_id.get()


def get_email_id() -> str | None:
    return _email_id.get()


def add_context_info(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Processor merging trace_id and email_id; an explicit email_id wins."""
    trace_id = _trace_id.get()
    if trace_id is not None:
        event_dict['trace_id'] = trace_id
    email_id = _email_id.get()
    if email_id is not None:
        event_dict.setdefault('email_id', email_id)
    return event_dict


def _renderers(json_output: bool) -> list[Processor]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(
    json_output: bool | None = None,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_output: JSON lines instead of console output (defaults to config.LOG_JSON)
        log_level: Minimum level name (defaults to config.LOG_LEVEL)
    """
    if json_output is None:
        json_output = config.LOG_JSON
    level = getattr(logging, (log_level or config.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(format='%(message)s', stream=sys.stdout, level=level)
    structlog.configure(
        processors=[
            add_context_info,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            *_renderers(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Module-level logger: `logger = get_logger(__name__)`."""
    return structlog.get_logger(name)


@contextmanager
def logging_context(
    trace_id: str | None = None,
    email_id: str | None = None,
) -> Iterator[None]:
    """
    Tag every entry logged inside the block.

    Usage:
        with logging_context(trace_id=uuid7().hex, email_id='e1'):
            logger.info('deal_analysis.complete')
    """
    tokens = []
    if trace_id is not None:
        tokens.append((_trace_id, _trace_id.set(trace_id)))
    if email_id is not None:
        tokens.append((_email_id, _email_id.set(email_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class PipelineTimer:
    """Wall-clock durations of named stages, in milliseconds."""

    def __init__(self):
        self._started = time.perf_counter()
        self.stages: dict[str, float] = {}

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.stages[name] = (time.perf_counter() - start) * 1000

    def summary(self) -> dict[str, Any]:
        total_ms = (time.perf_counter() - self._started) * 1000
        return {
            'total_ms': round(total_ms, 2),
            'stages': {name: round(ms, 2) for name, ms in self.stages.items()},
        }


configure_logging()
