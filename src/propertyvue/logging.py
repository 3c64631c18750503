"""structlog setup shared by every store.

Several browser sessions can write the same favorites slot, so each process
binds a session id that is attached to every event it logs.
"""

import logging
import sys
import uuid

import structlog


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, json_output: bool = False, level: int | str = logging.INFO) -> None:
    """Route structlog events to stderr.

    Args:
        json_output: One JSON object per line instead of the console renderer.
        level: Minimum level, as an int or a name such as "debug".
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def bind_session(session_id: str | None = None, **context: object) -> str:
    """Tag subsequent events from this context with a session id.

    Returns:
        The bound session id, generated when not given.
    """
    session_id = session_id or uuid.uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(session_id=session_id, **context)
    return session_id


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
