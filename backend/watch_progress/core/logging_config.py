from __future__ import annotations

import logging

_NOISY_LOGGERS: tuple[str, ...] = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "uvicorn.access",
    "httpx",
    "hypothesis",
)


def _ensure_stream_handler(logger: logging.Logger) -> None:
    handler_exists = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    if handler_exists:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
    logger.addHandler(handler)


def configure_logging(level_name: str | None = None) -> None:
    """Configure the root logger and quiet noisy third-party loggers.

    Playback events are logged per event at DEBUG, so remote players sending
    a tick every second only show up when DEBUG is requested.
    """

    try:
        lvl = getattr(logging, (level_name or 'INFO').upper(), logging.INFO)
    except Exception:
        lvl = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    _ensure_stream_handler(root_logger)

    for noisy_name in _NOISY_LOGGERS:
        logger = logging.getLogger(noisy_name)
        if logger.level < logging.WARNING:
            logger.setLevel(logging.WARNING)
