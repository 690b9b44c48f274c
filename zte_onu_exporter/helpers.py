"""Logging helpers for per-port and per-ONU messages."""
import logging


def onu_context(board_id: int, pon_id: int, onu_id: int | None = None) -> str:
    """Build the log context of one board/PON cell, or of one ONU on it."""
    context = f"board {board_id} PON {pon_id}"
    if onu_id is not None:
        context = f"{context} ONU {onu_id}"
    return context


def _fields(kwargs: dict) -> str:
    return " ".join(f"{k}={v}" for k, v in kwargs.items())


def log_debug(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log debug."""
    logger.debug("%s: %s %s", context, message, _fields(kwargs))


def log_info(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log info."""
    logger.info("%s: %s %s", context, message, _fields(kwargs))


def log_warning(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log warning."""
    logger.warning("%s: %s %s", context, message, _fields(kwargs))
