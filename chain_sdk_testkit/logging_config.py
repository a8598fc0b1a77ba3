"""Logging setup for test runs against the mock gateway.

Mock server and client records carry a ``context`` dict (path, status,
rejected params) that ``ContextFormatter`` renders after the message, so a
failing test's log shows why the gateway answered the way it did.
"""

import logging
import sys
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Set on handlers installed here so repeated setup replaces instead of stacking
_TESTKIT_HANDLER = "_testkit_handler"


class ContextFormatter(logging.Formatter):
    """Append a record's ``context`` as ``[key=value ...]``."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{base} [{pairs}]"


def _install(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    setattr(handler, _TESTKIT_HANDLER, True)
    root.addHandler(handler)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    format_str: str | None = None,
) -> None:
    """Send test kit logs to stdout and, optionally, a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Extra file destination.
        format_str: Record format; ``DEFAULT_FORMAT`` if None.
    """
    formatter = ContextFormatter(format_str or DEFAULT_FORMAT)
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    for handler in list(root.handlers):
        if getattr(handler, _TESTKIT_HANDLER, False):
            root.removeHandler(handler)
            handler.close()

    _install(root, logging.StreamHandler(sys.stdout), formatter)
    if log_file:
        _install(root, logging.FileHandler(log_file), formatter)

    # requests' connection pool logs every mock server round trip at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def setup_logging_from_config() -> None:
    """Configure logging from the ``logging`` section of the global config."""
    from chain_sdk_testkit.config_manager import get_config_manager

    manager = get_config_manager()
    setup_logging(
        level=manager.get("logging", "level") or "INFO",
        log_file=manager.get("logging", "file"),
        format_str=manager.get("logging", "format"),
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Log message, attaching context for ``ContextFormatter`` when given."""
    extra = {"context": context} if context else None
    logger.log(level, message, extra=extra)
