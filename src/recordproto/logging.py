"""Logging setup for recordproto.

All recordproto components log under the ``recordproto`` namespace. The
library never installs handlers on import; applications opt in through
configure_logging().

Example:
    >>> import logging
    >>> from recordproto.logging import configure_logging, get_logger
    >>> configure_logging(level=logging.DEBUG)
    >>> logger = get_logger("registry")
    >>> logger.debug("Registry populated")
"""

from __future__ import annotations

import logging

ROOT_LOGGER = "recordproto"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str = "") -> logging.Logger:
    """Get a logger for a recordproto component.

    Args:
        name: Component name (e.g. 'registry', 'codec'). If empty, returns the
            root recordproto logger.

    Returns:
        Logger instance for the component
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)


def configure_logging(
    level: int = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Attach a handler to the recordproto root logger.

    Calling this more than once only updates the level; a second handler is
    never added.

    Args:
        level: Logging level (e.g. logging.DEBUG)
        format_string: Format string for log records
        handler: Optional custom handler, defaults to a StreamHandler

    Returns:
        The configured root logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    configured = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
    if not configured:
        if handler is None:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)
        configured = [handler]

    for existing in configured:
        existing.setLevel(level)

    return logger
