"""Logging setup. Modules log through ``logging.getLogger(__name__)``."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_HANDLER_FLAG = "_shuttle_handler"


def setup_logging(level: int | str = "INFO", rich: bool = True) -> logging.Logger:
    """Attach one handler to the ``shuttle`` logger. Calling again only updates the level."""
    logger = logging.getLogger("shuttle")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if any(getattr(h, _HANDLER_FLAG, False) for h in logger.handlers):
        return logger

    if rich:
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    setattr(handler, _HANDLER_FLAG, True)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
