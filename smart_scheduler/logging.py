from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

_INITIALIZED = False


def configure_logging(level: str = "INFO", *, log_path: Path | None = None) -> None:
    """Configure root logging once: console always, rotating file when asked."""

    global _INITIALIZED
    if _INITIALIZED:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(str(log_path), maxBytes=1_000_000, backupCount=5)
        )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging configured at %s", level)


__all__ = ["configure_logging"]
