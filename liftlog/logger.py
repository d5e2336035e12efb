"""Lightweight logging helpers shared by the API, billing handlers and scripts."""

from __future__ import annotations

import logging
from typing import Any, Optional

_LOGGER = logging.getLogger("liftlog")


def _coerce(parts: tuple[object, ...]) -> str:
    rendered = " ".join(str(part) for part in parts if part is not None)
    return rendered.strip()


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler and apply the configured level to the ``liftlog`` tree."""

    if level is None:
        from .config import CONFIG

        level = getattr(CONFIG, "log_level", "INFO")
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=resolved,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    _LOGGER.setLevel(resolved)


def log(*parts: object, **metadata: Any) -> None:
    """
    Emit an info-level log message.

    Keyword arguments are appended to the message so call sites can attach
    identifiers such as ``user_id`` or ``event_type`` without formatting them.
    """

    message = _coerce(parts)
    if metadata:
        message = f"{message} | {metadata}"

    if not _LOGGER.handlers:
        logging.basicConfig(level=logging.INFO)

    _LOGGER.info(message)


__all__ = ["configure_logging", "log"]
