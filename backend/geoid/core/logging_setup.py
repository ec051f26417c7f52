"""Root logger configuration.

Modules log through ``logging.getLogger(__name__)``; the application
factory calls :func:`setup_logging` once so those records reach stdout
either as JSON lines or as plain text.
"""

from __future__ import annotations

import json
import logging
import sys
import time


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter.

    Emits ``{"t": <epoch ms>, "lvl": "INFO", "name": "mod", "msg": "text"}``
    and adds ``exc_info`` when the record carries an exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure the root logger once.

    Repeated calls are no-ops so tests and the app factory can both call it.
    Handlers installed by others (test log capture, uvicorn) are left alone.

    Args:
        level: Level name (DEBUG/INFO/WARNING/ERROR); unknown names fall
            back to INFO.
        json_format: Use :class:`JsonFormatter` when True, plain text
            otherwise.
    """
    root = logging.getLogger()
    if getattr(root, "_geoid_configured", False):
        return

    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root.addHandler(handler)
    root.setLevel(lvl)
    root._geoid_configured = True  # type: ignore[attr-defined]
