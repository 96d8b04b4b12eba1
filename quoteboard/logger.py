"""
Logger factory.

The terminal belongs to the dashboard while it runs, so records go to a file
(QUOTEBOARD_LOG_FILE, default ~/.quoteboard.log). Console output is opt-in.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import LOG_FILE, LOG_LEVEL

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "quoteboard", *, file_path: Optional[str | Path] = None,
               console: bool = False) -> logging.Logger:
    """
    Create/reuse a namespaced logger.
    Idempotent: only the root "quoteboard" logger gets handlers, children propagate.
    """
    root = logging.getLogger("quoteboard")
    if not getattr(root, "_qb_configured", False):
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        path = file_path or LOG_FILE
        if path:
            try:
                p = Path(path)
                p.parent.mkdir(parents=True, exist_ok=True)
                fh = logging.FileHandler(p, encoding="utf-8")
                fh.setFormatter(logging.Formatter(_FILE_FORMAT))
                root.addHandler(fh)
            except OSError:
                # unwritable log location must not stop the dashboard
                root.addHandler(logging.NullHandler())
        if console:
            ch = logging.StreamHandler()
            ch.setFormatter(logging.Formatter("[%(levelname).1s] %(message)s"))
            root.addHandler(ch)
        root._qb_configured = True  # type: ignore[attr-defined]

    if name == "quoteboard" or name.startswith("quoteboard."):
        return logging.getLogger(name)
    return logging.getLogger(f"quoteboard.{name}")
