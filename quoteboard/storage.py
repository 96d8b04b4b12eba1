"""Persistence of the tracked code list"""
import json
import logging

from .config import DB_PATH
from .errors import StorageError

log = logging.getLogger(__name__)


def load_codes(path=DB_PATH):
    """Read the persisted code list.

    A missing, unreadable or corrupt file means "no stocks". Entries without a
    string ``code`` are skipped.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable stock file %s: %s", path, e)
        return []

    if not isinstance(data, dict) or not isinstance(data.get("stocks"), list):
        log.warning("Ignoring stock file %s: no 'stocks' list", path)
        return []

    codes = []
    for entry in data["stocks"]:
        if isinstance(entry, dict) and isinstance(entry.get("code"), str):
            codes.append(entry["code"])
    return codes


def save_codes(codes, path=DB_PATH):
    """Write the code list in display order. Raises StorageError."""
    payload = {"stocks": [{"code": code} for code in codes]}
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f)
    except OSError as e:
        raise StorageError(f"Cannot save {path}: {e}") from e
