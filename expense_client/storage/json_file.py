"""JSON state file helpers shared by the local store and the cookie store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Load a JSON object from ``path``.

    Args:
        path: File to read.

    Returns:
        The decoded object, or an empty dict when the file is missing,
        unreadable, or does not hold a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logging.warning(f"⚠️ Ignoring unreadable state file {path}: {type(e).__name__}")
        return {}
    if not isinstance(data, dict):
        logging.warning(f"⚠️ Ignoring state file {path}: expected a JSON object")
        return {}
    return data


def atomic_write_json(path: str | os.PathLike[str], data: dict[str, Any]) -> None:
    """Write ``data`` to ``path`` atomically with owner-only permissions.

    Args:
        path: Destination file.
        data: JSON-serializable object.

    Raises:
        OSError: If the directory cannot be created or the file written.
        TypeError: If ``data`` is not JSON-serializable.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp:
            temp_path = tmp.name
            json.dump(data, tmp, indent=2, sort_keys=True)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(temp_path, 0o600)
        os.replace(temp_path, target)
    except (OSError, ValueError, TypeError) as e:
        if temp_path and os.path.exists(temp_path):
            try:
                os.unlink(temp_path)
            except OSError:
                pass
        logging.error(f"💥 Atomic state save failed: {type(e).__name__} path={target}")
        raise
