"""Config/state directories and JSON persistence."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from connroute.core.errors import StorageError

logger = logging.getLogger(__name__)

APP_NAME = "connroute"


def _xdg_dir(env_var: str, fallback: str) -> Path:
    raw = (os.environ.get(env_var) or "").strip()
    base = Path(raw) if raw else Path.home() / fallback
    return base / APP_NAME


def get_config_dir() -> Path:
    override = (os.environ.get("CONNROUTE_CONFIG_DIR") or "").strip()
    if override:
        return Path(override)
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    return _xdg_dir("XDG_STATE_HOME", ".local/state")


def get_logs_dir() -> Path:
    return get_state_dir() / "logs"


def ensure_dirs() -> None:
    for path in (get_config_dir(), get_logs_dir()):
        path.mkdir(parents=True, exist_ok=True)


def load_json(path: Path, default: Any) -> Any:
    """Return the decoded contents of ``path``, or ``default`` if it is missing."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return default
    except OSError as exc:
        raise StorageError(
            f"Failed to read {path}: {exc}",
            user_message=f"Could not read {path}.",
        ) from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageError(
            f"Invalid JSON in {path}: {exc}",
            user_message=f"{path} is not valid JSON (line {exc.lineno}).",
        ) from exc


def save_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Write to a sibling temp file first so readers never see a partial file.
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)
            handle.write("\n")
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(
            f"Failed to write {path}: {exc}",
            user_message=f"Could not write {path}.",
        ) from exc
    logger.debug("Saved %s", path)
