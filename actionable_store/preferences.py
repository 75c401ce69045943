"""
Analysis preference flag: use the backend API (True) or on-device analysis (False).

A single boolean persisted in a small JSON file. It shares the storage
boundary with the actionable store but never touches it.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from actionable_store.config import get_settings
from actionable_store.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_USE_BACKEND_API = False


class _PreferencesFile(BaseModel):
    use_backend_api: bool = DEFAULT_USE_BACKEND_API

    model_config = {"extra": "ignore"}


class AnalysisPreferences:
    """Read/write access to the `use_backend_api` flag."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else get_settings().preferences_path

    def _load(self) -> _PreferencesFile:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return _PreferencesFile()
        except OSError as exc:
            log.warning(
                "Preferences file could not be read, using defaults",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return _PreferencesFile()
        try:
            return _PreferencesFile.model_validate_json(raw)
        except ValidationError as exc:
            log.warning(
                "Unreadable preferences file, using defaults",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return _PreferencesFile()

    def get(self) -> bool:
        return self._load().use_backend_api

    def set(self, value: bool) -> None:
        prefs = self._load().model_copy(update={"use_backend_api": bool(value)})
        self._write(prefs)
        log.info("Analysis preference updated", extra={"use_backend_api": bool(value)})

    def _write(self, prefs: _PreferencesFile) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".prefs-", dir=self.path.parent)
        tmp_path: Optional[Path] = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(prefs.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)


__all__ = ["AnalysisPreferences", "DEFAULT_USE_BACKEND_API"]
