"""
JSON file configuration store
Flat key/value settings used when running outside an editor
"""
import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ...log import logger


class JsonConfigStore:
    """Configuration store backed by a JSON object on disk"""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._values: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    async def update(self, key: str, value: Any) -> None:
        """Set a key and write the file; None removes the key"""
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value
        await asyncio.to_thread(self._save)
        logger.debug(f"[MarkdownExport] Setting {key} saved to {self._path}")

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"[MarkdownExport] Ignoring unreadable settings {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"[MarkdownExport] Ignoring settings {self._path}: not a JSON object")
            return {}
        return data

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
