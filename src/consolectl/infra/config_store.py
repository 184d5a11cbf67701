"""JSON-file backed implementation of :class:`~consolectl.core.protocols.ConfigStore`.

The whole file is loaded on construction and rewritten on every
mutation.  Writes go through a temporary file in the same directory
followed by :func:`os.replace`, so a crash never leaves a half-written
config behind.  Concurrent invocations are not coordinated: the last
writer wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from consolectl.exceptions import ConfigError


class JsonConfigStore:
    """Concrete :class:`ConfigStore` persisting nested dicts as JSON.

    Keys are dot-delimited paths into the nested mapping::

        store = JsonConfigStore(Path("~/.config/consolectl/config.json"))
        store.set("console.org", {"id": "1", "code": "ABC", "name": "Org"})
        store.get("console.org.name")  # "Org"

    This class satisfies the :class:`~consolectl.core.protocols.ConfigStore`
    protocol structurally, without explicit inheritance.
    """

    def __init__(self, path: Path) -> None:
        self._path: Path = Path(path).expanduser()
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def get(self, key: str) -> Any:
        node: Any = self._data
        for part in self._split(key):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = self._split(key)
        node = self._data
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value
        self._save()

    def delete(self, key: str) -> None:
        *parents, leaf = self._split(key)
        node: Any = self._data
        for part in parents:
            node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict) or leaf not in node:
            return
        del node[leaf]
        self._save()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @staticmethod
    def _split(key: str) -> list[str]:
        parts = [part for part in key.split(".") if part]
        if not parts:
            raise ConfigError(f"Invalid config key: {key!r}")
        return parts

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"Config file {self._path} is not valid JSON: {exc}",
                hint="Fix or delete the file and select your org again.",
            ) from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {self._path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {self._path} must contain a JSON object.")
        return raw

    def _save(self) -> None:
        logger.debug("Writing config to {}", self._path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(self._data, handle, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ConfigError(f"Cannot write config file {self._path}: {exc}") from exc
