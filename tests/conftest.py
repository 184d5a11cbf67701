"""Shared pytest fixtures and configuration for the consolectl test suite.

Guidelines
----------
* No internet access in any test.
* The console service is mocked at the directory boundary.
* Core tests use the in-memory store — no filesystem.
* Tests must not depend on the user's real config file or environment.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from consolectl.settings import get_settings


class MemoryConfigStore:
    """Dict-backed :class:`ConfigStore` with dot-delimited keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = data or {}

    def get(self, key: str) -> Any:
        node: Any = self.data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node = self.data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def delete(self, key: str) -> None:
        *parents, leaf = key.split(".")
        node: Any = self.data
        for part in parents:
            node = node.get(part, {}) if isinstance(node, dict) else {}
        if isinstance(node, dict):
            node.pop(leaf, None)


@pytest.fixture
def memory_store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    return tmp_path / "consolectl" / "config.json"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> Iterator[None]:
    """Point settings at a temporary config file and drop ambient overrides."""
    for name in ("ACCESS_TOKEN", "ENV", "API_KEY", "BASE_URL", "LOG_LEVEL"):
        monkeypatch.delenv(f"CONSOLECTL_{name}", raising=False)
    monkeypatch.setenv("CONSOLECTL_CONFIG_FILE", str(config_file))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
