"""Filesystem implementation of :class:`~consolectl.core.protocols.BundleSink`."""

from __future__ import annotations

from pathlib import Path

from consolectl.exceptions import FilesystemError


class FileBundleSink:
    """Write bundles to the local filesystem, overwriting existing files.

    The destination directory must already exist.
    """

    def write(self, path: Path, content: str) -> Path:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(str(exc)) from exc
        return path
