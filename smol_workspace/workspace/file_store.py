from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from smol_workspace.constants import IGNORED_DIRS
from smol_workspace.infra.errors import (
    AccessDeniedError,
    FileNotFoundInStoreError,
    FileStoreError,
)

logger = structlog.get_logger()


class FileStore(ABC):
    """Restricted file namespace used by the file tools.

    Paths are relative to the store root. No transactional guarantees.
    """

    @abstractmethod
    def list(self) -> list[str]:
        """Return the paths visible in the store."""
        ...

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the full text of path. Raises FileNotFoundInStoreError."""
        ...

    @abstractmethod
    def write(self, path: str, text: str) -> None:
        """Write text to path, replacing any existing content."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove path. Raises FileNotFoundInStoreError."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...


class LocalFileStore(FileStore):
    """FileStore over a directory tree with path safety enforcement.

    Every path is resolved against the root (following symlinks) and must stay
    inside it. Text is UTF-8 throughout.
    """

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    @staticmethod
    def _check_relative(raw_path: str) -> None:
        if not raw_path:
            raise AccessDeniedError("Empty path is not allowed.")
        if Path(raw_path).is_absolute():
            raise AccessDeniedError(
                "Absolute paths are not allowed. Use a relative path within the workspace."
            )

    def _resolve(self, raw_path: str) -> Path:
        self._check_relative(raw_path)
        target = (self._root / raw_path).resolve()
        # is_relative_to also rejects prefix collisions (/ws vs /ws-evil)
        if target != self._root and not target.is_relative_to(self._root):
            logger.warning("path_escape_blocked", path=raw_path, resolved=str(target))
            raise AccessDeniedError("Path escapes workspace boundary.")
        return target

    def list(self) -> list[str]:
        paths: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
            base = Path(dirpath).relative_to(self._root)
            paths.extend((base / name).as_posix() for name in filenames)
        return sorted(paths)

    def read(self, path: str) -> str:
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundInStoreError(path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileStoreError(f"Failed to read file {path}: {e}") from e

    def write(self, path: str, text: str) -> None:
        target = self._resolve(path)
        if target.is_dir():
            raise FileStoreError(f"Path is a directory: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as e:
            raise FileStoreError(f"Failed to write file {path}: {e}") from e

    def _entry(self, raw_path: str) -> Path:
        """Path as given with only its parent resolved.

        A symlink names the link itself, not its target.
        """
        self._check_relative(raw_path)
        lexical = Path(raw_path)
        if lexical.name in ("", ".", ".."):
            return self._resolve(raw_path)
        entry = (self._root / lexical.parent).resolve() / lexical.name
        if not entry.is_relative_to(self._root):
            logger.warning("path_escape_blocked", path=raw_path, resolved=str(entry))
            raise AccessDeniedError("Path escapes workspace boundary.")
        return entry

    def delete(self, path: str) -> None:
        target = self._entry(path)
        if not (target.is_symlink() or target.is_file()):
            raise FileNotFoundInStoreError(path)
        try:
            target.unlink()
        except OSError as e:
            raise FileStoreError(f"Failed to delete file {path}: {e}") from e

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()


class StaticListingFileStore(FileStore):
    """Wrap a store so list() returns a fixed catalog regardless of writes."""

    def __init__(self, inner: FileStore, catalog: list[str]) -> None:
        self._inner = inner
        self._catalog = list(catalog)

    def list(self) -> list[str]:
        return list(self._catalog)

    def read(self, path: str) -> str:
        return self._inner.read(path)

    def write(self, path: str, text: str) -> None:
        self._inner.write(path, text)

    def delete(self, path: str) -> None:
        self._inner.delete(path)

    def exists(self, path: str) -> bool:
        return self._inner.exists(path)
