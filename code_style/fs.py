"""Filesystem collaborator used by folder-convention checks."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """An immediate child of a directory."""

    name: str
    is_dir: bool
    is_file: bool


class FileSystem(Protocol):
    def list_children(self, path: Path) -> list[DirectoryEntry]: ...


class LocalFileSystem:
    """Lists directory children from disk.

    Missing or unreadable directories produce an empty listing, which
    folder checks treat as "no opinion".
    """

    def list_children(self, path: Path) -> list[DirectoryEntry]:
        try:
            with os.scandir(path) as entries:
                return sorted(
                    (
                        DirectoryEntry(
                            name=entry.name,
                            is_dir=entry.is_dir(),
                            is_file=entry.is_file(),
                        )
                        for entry in entries
                    ),
                    key=lambda e: e.name,
                )
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return []
