from __future__ import annotations

import os
from pathlib import Path

from ..core.domain.models import FileInventory


VCS_MARKER = ".git"
OPAQUE_DIRS = frozenset({VCS_MARKER, "node_modules"})


class DirectoryWalker:
    """Builds a nested file inventory of the project root.

    Directories map to dicts, files to None. Directories listed in
    ``opaque_dirs`` are recorded as empty dicts without being descended into.
    Symlinked directories are recorded as files.
    """

    def __init__(self, *, opaque_dirs: frozenset[str] = OPAQUE_DIRS) -> None:
        self._opaque_dirs = opaque_dirs

    def walk(self, root: Path) -> tuple[FileInventory, bool]:
        inventory = self._walk_dir(root)
        return inventory, is_tracked(inventory)

    def _walk_dir(self, path: Path) -> FileInventory:
        tree: FileInventory = {}
        try:
            entries = sorted(os.scandir(path), key=lambda e: e.name)
        except (PermissionError, FileNotFoundError):
            return tree
        for entry in entries:
            name = display_name(entry.name)
            if entry.is_dir(follow_symlinks=False):
                if entry.name in self._opaque_dirs:
                    tree[name] = {}
                else:
                    tree[name] = self._walk_dir(Path(entry.path))
            else:
                tree[name] = None
        return tree


def is_tracked(inventory: FileInventory) -> bool:
    """True if the root of the inventory holds a .git entry (dir or worktree file)."""
    return VCS_MARKER in inventory


def display_name(name: str) -> str:
    """File name as valid UTF-8 text; undecodable bytes become U+FFFD."""
    return os.fsencode(name).decode("utf-8", errors="replace")
