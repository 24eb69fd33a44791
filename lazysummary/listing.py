"""Immediate-children directory listing for the file pane."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PARENT_ENTRY_NAME = ".."
HIDDEN_PREFIX = "."
SKIPPED_DIRECTORY_NAMES = frozenset({"node_modules", "vendor", "target", "build", "dist", ".git"})


@dataclass(frozen=True)
class Entry:
    """One directory child as shown in the file pane.

    ``path`` is the name relative to the listed directory; ``".."`` marks
    the synthetic parent-navigation row.
    """

    path: str
    extension: str = ""
    is_directory: bool = False

    @property
    def is_parent(self) -> bool:
        return self.path == PARENT_ENTRY_NAME


PARENT_ENTRY = Entry(path=PARENT_ENTRY_NAME, extension="", is_directory=True)


def extension_of(name: str) -> str:
    """Lower-cased suffix including the dot, empty when there is none."""
    return Path(name).suffix.lower()


def _same_directory(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a.absolute() == b.absolute()


def list_directory(directory: Path, root: Path) -> list[Entry]:
    """List visible children of ``directory``.

    Hidden names and well-known build/vendor directories are skipped. Every
    other child is listed, summarizable or not. Unless ``directory`` is the
    browse root the result starts with the ``..`` entry. Raises ``OSError``
    when the directory itself cannot be read.
    """
    children: list[Entry] = []
    with os.scandir(directory) as entries:
        for child in entries:
            name = child.name
            if name.startswith(HIDDEN_PREFIX):
                continue
            try:
                is_dir = child.is_dir()
            except OSError:
                is_dir = False
            if is_dir and name in SKIPPED_DIRECTORY_NAMES:
                continue
            children.append(
                Entry(
                    path=name,
                    extension=extension_of(name),
                    is_directory=is_dir,
                )
            )

    children.sort(key=lambda item: (not item.is_directory, item.path.lower()))
    if not _same_directory(directory, root):
        children.insert(0, PARENT_ENTRY)
    return children


__all__ = [
    "Entry",
    "HIDDEN_PREFIX",
    "PARENT_ENTRY",
    "PARENT_ENTRY_NAME",
    "SKIPPED_DIRECTORY_NAMES",
    "extension_of",
    "list_directory",
]
