"""Parse ``cleartool ls -long`` output into directory trees."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .path import RootPath

# Attribute tokens, then the element name ending at the "@@" version marker.
LS_LINE = re.compile(r"((?:\S+\s)+)\s+(\S+)@@\S*")

RESERVED_NAMES = frozenset({"lost+found"})


class EntryKind(str, Enum):
    """Kind of listing entry: ``DIRECTORY`` or ``FILE``."""
    DIRECTORY = "directory"
    FILE = "file"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory in a listing.  Its contents are listed on demand."""
    name: str
    path: RootPath
    kind: EntryKind = field(default=EntryKind.DIRECTORY, init=False)


@dataclass(frozen=True)
class FileEntry:
    """A file in a listing."""
    name: str
    path: RootPath
    kind: EntryKind = field(default=EntryKind.FILE, init=False)


Entry = Union[DirectoryEntry, FileEntry]


@dataclass
class DirectoryTree:
    """One listed directory: its subdirectories and files in listing order.

    Attributes:
        name: Last component of *path* (``""`` for the top level).
        path: Where the listing was taken.
        subdirectories: Child directories.
        files: Child files.
    """
    name: str
    path: RootPath
    subdirectories: list[DirectoryEntry] = field(default_factory=list)
    files: list[FileEntry] = field(default_factory=list)

    @property
    def entries(self) -> list[Entry]:
        """Subdirectories followed by files."""
        return [*self.subdirectories, *self.files]


def parse_line(line: str, root: str) -> Entry | None:
    """Parse one listing line taken inside *root*.

    Returns ``None`` for lines that are not element entries.  Attribute
    text containing ``"directory"`` marks a directory; anything else is a
    file.
    """
    match = LS_LINE.search(line)
    if match is None:
        return None
    attributes, token = match.groups()
    path = RootPath.under(root, token)
    if not path.relative:
        return None
    if "directory" in attributes:
        return DirectoryEntry(path.name, path)
    return FileEntry(path.name, path)


def build_tree(path: RootPath, lines: Iterable[str]) -> DirectoryTree:
    """Build the tree for *path* from its ``ls -long`` output *lines*.

    Unparseable lines and reserved names such as ``lost+found`` are skipped.
    """
    tree = DirectoryTree(path.name, path)
    for line in lines:
        entry = parse_line(line, path.root)
        if entry is None or entry.name in RESERVED_NAMES:
            continue
        if entry.kind is EntryKind.DIRECTORY:
            tree.subdirectories.append(entry)
        else:
            tree.files.append(entry)
    return tree


def top_level_tree(roots: Iterable[str]) -> DirectoryTree:
    """The synthetic tree above all roots: one empty directory per root."""
    tree = DirectoryTree("", RootPath())
    tree.subdirectories.extend(DirectoryEntry(root, RootPath(root)) for root in roots)
    return tree
