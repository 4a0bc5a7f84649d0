"""Root-qualified paths: ``root`` or ``root\\relative\\path``."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

SEP = "\\"
"""Separator used in caller-facing path strings."""

_SPLIT = re.compile(r"[\\/]+")


def _segments(path: str | None) -> list[str]:
    """Split on either separator, dropping empty and ``.`` components."""
    if not path:
        return []
    return [seg for seg in _SPLIT.split(path) if seg and seg != "."]


@dataclass(frozen=True)
class RootPath:
    """A repository root plus a path inside it.

    ``RootPath("", "")`` is the top level, above every root.
    """

    root: str = ""
    relative: str = ""

    @classmethod
    def parse(cls, path: str | None) -> RootPath:
        """Parse a caller path string.

        The first component is the root, the rest is the relative path.
        Leading and repeated separators are ignored; ``None`` and ``""``
        give the top level.
        """
        segments = _segments(path)
        if not segments:
            return cls()
        return cls(segments[0], SEP.join(segments[1:]))

    @classmethod
    def under(cls, root: str, relative: str | None) -> RootPath:
        """Build a path for *relative* inside *root*, normalizing separators."""
        return cls(root, SEP.join(_segments(relative)))

    def __str__(self) -> str:
        if not self.relative:
            return self.root
        return f"{self.root}{SEP}{self.relative}"

    @property
    def parts(self) -> list[str]:
        """Components of the relative path."""
        return _segments(self.relative)

    @property
    def name(self) -> str:
        """Final component (the root itself when there is no relative path)."""
        parts = self.parts
        return parts[-1] if parts else self.root

    @property
    def is_top_level(self) -> bool:
        return not self.root

    @property
    def is_root(self) -> bool:
        """True for a bare root with no relative path."""
        return bool(self.root) and not self.relative

    def tool_path(self) -> str:
        """Relative path as a native argument for the tool (``.`` if empty)."""
        parts = self.parts
        return os.path.join(*parts) if parts else "."

    def local_path(self, view_path: str | os.PathLike[str]) -> str:
        """Location of this path inside the local view at *view_path*."""
        if self.is_top_level:
            return os.fspath(view_path)
        return os.path.join(view_path, self.root, *self.parts)
