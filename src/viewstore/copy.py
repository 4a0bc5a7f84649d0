"""Copy a materialized part of the view out to a destination directory."""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class CopyReport:
    """Result of copying view content to a destination.

    Attributes:
        source: Local directory (or file) that was copied.
        destination: Directory the content was copied into.
        files: Copied paths relative to *destination*, forward slashes, sorted.
    """
    source: str
    destination: str
    files: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.files)


def _walk_local_paths(base: Path, *, skip: Path | None = None) -> set[str]:
    """Return the relative paths of all files under *base*.

    Symlinked directories are recorded as entries, not descended into.
    Anything under *skip* is left out.
    """
    result: set[str] = set()
    for dirpath, dirnames, filenames in os.walk(base):
        dp = Path(dirpath)
        if skip is not None:
            dirnames[:] = [d for d in dirnames if (dp / d).resolve() != skip]
        for fname in filenames:
            result.add(str((dp / fname).relative_to(base)).replace(os.sep, "/"))
        symlinked = [d for d in dirnames if (dp / d).is_symlink()]
        for dname in symlinked:
            result.add(str((dp / dname).relative_to(base)).replace(os.sep, "/"))
            dirnames.remove(dname)
    return result


def _clear(out: Path) -> None:
    """Remove whatever is at *out*, including read-only loaded files."""
    if out.is_dir() and not out.is_symlink():
        shutil.rmtree(out)
    elif out.exists() or out.is_symlink():
        if not out.is_symlink():
            os.chmod(out, out.stat().st_mode | stat.S_IWRITE)
        out.unlink()


def _same_entry(a: Path, b: Path) -> bool:
    """True when *a* and *b* name the same directory entry (last link not followed)."""
    return (Path(os.path.realpath(a.parent)) / a.name) == (Path(os.path.realpath(b.parent)) / b.name)


def _copy_one(src: Path, out: Path) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    if _same_entry(src, out):
        return
    _clear(out)
    if src.is_symlink():
        out.symlink_to(os.readlink(src))
    else:
        shutil.copy2(src, out)


def copy_local(source: str | os.PathLike[str], destination: str | os.PathLike[str]) -> CopyReport:
    """Copy *source* into *destination*, creating it if needed.

    A directory source has its contents copied (existing files in
    *destination* are overwritten, others are left alone); a file source is
    copied into *destination* under its own name.  Files that are already the
    copy target (a destination that is the source itself) are left as they are.

    Raises:
        FileNotFoundError: If *source* does not exist.
    """
    src = Path(source)
    dest = Path(destination)
    dest.mkdir(parents=True, exist_ok=True)
    report = CopyReport(str(src), str(dest))

    if src.is_file():
        _copy_one(src, dest / src.name)
        report.files.append(src.name)
        return report
    if not src.is_dir():
        raise FileNotFoundError(f"Nothing to copy at {src}")

    for rel in sorted(_walk_local_paths(src, skip=dest.resolve())):
        _copy_one(src / rel, dest / rel)
        report.files.append(rel)
    return report
