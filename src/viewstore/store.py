"""ViewStore: a ClearCase snapshot view as a path-addressable tree."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from .config import ViewSettings
from .configspec import ConfigSpec, apply_config_spec
from .copy import CopyReport, copy_local
from .exceptions import ConfigurationError, NotAvailableError, ToolError, ViewStoreError
from .listing import DirectoryTree, build_tree, top_level_tree
from .path import RootPath
from .tool import CommandEvent, ToolRunner

logger = logging.getLogger(__name__)


class ViewStore:
    """Browse, fetch and label the roots (VOBs) loaded into a snapshot view.

    Every operation rewrites the view's config spec, so one instance must
    own the view.  Operations on an instance are serialized by a lock.

    *on_command* is handed to the :class:`ToolRunner` built from
    *settings*; pass it to your own *runner* instead when supplying one.
    """

    def __init__(self, settings: ViewSettings, *, runner: ToolRunner | None = None,
                 on_command: Callable[[CommandEvent], None] | None = None):
        if runner is not None and on_command is not None:
            raise TypeError("on_command cannot be combined with runner; pass it to the runner")
        self.settings = settings
        if runner is None:
            runner = ToolRunner(
                settings.tool_path, settings.view_path,
                on_command=on_command, timeout=settings.timeout,
            )
        self._runner = runner
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"ViewStore({self.settings.view_path!r})"

    @classmethod
    def open(
        cls,
        tool_path: str,
        view_path: str,
        branch: str | None = None,
        *,
        on_command: Callable[[CommandEvent], None] | None = None,
        timeout: float | None = None,
    ) -> ViewStore:
        """Create a store for the snapshot view at *view_path*.

        Args:
            tool_path: Full path to ``cleartool``.
            view_path: Existing snapshot view directory.
            branch: Branch for fetches; ``None`` means ``main``.
            on_command: Called before every tool command (audit hook).
            timeout: Seconds before a tool command is killed.
        """
        settings = ViewSettings(tool_path, view_path, branch or None, timeout)
        return cls(settings, on_command=on_command)

    @property
    def view_path(self) -> str:
        return self.settings.view_path

    @property
    def branch(self) -> str | None:
        return self.settings.branch

    # --- Internals ---

    def _require_settings(self) -> None:
        """Reject a missing tool or view path before anything is run."""
        if not self.settings.tool_path:
            raise ConfigurationError("Executable path is required.")
        if not self.settings.view_path:
            raise ConfigurationError("View path is required.")

    def _set_config_spec(self, branch: str | None, label: str | None, roots: list[str]) -> None:
        spec = ConfigSpec(branch, label, list(roots))
        logger.debug("Config spec for %s: %s, roots %s", self.view_path, spec.selector, spec.roots)
        apply_config_spec(self._runner, self.view_path, spec)

    def _root_dir(self, root: str) -> str:
        return RootPath(root).local_path(self.view_path)

    def _get_files(self, source_path: str | None, destination: str | None,
                   label: str | None) -> CopyReport | None:
        if destination:
            os.makedirs(destination, exist_ok=True)

        path = RootPath.parse(source_path)
        if path.is_top_level:
            self._set_config_spec(self.branch, label, self.roots())
            self._runner.run("update", ".", cwd=self.view_path)
            local = self.view_path
        else:
            self._set_config_spec(self.branch, label, [path.root])
            self._runner.run("update", path.tool_path(), cwd=self._root_dir(path.root))
            local = path.local_path(self.view_path)

        if not destination:
            return None
        report = copy_local(local, destination)
        logger.info("Copied %d file(s) from %s to %s", report.total, local, destination)
        return report

    # --- Read operations ---

    def roots(self) -> list[str]:
        """Names of all roots known to the tool, without enclosing separators."""
        self._require_settings()
        with self._lock:
            names = (line.strip("\\/") for line in self._runner.run("lsvob", "-short"))
            return [name for name in names if name]

    def list_directory(self, source_path: str | None = "") -> DirectoryTree:
        """List one directory.

        An empty *source_path* lists the roots themselves; their contents
        are not filled in.  Otherwise the root is loaded into the view and
        ``ls -long`` is run on the path.  Lines that cannot be parsed are
        skipped.
        """
        self._require_settings()
        with self._lock:
            path = RootPath.parse(source_path)
            if path.is_top_level:
                return top_level_tree(self.roots())

            self._set_config_spec(None, None, [path.root])
            root_dir = self._root_dir(path.root)
            os.makedirs(root_dir, exist_ok=True)
            lines = self._runner.run("ls", "-long", path.tool_path(), cwd=root_dir)
            return build_tree(path, lines)

    def read_file(self, file_path: str) -> bytes:
        """Refresh one file in the view and return its contents.

        Raises:
            ConfigurationError: If *file_path* is empty or names only a root.
        """
        self._require_settings()
        path = RootPath.parse(file_path)
        if not path.relative:
            raise ConfigurationError(f"Not a file path inside a root: {file_path!r}")
        with self._lock:
            self._set_config_spec(None, None, [path.root])
            self._runner.run("update", path.tool_path(), cwd=self._root_dir(path.root))
            return Path(path.local_path(self.view_path)).read_bytes()

    # --- Fetch operations ---

    def fetch_latest(self, source_path: str | None = "",
                     destination: str | None = None) -> CopyReport | None:
        """Update *source_path* to the tip of the branch.

        With a *destination*, the updated files are copied there and a
        :class:`CopyReport` is returned; without one the view is only
        refreshed in place and ``None`` is returned.  An empty
        *source_path* updates every root.
        """
        self._require_settings()
        with self._lock:
            return self._get_files(source_path, destination, None)

    def fetch_labeled(self, label: str, source_path: str | None = "",
                      destination: str | None = None) -> CopyReport | None:
        """Like :meth:`fetch_latest`, but select the versions carrying *label*."""
        self._require_settings()
        with self._lock:
            return self._get_files(source_path, destination, label)

    # --- Write operations ---

    def apply_label(self, label: str, source_path: str | None = "") -> None:
        """Label the latest versions under *source_path*, recursively.

        The view is brought up to date first.  The label type is created
        if needed; an existing label type is reused.

        Raises:
            ConfigurationError: If *label* is empty (no tool command is run).
        """
        if not label:
            raise ConfigurationError("A label is required.")
        self._require_settings()
        with self._lock:
            self.fetch_latest(source_path)
            local = RootPath.parse(source_path).local_path(self.view_path)
            try:
                self._runner.run("mklbtype", "-nc", label, cwd=local)
            except ToolError as exc:
                if "already exists" not in str(exc):
                    raise
                logger.info("Label type %s already exists", label)
            self._runner.run("mklabel", "-recurse", label, ".", cwd=local)

    # --- Connectivity ---

    def validate_connection(self) -> None:
        """Check the settings and that the tool answers.

        Raises:
            NotAvailableError: Wrapping whatever went wrong.
        """
        try:
            self.settings.validate()
            with self._lock:
                self._runner.run("hostinfo")
                self._runner.run("lsvob", "-short")
        except ViewStoreError as exc:
            raise NotAvailableError(str(exc)) from exc
