"""Config specs: which branch, label and roots a snapshot view shows."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .path import SEP

if TYPE_CHECKING:
    from .tool import ToolRunner

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
DEFAULT_LABEL = "LATEST"


@dataclass
class ConfigSpec:
    """A view configuration.

    Attributes:
        branch: Branch to select; ``None``/``""`` selects ``main``.
        label: Label to select; ``None``/``""`` selects ``LATEST``.
        roots: Roots to load, in the order they are written.
    """

    branch: str | None = None
    label: str | None = None
    roots: list[str] = field(default_factory=list)

    @property
    def selector(self) -> str:
        """The ``/branch/label`` version selector."""
        return f"/{self.branch or DEFAULT_BRANCH}/{self.label or DEFAULT_LABEL}"

    def lines(self) -> list[str]:
        result = [
            "element * CHECKEDOUT",
            f"element * {self.selector}",
        ]
        result.extend(f"load {SEP}{root}" for root in self.roots)
        return result

    def render(self) -> str:
        """Return the config spec document, one rule per line."""
        return "".join(f"{line}\n" for line in self.lines())


def apply_config_spec(runner: ToolRunner, view_path: str, spec: ConfigSpec) -> None:
    """Write *spec* to a temp file and set it on the view at *view_path*.

    The temp file is removed afterwards whether or not ``setcs`` succeeds;
    failing to remove it is not an error.  Tool failures propagate.
    """
    fd, spec_path = tempfile.mkstemp(prefix="viewstore-", suffix=".cs")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(spec.render())
        runner.run("setcs", "-force", spec_path, cwd=view_path)
    finally:
        try:
            os.remove(spec_path)
        except OSError:
            logger.debug("Could not remove config spec %s", spec_path)
