"""Connection settings supplied by the host."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ViewSettings:
    """Settings for one ClearCase snapshot view.

    Attributes:
        tool_path: Full path to the ``cleartool`` executable.
        view_path: Directory holding the snapshot view.  Must already exist.
        branch: Branch to work against; ``None`` or ``""`` means ``main``.
        timeout: Seconds before a tool call is killed; ``None`` waits forever.
    """

    tool_path: str
    view_path: str
    branch: str | None = None
    timeout: float | None = None

    def validate(self) -> None:
        """Check that the tool is an executable file and the view exists.

        Raises:
            ConfigurationError: Describing the first problem found.
        """
        if not self.tool_path:
            raise ConfigurationError("Executable path is required.")
        if not self.view_path:
            raise ConfigurationError("View path is required.")
        if not os.path.isfile(self.tool_path) or not os.access(self.tool_path, os.X_OK):
            raise ConfigurationError(
                f"The file {self.tool_path!r} either does not exist or is not executable."
            )
        if not os.path.isdir(self.view_path):
            raise ConfigurationError(
                f"The view path {self.view_path!r} either does not exist or is not accessible."
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout!r}")
