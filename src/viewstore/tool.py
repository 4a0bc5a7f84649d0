"""Run the external ``cleartool`` program and collect its output.

Every invocation is announced as a :class:`CommandEvent` before the process
starts, streams standard output line by line while the tool runs, and removes
the ``*.updt`` update logs the tool leaves in the view root afterwards.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from .exceptions import ToolError, ToolTimeoutError

logger = logging.getLogger(__name__)
command_logger = logging.getLogger("viewstore.commands")

LOG_PATTERN = "*.updt"

# Own process group, so a timeout also reaches children of wrapper scripts.
_NEW_SESSION = hasattr(os, "killpg")


@dataclass(frozen=True)
class CommandEvent:
    """A tool command about to be executed.

    Attributes:
        working_directory: Directory the tool runs in (``None`` to inherit).
        command: The tool verb, e.g. ``"update"``.
        arguments: Positional arguments following the verb.
    """

    working_directory: str | None
    command: str
    arguments: tuple[str, ...] = ()

    @property
    def command_line(self) -> str:
        """The verb followed by each argument in double quotes."""
        return " ".join([self.command, *(f'"{arg}"' for arg in self.arguments)])


def _collect_lines(stream: IO[str], sink: list[str]) -> None:
    """Append each non-blank stdout line, trimmed, as it arrives."""
    with stream:
        for raw in stream:
            line = raw.strip()
            if line:
                sink.append(line)
                logger.debug("%s", line)


def _collect_text(stream: IO[str], sink: list[str]) -> None:
    with stream:
        sink.append(stream.read())


def _kill(proc: subprocess.Popen) -> None:
    """Kill the tool and everything it started."""
    if _NEW_SESSION:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            pass
    proc.kill()


class ToolRunner:
    """Invoke ``cleartool`` as a child process.

    Args:
        tool_path: Full path to the executable.
        view_path: Snapshot view root; ``*.updt`` logs there are removed
            after every call.  ``None`` skips the cleanup.
        on_command: Called with a :class:`CommandEvent` before each launch.
        timeout: Seconds before the process is killed (``None``: no limit).
    """

    def __init__(
        self,
        tool_path: str,
        view_path: str | None = None,
        *,
        on_command: Callable[[CommandEvent], None] | None = None,
        timeout: float | None = None,
    ):
        self.tool_path = tool_path
        self.view_path = view_path
        self.timeout = timeout
        self._on_command = on_command

    def __repr__(self) -> str:
        return f"ToolRunner({self.tool_path!r})"

    def run(self, command: str, *args: str, cwd: str | None = None) -> list[str]:
        """Run ``<tool> <command> <args...>`` and return its output lines.

        Only lines that are non-empty after trimming are returned, in the
        order the tool printed them.

        Raises:
            ToolError: The tool exited non-zero or could not be started.
            ToolTimeoutError: The tool ran longer than ``timeout``.
        """
        event = CommandEvent(cwd or None, command, tuple(args))
        try:
            self._notify(event)
            return self._execute(event)
        finally:
            self._delete_logs()

    def _notify(self, event: CommandEvent) -> None:
        command_logger.info(
            "%s> %s %s", event.working_directory or os.curdir, self.tool_path, event.command_line,
        )
        if self._on_command is not None:
            self._on_command(event)

    def _execute(self, event: CommandEvent) -> list[str]:
        argv = [self.tool_path, event.command, *event.arguments]
        try:
            proc = subprocess.Popen(
                argv,
                cwd=event.working_directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=_NEW_SESSION,
            )
        except OSError as exc:
            raise ToolError(
                f"Cannot run {self.tool_path}: {exc}",
                command=event.command, arguments=event.arguments,
            ) from exc

        lines: list[str] = []
        errors: list[str] = []
        readers = [
            threading.Thread(target=_collect_lines, args=(proc.stdout, lines), daemon=True),
            threading.Thread(target=_collect_text, args=(proc.stderr, errors), daemon=True),
        ]
        for reader in readers:
            reader.start()

        timed_out = False
        try:
            proc.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            _kill(proc)
            proc.wait()
        except BaseException:
            _kill(proc)
            proc.wait()
            raise
        finally:
            # Output must be fully drained before the exit status is used.
            for reader in readers:
                reader.join()

        stderr = "".join(errors)
        if timed_out:
            raise ToolTimeoutError(
                f"{event.command} did not finish within {self.timeout} seconds",
                command=event.command, arguments=event.arguments,
                returncode=proc.returncode, stderr=stderr,
            )
        if proc.returncode != 0:
            message = "".join(lines) + stderr.replace("\r", "").replace("\n", "")
            raise ToolError(
                message or f"{event.command} exited with code {proc.returncode}",
                command=event.command, arguments=event.arguments,
                returncode=proc.returncode, stderr=stderr,
            )
        return lines

    def _delete_logs(self) -> None:
        """Remove tool update logs from the view root, ignoring all errors."""
        if not self.view_path:
            return
        try:
            logs = list(Path(self.view_path).glob(LOG_PATTERN))
        except OSError:
            return
        for log in logs:
            try:
                log.unlink()
            except OSError:
                logger.debug("Could not remove %s", log)
