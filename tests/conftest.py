"""Shared fixtures for viewstore tests."""

import json
import stat
import sys

import pytest
from click.testing import CliRunner

from viewstore import ViewSettings, ViewStore
from viewstore.exceptions import ToolError


# ---------------------------------------------------------------------------
# Fake cleartool executable
# ---------------------------------------------------------------------------

_FAKE_TOOL_BODY = r'''
import json
import os
import sys
import time

STATE = os.environ["FAKE_CLEARTOOL_STATE"]


def _path(name):
    return os.path.join(STATE, name)


def _read(name, default=""):
    try:
        with open(_path(name), encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return default


def _append(name, record):
    with open(_path(name), "a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\n")


def main(argv):
    command = argv[0] if argv else ""
    _append("calls.jsonl", {"cwd": os.getcwd(), "argv": argv})

    failures = json.loads(_read("failures.json", "{}"))
    if command in failures:
        spec = failures[command]
        sys.stdout.write(spec.get("stdout", ""))
        sys.stderr.write(spec.get("stderr", ""))
        return spec.get("code", 1)

    view = _read("view.txt").strip()

    if command == "hostinfo":
        print("fakehost: ClearCase 10.0.0.0")
    elif command == "lsvob":
        sys.stdout.write(_read("roots.txt"))
    elif command == "setcs":
        with open(argv[-1], encoding="utf-8") as f:
            text = f.read()
        _append("configspecs.jsonl", {"path": argv[-1], "text": text})
        for line in text.splitlines():
            if line.startswith("load "):
                os.makedirs(os.path.join(os.getcwd(), line[5:].strip("\\/")), exist_ok=True)
    elif command == "update":
        for rel, content in json.loads(_read("files.json", "{}")).items():
            full = os.path.join(view, *rel.split("/"))
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, "w", encoding="utf-8") as f:
                f.write(content)
        with open(os.path.join(view, "update.%d.updt" % time.time_ns()), "w") as f:
            f.write("update log\n")
        print("Done loading " + argv[-1])
    elif command == "ls":
        sys.stdout.write(_read("listing.txt"))
    elif command == "mklbtype":
        print('Created label type "%s".' % argv[-1])
    elif command == "mklabel":
        print('Created label "%s" on ".".' % argv[2])
    elif command == "emit":
        sys.stdout.write(_read("emit.txt"))
        sys.stderr.write(_read("emit_err.txt"))
    elif command == "sleep":
        time.sleep(float(argv[1]))
    else:
        sys.stderr.write("unknown command: %s\n" % command)
        return 2
    return 0


sys.exit(main(sys.argv[1:]))
'''


class FakeClearTool:
    """A scriptable stand-in for cleartool that records every call."""

    def __init__(self, path, state, view):
        self.path = str(path)
        self.state = state
        self.view = view

    def _write(self, name, text):
        (self.state / name).write_text(text, encoding="utf-8")

    def set_roots(self, *lines):
        self._write("roots.txt", "".join(f"{line}\n" for line in lines))

    def set_listing(self, *lines):
        self._write("listing.txt", "".join(f"{line}\n" for line in lines))

    def set_files(self, files):
        """Files (view-relative, '/'-separated) that ``update`` materializes."""
        self._write("files.json", json.dumps(files))

    def set_output(self, stdout, stderr=""):
        """Raw output for the ``emit`` command."""
        self._write("emit.txt", stdout)
        self._write("emit_err.txt", stderr)

    def fail(self, command, *, stdout="", stderr="", code=1):
        path = self.state / "failures.json"
        failures = json.loads(path.read_text()) if path.exists() else {}
        failures[command] = {"stdout": stdout, "stderr": stderr, "code": code}
        path.write_text(json.dumps(failures))

    def _records(self, name):
        path = self.state / name
        if not path.exists():
            return []
        return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]

    @property
    def calls(self):
        return self._records("calls.jsonl")

    @property
    def commands(self):
        return [call["argv"][0] for call in self.calls]

    @property
    def configspecs(self):
        return self._records("configspecs.jsonl")


@pytest.fixture
def view(tmp_path):
    """An empty snapshot view directory."""
    p = tmp_path / "view"
    p.mkdir()
    return p


@pytest.fixture
def cleartool(tmp_path, view, monkeypatch):
    state = tmp_path / "tool-state"
    state.mkdir()
    (state / "view.txt").write_text(str(view))
    script = tmp_path / "bin" / "cleartool"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{_FAKE_TOOL_BODY}")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("FAKE_CLEARTOOL_STATE", str(state))
    return FakeClearTool(script, state, view)


@pytest.fixture
def store(cleartool, view):
    return ViewStore.open(cleartool.path, str(view))


# ---------------------------------------------------------------------------
# In-process runner
# ---------------------------------------------------------------------------

class RecordingRunner:
    """Records tool calls instead of running them.

    *outputs* maps a command to the lines it returns; *failures* maps a
    command to the message of the :class:`ToolError` it raises.
    """

    def __init__(self, outputs=None, failures=None):
        self.outputs = dict(outputs or {})
        self.failures = dict(failures or {})
        self.calls = []
        self.configspecs = []

    def run(self, command, *args, cwd=None):
        self.calls.append((command, args, cwd))
        if command == "setcs":
            spec_path = args[-1]
            with open(spec_path, encoding="utf-8") as f:
                self.configspecs.append((spec_path, f.read()))
        if command in self.failures:
            raise ToolError(self.failures[command], command=command, arguments=args)
        return list(self.outputs.get(command, []))

    @property
    def commands(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder():
    return RecordingRunner()


@pytest.fixture
def recorded_store(recorder, view):
    """A ViewStore whose tool calls go to ``recorder``."""
    return ViewStore(ViewSettings("cleartool", str(view), "dev"), runner=recorder)


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(cleartool, view):
    """Environment pointing the CLI at the fake tool and view."""
    return {"VIEWSTORE_TOOL": cleartool.path, "VIEWSTORE_VIEW": str(view)}
