"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import logging
from contextlib import contextmanager

import click

from ..exceptions import ViewStoreError
from ..store import ViewStore


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class _EchoHandler(logging.Handler):
    """Send log records to stderr through click (works under CliRunner)."""

    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool) -> None:
    """Show tool commands and their output on stderr in verbose mode."""
    log = logging.getLogger("viewstore")
    for handler in [h for h in log.handlers if isinstance(h, _EchoHandler)]:
        log.removeHandler(handler)
    if not verbose:
        log.setLevel(logging.NOTSET)
        return
    handler = _EchoHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _store_setting(ctx, param, value):
    """Click callback: store a connection setting in the context."""
    ctx.ensure_object(dict)
    if value is not None:
        ctx.obj[param.name] = value
    return value


def _view_options(f):
    """Shared connection options, accepted before or after the command name."""
    f = click.option(
        "--timeout", type=float, envvar="VIEWSTORE_TIMEOUT",
        help="Kill cleartool commands running longer than this many seconds.",
        expose_value=False, callback=_store_setting, is_eager=True,
    )(f)
    f = click.option(
        "--branch", "-b", envvar="VIEWSTORE_BRANCH",
        help="Branch to work against (default: main).",
        expose_value=False, callback=_store_setting, is_eager=True,
    )(f)
    f = click.option(
        "--view", "-V", type=click.Path(), envvar="VIEWSTORE_VIEW",
        help="Snapshot view directory (or set VIEWSTORE_VIEW).",
        expose_value=False, callback=_store_setting, is_eager=True,
    )(f)
    f = click.option(
        "--tool", "-t", type=click.Path(), envvar="VIEWSTORE_TOOL",
        help="Path to the cleartool executable (or set VIEWSTORE_TOOL).",
        expose_value=False, callback=_store_setting, is_eager=True,
    )(f)
    return f


def _label_option(f):
    return click.option("--label", "-L", default=None,
                        help="Select the versions carrying this label instead of LATEST.")(f)


def _format_option(f):
    return click.option("--format", "fmt", type=click.Choice(["text", "json"]),
                        default="text", show_default=True, help="Output format.")(f)


def _require_store(ctx) -> ViewStore:
    """Build a ViewStore from the context, raising a clear error if unset."""
    tool = ctx.obj.get("tool")
    view = ctx.obj.get("view")
    if not tool:
        raise click.ClickException(
            "No cleartool specified. Use --tool or set VIEWSTORE_TOOL."
        )
    if not view:
        raise click.ClickException(
            "No view specified. Use --view or set VIEWSTORE_VIEW."
        )
    return ViewStore.open(tool, view, ctx.obj.get("branch"), timeout=ctx.obj.get("timeout"))


@contextmanager
def _errors_as_click():
    """Report library and local file errors as CLI errors (exit code 1)."""
    try:
        yield
    except ViewStoreError as exc:
        raise click.ClickException(str(exc))
    except FileNotFoundError as exc:
        raise click.ClickException(f"File not found: {exc.filename or exc}")
    except IsADirectoryError as exc:
        raise click.ClickException(f"{exc.filename} is a directory, not a file")


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@_view_options
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """viewstore: a ClearCase snapshot view as a file tree.

    Browse the VOBs loaded through a snapshot view, fetch the latest or
    labeled versions to a local directory, and apply labels.

    \b
    Quick start:
      export VIEWSTORE_TOOL=/opt/rational/clearcase/bin/cleartool
      export VIEWSTORE_VIEW=~/views/build_snap
      viewstore check
      viewstore ls
      viewstore ls 'VOB1\\src'
      viewstore get VOB1 ./out

    \b
    Paths are 'VOB' or 'VOB\\relative\\path' ('/' is accepted too).
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)
