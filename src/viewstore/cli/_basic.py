"""Basic commands: check, roots, ls, cat, configspec."""

from __future__ import annotations

import json
import sys

import click

from ..configspec import ConfigSpec
from ..listing import DirectoryTree, EntryKind
from ._helpers import (
    main,
    _view_options,
    _label_option,
    _format_option,
    _require_store,
    _errors_as_click,
    _status,
)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@main.command()
@_view_options
@click.pass_context
def check(ctx):
    """Verify that cleartool and the view are usable."""
    store = _require_store(ctx)
    with _errors_as_click():
        store.validate_connection()
    click.echo(f"OK: {store.view_path}")


# ---------------------------------------------------------------------------
# roots
# ---------------------------------------------------------------------------

@main.command()
@_view_options
@click.pass_context
def roots(ctx):
    """List the VOBs known to cleartool."""
    store = _require_store(ctx)
    with _errors_as_click():
        names = store.roots()
    for name in names:
        click.echo(name)


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

def _tree_dict(tree: DirectoryTree) -> dict:
    return {
        "name": tree.name,
        "path": str(tree.path),
        "entries": [
            {"name": e.name, "path": str(e.path), "type": str(e.kind)}
            for e in tree.entries
        ],
    }


@main.command()
@_view_options
@click.argument("path", required=False, default="")
@click.option("-l", "--long", "long_", is_flag=True, help="Show entry types and full paths.")
@_format_option
@click.pass_context
def ls(ctx, path, long_, fmt):
    """List a directory (or the VOBs when PATH is omitted).

    Directories are shown with a trailing '/'.

    \b
    Examples:
        viewstore ls                      # all VOBs
        viewstore ls VOB1                 # top of a VOB
        viewstore ls 'VOB1\\src\\lib'       # a directory inside it
        viewstore ls -l VOB1              # types and full paths
        viewstore ls --format json VOB1   # JSON output
    """
    store = _require_store(ctx)
    with _errors_as_click():
        tree = store.list_directory(path)

    if fmt == "json":
        click.echo(json.dumps(_tree_dict(tree), indent=2))
        return
    for entry in tree.entries:
        if long_:
            click.echo(f"{entry.kind}\t{entry.path}")
        elif entry.kind is EntryKind.DIRECTORY:
            click.echo(f"{entry.name}/")
        else:
            click.echo(entry.name)


# ---------------------------------------------------------------------------
# cat
# ---------------------------------------------------------------------------

@main.command()
@_view_options
@click.argument("paths", nargs=-1, required=True)
@click.pass_context
def cat(ctx, paths):
    """Concatenate file contents to stdout."""
    store = _require_store(ctx)
    for path in paths:
        with _errors_as_click():
            data = store.read_file(path)
        sys.stdout.buffer.write(data)


# ---------------------------------------------------------------------------
# configspec
# ---------------------------------------------------------------------------

@main.command()
@_view_options
@click.argument("roots", nargs=-1)
@_label_option
@click.pass_context
def configspec(ctx, roots, label):
    """Print the config spec a fetch of ROOTS would set (nothing is run)."""
    spec = ConfigSpec(ctx.obj.get("branch"), label, list(roots))
    _status(ctx, f"Selector: {spec.selector}")
    click.echo(spec.render(), nl=False)
