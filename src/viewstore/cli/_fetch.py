"""Fetch and label commands: get, label."""

from __future__ import annotations

import click

from ._helpers import (
    main,
    _view_options,
    _label_option,
    _require_store,
    _errors_as_click,
    _status,
)


@main.command()
@_view_options
@click.argument("source", required=False, default="")
@click.argument("dest", required=False, type=click.Path(file_okay=False))
@_label_option
@click.pass_context
def get(ctx, source, dest, label):
    """Update SOURCE in the view and optionally copy it to DEST.

    With no SOURCE every VOB is loaded and updated.  Without DEST only the
    view itself is refreshed.

    \b
    Examples:
        viewstore get                       # refresh the whole view
        viewstore get VOB1 ./out            # latest VOB1 into ./out
        viewstore get -L REL_1.2 VOB1 ./out # labeled versions
        viewstore get '' ./out              # every VOB into ./out
    """
    store = _require_store(ctx)
    with _errors_as_click():
        if label:
            report = store.fetch_labeled(label, source, dest)
        else:
            report = store.fetch_latest(source, dest)

    what = source or "all VOBs"
    if report is None:
        _status(ctx, f"Updated {what} in {store.view_path}")
    else:
        _status(ctx, f"Copied {report.total} file(s) from {what} to {report.destination}")


@main.command()
@_view_options
@click.argument("label")
@click.argument("source", required=False, default="")
@click.pass_context
def label(ctx, label, source):
    """Apply LABEL recursively to the latest versions under SOURCE.

    The label type is created when it does not exist yet.
    """
    store = _require_store(ctx)
    with _errors_as_click():
        store.apply_label(label, source)
    _status(ctx, f"Labeled {source or store.view_path} with {label}")
