"""Watch mode for the sync command."""

from __future__ import annotations

import datetime

import click

from ..exceptions import TreeSyncError


def _import_watchfiles():
    """Lazy-import watchfiles, raising a friendly error if missing."""
    try:
        import watchfiles
        return watchfiles
    except ImportError:
        raise click.ClickException(
            "watchfiles is required for --watch mode.\n"
            "Install it with: pip install treesync[watch]"
        )


def _run_sync_cycle(src, dst, make_options):
    """Run one sync with freshly built options."""
    from ..engine import sync

    report = sync(src, dst, make_options())
    now = datetime.datetime.now().strftime("%H:%M:%S")
    click.echo(f"[{now}] Sync: {report.summary()}")
    for w in report.warnings:
        click.echo(f"WARNING: {w.path}: {w.error}", err=True)
    for e in report.errors:
        click.echo(f"ERROR: {e.path}: {e.error}", err=True)
    return report


def watch_and_sync(src, dst, make_options, *, debounce):
    """Watch *src* and sync to *dst* on every change batch."""
    watchfiles = _import_watchfiles()

    # Initial sync to catch up with any pending changes
    click.echo(f"Watching {src} -> {dst} (debounce {debounce}ms)")
    try:
        _run_sync_cycle(src, dst, make_options)
    except (TreeSyncError, ValueError, OSError) as exc:
        click.echo(f"ERROR: Initial sync failed: {exc}", err=True)

    # Watch loop
    try:
        for _changes in watchfiles.watch(src, debounce=debounce):
            try:
                _run_sync_cycle(src, dst, make_options)
            except (TreeSyncError, ValueError, OSError) as exc:
                click.echo(f"ERROR: Sync failed: {exc}", err=True)
    except KeyboardInterrupt:
        click.echo("\nStopped watching.")
