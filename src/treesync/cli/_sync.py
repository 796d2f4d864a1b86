"""The sync command."""

from __future__ import annotations

import functools
import sys

import click

from ..exceptions import TreeSyncError
from ..progress import ThrottledReporter
from ..engine import AlwaysCopy, SizeComparator, StatComparator, SyncActionKind, SyncOptions
from ._helpers import (
    main,
    _ProgressBar,
    _build_filter,
    _dry_run_option,
    _echo_problems,
    _exclude_options,
    _follow_symlinks_option,
    _status,
    _workers_option,
)


def _make_comparator(compare, mtime_tolerance, follow_symlinks):
    if compare == "size":
        return SizeComparator()
    if compare == "always":
        return AlwaysCopy()
    return StatComparator(mtime_tolerance, follow_symlinks=follow_symlinks)


def _make_options(*, exclude, exclude_from, use_gitignore, no_delete, no_prune,
                  keep_hidden, compare, mtime_tolerance, workers,
                  follow_symlinks, reporter=None) -> SyncOptions:
    """Build fresh SyncOptions; filters carry per-run .gitignore state."""
    def filt():
        return _build_filter(exclude, exclude_from, use_gitignore)

    return SyncOptions(
        filter_input=filt(),
        filter_output=filt(),
        prune_filter=filt(),
        compare=_make_comparator(compare, mtime_tolerance, follow_symlinks),
        clean_directory=not no_delete,
        clean_empty=not no_prune,
        delete_hidden_files=not keep_hidden,
        log_progress=reporter is not None,
        reporter=reporter,
        workers=workers,
        follow_symlinks=follow_symlinks,
    )


@main.command()
@click.argument("src", type=click.Path(exists=True, file_okay=False))
@click.argument("dst", type=click.Path(file_okay=False))
@_dry_run_option
@_exclude_options
@click.option("--no-delete", is_flag=True, default=False,
              help="Keep output files that are absent from SRC.")
@click.option("--no-prune", is_flag=True, default=False,
              help="Keep output directories left empty.")
@click.option("--keep-hidden", is_flag=True, default=False,
              help="Treat .DS_Store / Desktop.ini as content when pruning.")
@click.option("--compare", type=click.Choice(["stat", "size", "always"]),
              default="stat", show_default=True,
              help="How to decide that an existing file is up to date.")
@click.option("--mtime-tolerance", type=float, default=0.0, show_default=True,
              help="Seconds of mtime difference still considered equal (stat mode).")
@_workers_option
@_follow_symlinks_option
@click.option("--progress/--no-progress", default=None,
              help="Show a progress bar while copying (default: when stderr is a terminal).")
@click.option("--watch", "watch", is_flag=True, default=False,
              help="Watch SRC for changes and sync continuously.")
@click.option("--debounce", type=int, default=2000,
              help="Debounce delay in ms for --watch (default: 2000).")
@click.pass_context
def sync(ctx, src, dst, dry_run, exclude, exclude_from, use_gitignore, no_delete,
         no_prune, keep_hidden, compare, mtime_tolerance, workers, follow_symlinks,
         progress, watch, debounce):
    """Make DST hold exactly the files of SRC (like rsync -a --delete).

    New and changed files are copied, files missing from SRC are deleted
    from DST, and directories left empty in DST are removed.

    \b
        treesync sync ./photos /mnt/backup/photos
        treesync sync -n ./photos /mnt/backup/photos    (preview)
        treesync sync --exclude '*.tmp' --gitignore ./src ./mirror
    """
    if watch:
        if dry_run:
            raise click.ClickException("--watch and --dry-run are incompatible")
        if debounce < 100:
            raise click.ClickException("--debounce must be at least 100 ms")

    make_options = functools.partial(
        _make_options,
        exclude=exclude, exclude_from=exclude_from, use_gitignore=use_gitignore,
        no_delete=no_delete, no_prune=no_prune, keep_hidden=keep_hidden,
        compare=compare, mtime_tolerance=mtime_tolerance, workers=workers,
        follow_symlinks=follow_symlinks,
    )

    if watch:
        from ._watch import watch_and_sync
        watch_and_sync(src, dst, make_options, debounce=debounce)
        return

    if dry_run:
        _dry_run(src, dst, make_options())
        return

    if progress is None:
        progress = sys.stderr.isatty()
    bar = _ProgressBar() if progress else None
    options = make_options(reporter=ThrottledReporter(bar) if bar else None)

    from ..engine import sync as run_sync

    try:
        report = run_sync(src, dst, options)
    except (TreeSyncError, ValueError) as exc:
        raise click.ClickException(str(exc))
    finally:
        if bar is not None:
            bar.close()

    _echo_problems(report)
    click.echo(report.summary())
    _status(ctx, f"Synced {src} -> {dst}")
    if report.errors:
        ctx.exit(1)


def _dry_run(src, dst, options):
    from ..engine import plan_sync

    try:
        plan = plan_sync(src, dst, options)
    except (TreeSyncError, ValueError) as exc:
        raise click.ClickException(str(exc))
    for action in plan.actions():
        if action.action == SyncActionKind.DELETE and not options.clean_directory:
            continue
        click.echo(str(action))
