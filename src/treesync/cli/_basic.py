"""Basic commands: ls, prune, empty, find-root."""

from __future__ import annotations

import os

import click

from ..exceptions import TreeSyncError
from ..fsutil import empty_directory, find_project_root
from ..engine import EnumerationOptions, PruneOptions, enumerate_paths, prune_empty_dirs
from ._helpers import (
    main,
    _build_filter,
    _dry_run_option,
    _exclude_options,
    _follow_symlinks_option,
    _status,
    _workers_option,
)


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--dirs", "include_directories", is_flag=True, default=False,
              help="Include directories in the listing.")
@click.option("--full-path", is_flag=True, default=False,
              help="Print absolute paths.")
@click.option("--as-root", is_flag=True, default=False,
              help="Print paths as if DIRECTORY were '/'.")
@_exclude_options
@_follow_symlinks_option
@_workers_option
@click.pass_context
def ls(ctx, directory, include_directories, full_path, as_root, exclude,
       exclude_from, use_gitignore, follow_symlinks, workers):
    """List every file under DIRECTORY, sorted."""
    if full_path and as_root:
        raise click.ClickException("--full-path and --as-root are incompatible")
    options = EnumerationOptions(
        full_path=full_path,
        as_root=as_root,
        include_directories=include_directories,
        filter=_build_filter(exclude, exclude_from, use_gitignore),
        follow_symlinks=follow_symlinks,
        workers=workers,
    )
    try:
        paths = enumerate_paths(directory, options)
    except TreeSyncError as exc:
        raise click.ClickException(str(exc))
    for path in sorted(paths):
        click.echo(path)
    _status(ctx, f"{len(paths)} entries")


# ---------------------------------------------------------------------------
# prune
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--keep-hidden", is_flag=True, default=False,
              help="Treat .DS_Store / Desktop.ini as content.")
@click.option("--max-depth", type=click.IntRange(min=0), default=0,
              help="Deepest level to prune (0 = unlimited).")
@_exclude_options
@click.pass_context
def prune(ctx, directory, keep_hidden, max_depth, exclude, exclude_from, use_gitignore):
    """Remove empty directories under DIRECTORY (never DIRECTORY itself)."""
    options = PruneOptions(
        delete_hidden_files=not keep_hidden,
        max_depth=max_depth,
        filter=_build_filter(exclude, exclude_from, use_gitignore),
    )
    errors = []
    try:
        removed = prune_empty_dirs(directory, options, errors=errors)
    except TreeSyncError as exc:
        raise click.ClickException(str(exc))
    for rel in removed:
        click.echo(f"- {rel}/")
    for e in errors:
        click.echo(f"ERROR: {e.path}: {e.error}", err=True)
    _status(ctx, f"Pruned {len(removed)} directories")
    if errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# empty
# ---------------------------------------------------------------------------

@main.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--include-hidden", is_flag=True, default=False,
              help="Also remove dot-files and dot-directories.")
@_dry_run_option
@click.pass_context
def empty(ctx, directory, include_hidden, dry_run):
    """Remove everything inside DIRECTORY, keeping DIRECTORY itself."""
    if dry_run:
        for name in sorted(os.listdir(directory)):
            if include_hidden or not name.startswith("."):
                click.echo(f"- {name}")
        return
    try:
        removed = empty_directory(directory, include_hidden=include_hidden)
    except OSError as exc:
        raise click.ClickException(str(exc))
    for name in removed:
        click.echo(f"- {name}")
    _status(ctx, f"Removed {len(removed)} entries from {directory}")


# ---------------------------------------------------------------------------
# find-root
# ---------------------------------------------------------------------------

@main.command("find-root")
@click.argument("marker")
@click.option("--start", type=click.Path(exists=True), default=".",
              help="Directory to search upward from (default: current).")
@click.pass_context
def find_root(ctx, marker, start):
    """Print the nearest ancestor path of --start that holds MARKER.

    The search begins at the parent of --start.  Exits with status 1
    when no ancestor holds MARKER.
    """
    found = find_project_root(start, marker)
    if found is None:
        _status(ctx, f"{marker} not found above {start}")
        ctx.exit(1)
    click.echo(str(found))
