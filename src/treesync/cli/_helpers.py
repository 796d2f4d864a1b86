"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import logging

import click

from .._exclude import ACCEPT_ALL, ExcludeFilter
from .._pool import DEFAULT_WORKERS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


class _EchoHandler(logging.Handler):
    """Log handler writing through ``click.echo`` to the current stderr."""

    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool) -> None:
    """Route the library's log records to stderr when -v is on."""
    logger = logging.getLogger("treesync")
    if not verbose:
        return
    if not any(isinstance(h, _EchoHandler) for h in logger.handlers):
        handler = _EchoHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _build_filter(exclude=(), exclude_from=None, use_gitignore=False):
    """Build an ExcludeFilter from CLI options, or ACCEPT_ALL if none given."""
    if not (exclude or exclude_from or use_gitignore):
        return ACCEPT_ALL
    try:
        return ExcludeFilter(patterns=exclude, exclude_from=exclude_from,
                             gitignore=use_gitignore)
    except OSError as exc:
        raise click.ClickException(f"Cannot read exclude file: {exc}")


def _echo_problems(report) -> None:
    for w in report.warnings:
        click.echo(f"WARNING: {w.path}: {w.error}", err=True)
    for e in report.errors:
        click.echo(f"ERROR: {e.path}: {e.error}", err=True)


class _ProgressBar:
    """Progress reporter rendering copy progress with ``click.progressbar``."""

    def __init__(self, label: str = "Copying") -> None:
        self._label = label
        self._bar = None
        self._shown = 0

    def __call__(self, label: str, completed: int, total: int) -> None:
        if self._bar is None:
            self._bar = click.progressbar(length=total, label=self._label,
                                          file=click.get_text_stream("stderr"))
            self._bar.__enter__()
        self._bar.update(completed - self._shown, current_item=label)
        self._shown = completed
        if completed >= total:
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.__exit__(None, None, None)
            self._bar = None


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

def _dry_run_option(f):
    """Shared -n/--dry-run flag."""
    return click.option(
        "-n", "--dry-run", "dry_run", is_flag=True, default=False,
        help="Show what would change without writing.",
    )(f)


def _workers_option(f):
    """Shared --workers option (or TREESYNC_WORKERS)."""
    return click.option(
        "--workers", "-j", type=click.IntRange(min=1), default=DEFAULT_WORKERS,
        envvar="TREESYNC_WORKERS", show_default=True,
        help="Concurrent filesystem operations (or set TREESYNC_WORKERS).",
    )(f)


def _follow_symlinks_option(f):
    return click.option(
        "--follow-symlinks", is_flag=True, default=False,
        help="Descend into symlinked directories and copy link targets.",
    )(f)


def _exclude_options(f):
    """Shared --exclude / --exclude-from / --gitignore options."""
    f = click.option("--gitignore", "use_gitignore", is_flag=True, default=False,
                     help="Honor .gitignore files found in the tree.")(f)
    f = click.option("--exclude-from", "exclude_from", type=click.Path(exists=True, dir_okay=False),
                     envvar="TREESYNC_EXCLUDE_FROM",
                     help="Read exclude patterns from file (or set TREESYNC_EXCLUDE_FROM).")(f)
    f = click.option("--exclude", multiple=True,
                     help="Exclude paths matching pattern (gitignore syntax, repeatable).")(f)
    return f


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """treesync: make one directory tree mirror another.

    \b
    Quick start:
      treesync sync ./photos /mnt/backup/photos
      treesync sync -n ./photos /mnt/backup/photos   (preview)
      treesync ls ./photos

    \b
    Commands:
      sync        Copy new and changed files, delete stale ones
      ls          List the files a sync would see
      prune       Remove empty directories
      empty       Remove everything inside a directory
      find-root   Locate the nearest ancestor holding a marker file
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)
