"""Tests for the treesync CLI."""

import logging
import os

import pytest

from treesync.cli import main


@pytest.fixture(autouse=True)
def _reset_logging():
    logger = logging.getLogger("treesync")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------

class TestSyncCommand:
    def test_sync(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {"a.txt": "a", "b/c.txt": "c"})
        write_tree(dst, {"stale.txt": "s"})
        result = runner.invoke(main, ["sync", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "+2 -1" in result.output
        assert read_tree(dst) == read_tree(src)

    def test_sync_twice_no_changes(self, runner, src, dst, write_tree):
        write_tree(src, {"a.txt": "a"})
        runner.invoke(main, ["sync", str(src), str(dst)])
        result = runner.invoke(main, ["sync", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "no changes" in result.output

    def test_dry_run(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {"new.txt": "n", "changed.txt": "v2"})
        write_tree(dst, {"changed.txt": "v1-longer", "stale.txt": "s"})
        result = runner.invoke(main, ["sync", "-n", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines == ["~ changed.txt", "+ new.txt", "- stale.txt"]
        assert read_tree(dst) == {"changed.txt": b"v1-longer", "stale.txt": b"s"}

    def test_dry_run_no_delete_hides_deletes(self, runner, src, dst, write_tree):
        write_tree(dst, {"stale.txt": "s"})
        result = runner.invoke(main, ["sync", "--dry-run", "--no-delete", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "stale.txt" not in result.output

    def test_no_delete(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {"a.txt": "a"})
        write_tree(dst, {"stale.txt": "s"})
        result = runner.invoke(main, ["sync", "--no-delete", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "stale.txt" in read_tree(dst)

    def test_no_prune(self, runner, src, dst, write_tree):
        write_tree(dst, {"empty": None})
        result = runner.invoke(main, ["sync", "--no-prune", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert (dst / "empty").is_dir()

    def test_exclude_applies_to_both_sides(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {"a.txt": "a", "a.log": "log"})
        write_tree(dst, {"local.log": "mine"})
        result = runner.invoke(main, ["sync", "--exclude", "*.log", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert read_tree(dst) == {"a.txt": b"a", "local.log": b"mine"}

    def test_exclude_from_envvar(self, runner, src, dst, tmp_path, write_tree, read_tree):
        write_tree(src, {"a.txt": "a", "b.tmp": "t"})
        patterns = tmp_path / "excludes"
        patterns.write_text("*.tmp\n")
        result = runner.invoke(main, ["sync", str(src), str(dst)],
                               env={"TREESYNC_EXCLUDE_FROM": str(patterns)})
        assert result.exit_code == 0, result.output
        assert read_tree(dst) == {"a.txt": b"a"}

    def test_gitignore(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {".gitignore": "build/\n", "main.c": "int", "build/main.o": "obj"})
        result = runner.invoke(main, ["sync", "--gitignore", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert read_tree(dst) == {"main.c": b"int"}

    def test_compare_always(self, runner, src, dst, write_tree):
        write_tree(src, {"a.txt": "a"})
        runner.invoke(main, ["sync", str(src), str(dst)])
        result = runner.invoke(main, ["sync", "--compare", "always", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "~1" in result.output

    def test_compare_invalid_choice(self, runner, src, dst):
        result = runner.invoke(main, ["sync", "--compare", "hash", str(src), str(dst)])
        assert result.exit_code != 0

    def test_workers_envvar(self, runner, src, dst, write_tree, read_tree):
        write_tree(src, {"a.txt": "a"})
        result = runner.invoke(main, ["sync", str(src), str(dst)], env={"TREESYNC_WORKERS": "1"})
        assert result.exit_code == 0, result.output
        assert read_tree(dst) == {"a.txt": b"a"}

    def test_workers_must_be_positive(self, runner, src, dst):
        result = runner.invoke(main, ["sync", "--workers", "0", str(src), str(dst)])
        assert result.exit_code != 0

    def test_missing_source(self, runner, tmp_path, dst):
        result = runner.invoke(main, ["sync", str(tmp_path / "nope"), str(dst)])
        assert result.exit_code != 0

    def test_same_directory(self, runner, src):
        result = runner.invoke(main, ["sync", str(src), str(src)])
        assert result.exit_code == 1
        assert "same directory" in result.output

    def test_copy_error_exits_1(self, runner, src, dst, write_tree):
        write_tree(src, {"ok.txt": "ok"})
        os.symlink(src / "nowhere", src / "dangling")
        result = runner.invoke(main, ["sync", "--follow-symlinks", str(src), str(dst)])
        assert result.exit_code == 1
        assert "ERROR: dangling" in result.output
        assert (dst / "ok.txt").exists()

    def test_progress_bar(self, runner, src, dst, write_tree):
        write_tree(src, {f"{i}.txt": "x" for i in range(3)})
        result = runner.invoke(main, ["sync", "--progress", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "+3" in result.output

    def test_verbose_logs_actions(self, runner, src, dst, write_tree):
        write_tree(src, {"a.txt": "a"})
        result = runner.invoke(main, ["-v", "sync", str(src), str(dst)])
        assert result.exit_code == 0, result.output
        assert "+ a.txt" in result.output
        assert "Synced" in result.output

    def test_watch_rejects_dry_run(self, runner, src, dst):
        result = runner.invoke(main, ["sync", "--watch", "-n", str(src), str(dst)])
        assert result.exit_code == 1
        assert "incompatible" in result.output

    def test_watch_rejects_small_debounce(self, runner, src, dst):
        result = runner.invoke(main, ["sync", "--watch", "--debounce", "10", str(src), str(dst)])
        assert result.exit_code == 1
        assert "debounce" in result.output


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

class TestLsCommand:
    def test_ls(self, runner, src, write_tree):
        write_tree(src, {"b.txt": "b", "a/c.txt": "c"})
        result = runner.invoke(main, ["ls", str(src)])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["a/c.txt", "b.txt"]

    def test_ls_dirs(self, runner, src, write_tree):
        write_tree(src, {"a/c.txt": "c", "empty": None})
        result = runner.invoke(main, ["ls", "--dirs", str(src)])
        assert result.output.splitlines() == ["a", "a/c.txt", "empty"]

    def test_ls_as_root(self, runner, src, write_tree):
        write_tree(src, {"a/c.txt": "c"})
        result = runner.invoke(main, ["ls", "--as-root", str(src)])
        assert result.output.splitlines() == ["/a/c.txt"]

    def test_ls_full_path(self, runner, src, write_tree):
        write_tree(src, {"x.txt": "x"})
        result = runner.invoke(main, ["ls", "--full-path", str(src)])
        assert result.output.splitlines() == [os.path.abspath(src / "x.txt")]

    def test_ls_full_path_and_as_root_conflict(self, runner, src):
        result = runner.invoke(main, ["ls", "--full-path", "--as-root", str(src)])
        assert result.exit_code == 1

    def test_ls_exclude(self, runner, src, write_tree):
        write_tree(src, {"a.py": "", "a.pyc": "", "__pycache__/a.pyc": ""})
        result = runner.invoke(main, ["ls", "--exclude", "*.pyc", str(src)])
        assert result.output.splitlines() == ["a.py"]


# ---------------------------------------------------------------------------
# prune / empty / find-root
# ---------------------------------------------------------------------------

class TestPruneCommand:
    def test_prune(self, runner, dst, write_tree):
        write_tree(dst, {"a/b": None, "keep/file.txt": "f"})
        result = runner.invoke(main, ["prune", str(dst)])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["- a/b/", "- a/"]
        assert (dst / "keep").is_dir()

    def test_prune_keep_hidden(self, runner, dst, write_tree):
        write_tree(dst, {"mac/.DS_Store": "junk"})
        result = runner.invoke(main, ["prune", "--keep-hidden", str(dst)])
        assert result.exit_code == 0, result.output
        assert (dst / "mac" / ".DS_Store").exists()

    def test_prune_max_depth(self, runner, dst, write_tree):
        write_tree(dst, {"a/b": None})
        result = runner.invoke(main, ["prune", "--max-depth", "1", str(dst)])
        assert result.exit_code == 0, result.output
        assert (dst / "a" / "b").is_dir()

    def test_prune_exclude(self, runner, dst, write_tree):
        write_tree(dst, {"cache": None, "tmp": None})
        result = runner.invoke(main, ["prune", "--exclude", "cache/", str(dst)])
        assert result.exit_code == 0, result.output
        assert (dst / "cache").is_dir()
        assert not (dst / "tmp").exists()


class TestEmptyCommand:
    def test_empty(self, runner, dst, write_tree):
        write_tree(dst, {"a.txt": "a", ".hidden": "h", "sub/x": "x"})
        result = runner.invoke(main, ["empty", str(dst)])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in dst.iterdir()) == [".hidden"]

    def test_empty_include_hidden(self, runner, dst, write_tree):
        write_tree(dst, {"a.txt": "a", ".hidden": "h"})
        result = runner.invoke(main, ["empty", "--include-hidden", str(dst)])
        assert result.exit_code == 0, result.output
        assert list(dst.iterdir()) == []

    def test_empty_dry_run(self, runner, dst, write_tree):
        write_tree(dst, {"a.txt": "a", ".hidden": "h"})
        result = runner.invoke(main, ["empty", "-n", str(dst)])
        assert result.output.splitlines() == ["- a.txt"]
        assert (dst / "a.txt").exists()


class TestFindRootCommand:
    def test_found(self, runner, tmp_path, write_tree):
        write_tree(tmp_path / "proj", {"setup.cfg": "", "src/pkg": None})
        start = tmp_path / "proj" / "src" / "pkg"
        result = runner.invoke(main, ["find-root", "setup.cfg", "--start", str(start)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == str(tmp_path / "proj" / "setup.cfg")

    def test_not_found(self, runner, tmp_path):
        result = runner.invoke(main, ["find-root", "no-such-marker-7f3a9c.cfg",
                                      "--start", str(tmp_path)])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

class TestEntryPoint:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for cmd in ("sync", "ls", "prune", "empty", "find-root"):
            assert cmd in result.output

    def test_console_script_target(self):
        from treesync._cli_entry import main as entry
        assert callable(entry)
