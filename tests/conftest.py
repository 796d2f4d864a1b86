"""Shared fixtures for treesync tests."""

import os

import pytest
from click.testing import CliRunner


def _write_tree(root, files):
    """Create *files* ({rel_path: str | bytes | None}) under *root*.

    A value of ``None`` creates an (empty) directory.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        p = root / rel
        if content is None:
            p.mkdir(parents=True, exist_ok=True)
            continue
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content)
    return root


def _read_tree(root):
    """Return {rel_path: bytes} for every file under *root*."""
    result = {}
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            full = os.path.join(dirpath, name)
            rel = os.path.relpath(full, root).replace(os.sep, "/")
            with open(full, "rb") as f:
                result[rel] = f.read()
    return result


@pytest.fixture
def write_tree():
    return _write_tree


@pytest.fixture
def read_tree():
    return _read_tree


@pytest.fixture
def src(tmp_path):
    p = tmp_path / "src"
    p.mkdir()
    return p


@pytest.fixture
def dst(tmp_path):
    p = tmp_path / "dst"
    p.mkdir()
    return p


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()
