"""Shared fixtures for fsembed tests."""

from __future__ import annotations

import importlib.util
import uuid
from pathlib import Path

import pytest


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """
    A small directory tree:

        site/
            a.txt          "alpha"
            blank.txt      (empty)
            sub/b.txt      "bravo"
            empty/deeper/  (no files)
    """
    root = tmp_path / "site"
    (root / "sub").mkdir(parents=True)
    (root / "empty" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "blank.txt").write_bytes(b"")
    (root / "sub" / "b.txt").write_text("bravo", encoding="utf-8")
    return root


@pytest.fixture
def load_module():
    """Import a generated module from its file path under a unique name."""

    def load(path: Path):
        spec = importlib.util.spec_from_file_location(f"generated_{uuid.uuid4().hex}", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return load
