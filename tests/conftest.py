"""Shared fixtures: throwaway project trees and a clean logging state."""

import logging
from pathlib import Path

import pytest
import structlog


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create files (relative path -> content) under root; "/"-suffixed keys are dirs."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        if relative.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def make_tree():
    return write_tree


@pytest.fixture
def src_root(tmp_path):
    """Directory holding source projects, separate from the work directory."""
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory the run is executed from."""
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def git_project(src_root):
    """A git checkout named myapp with a README and some sources."""
    return write_tree(src_root / "myapp", {
        "README": "hello\n",
        ".gitignore": "*.pyc\n",
        ".git/HEAD": "ref: refs/heads/main\n",
        ".git/objects/": "",
        "src/app.py": "print('hi')\n",
        "src/empty/": "",
    })


@pytest.fixture
def plain_project(src_root):
    """A non-VCS project named myapp with build output next to sources."""
    return write_tree(src_root / "myapp", {
        "README": "hello\n",
        "setup.cfg": "[metadata]\n",
        "build/lib/app.py": "compiled\n",
        "dist/myapp.whl": "wheel\n",
        "src/app.py": "print('hi')\n",
        "src/build/keep.txt": "nested build dir\n",
    })


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """configure_logging() installs a structlog handler on root; drop it after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
