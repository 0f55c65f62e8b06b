"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fsctl.filesystem.engine import OperationEngine
from fsctl.filesystem.trash import TrashAdapter


def _remove(target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo the root logger setup done by each CLI invocation."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point XDG_CONFIG_HOME at an empty folder so no user config leaks in."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "fsctl"


@pytest.fixture
def trashed() -> list[str]:
    """Paths handed to the fake trash backend."""
    return []


@pytest.fixture
def fake_trash(trashed: list[str]) -> TrashAdapter:
    """Trash adapter whose backend records each path and then removes it."""

    def backend(path: str) -> None:
        trashed.append(path)
        _remove(Path(path))

    return TrashAdapter(backend=backend)


@pytest.fixture
def engine(fake_trash: TrashAdapter) -> OperationEngine:
    """Operation engine with small chunks and a fake trash."""
    return OperationEngine(trash=fake_trash, chunk_size=4, progress_threshold=8)


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, str | None]], Path]:
    """Build a folder tree from a mapping of relative path to content.

    A value of None creates a folder; a string creates a file.
    """

    def _make(root: Path, layout: dict[str, str | None]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in layout.items():
            target = root / rel
            if content is None:
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content)
        return root

    return _make


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside tmp_path so CLI paths stay short and relative."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def system_trash(monkeypatch: pytest.MonkeyPatch, trashed: list[str]) -> list[str]:
    """Replace send2trash for adapters built by the CLI."""

    def fake_send2trash(path: str) -> None:
        trashed.append(path)
        _remove(Path(path))

    monkeypatch.setattr("fsctl.filesystem.trash.send2trash", fake_send2trash)
    return trashed
