"""Shared fixtures for the locdict tests."""

import logging
import os
from pathlib import Path

import pytest

from locdict import configuration


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test away from user configuration files and LOCDICT_ variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for key in list(os.environ):
        if key.startswith("LOCDICT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    configuration._load_config_instance.cache_clear()
    yield
    configuration._load_config_instance.cache_clear()
    package_logger = logging.getLogger("locdict")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True


@pytest.fixture
def write_tsv(tmp_path):
    """Write tab-delimited rows (and optional leading lines) to a file."""

    def _write(name, rows, header_lines=()):
        path = tmp_path / name
        lines = list(header_lines) + ["\t".join(row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def source_rows():
    return [
        ("Button", "btnOpen", "1", "Open"),
        ("Button", "btnClose", "2", "Close"),
        ("Label", "lblGreeting", "3", "Hello {:0}"),
    ]


@pytest.fixture
def destination_rows():
    return [
        ("Button", "btnOpen", "1", "Ouvrir"),
        ("Label", "lblGreeting", "3", "Bonjour {:0}"),
    ]


@pytest.fixture
def read_tsv():
    """Read a written file back as tuples of fields."""

    def _read(path: Path):
        text = path.read_text(encoding="utf-8")
        return [tuple(line.split("\t")) for line in text.splitlines() if line]

    return _read
