"""
Shared pytest configuration and fixtures for goedu-theta tests.

This file contains:
- Markers for different test categories
- A temporary configuration directory with helpers to write layer files
- An isolated fake process environment for the resolver
"""

import json
import logging
from pathlib import Path
import sys

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests that resolve a full configuration")


def pytest_collection_modifyitems(items):
    """Mark resolver and entry point tests as integration tests."""
    for item in items:
        if any(name in str(item.fspath) for name in ("test_resolver", "test_main")):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


class ConfigDir:
    """Temporary configuration directory with a dotenv file next to it."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.path = root / "configs"
        self.path.mkdir()
        self.dotenv_path = root / ".env"

    def write(self, name: str, data) -> Path:
        """Write ``data`` as JSON (or raw text when it is a string) to ``name``."""
        target = self.path / name
        if isinstance(data, str):
            target.write_text(data, encoding="utf-8")
        else:
            target.write_text(json.dumps(data), encoding="utf-8")
        return target

    def write_base(self, data) -> Path:
        return self.write("config.json", data)

    def write_dotenv(self, text: str) -> Path:
        self.dotenv_path.write_text(text, encoding="utf-8")
        return self.dotenv_path


@pytest.fixture()
def config_dir(tmp_path):
    """Provide an empty configuration directory."""
    return ConfigDir(tmp_path)


@pytest.fixture()
def environ():
    """Provide an isolated process environment mapping."""
    return {}


@pytest.fixture()
def make_resolver(config_dir, environ):
    """Build resolvers bound to the temporary directory and fake environment."""
    from goedu_theta.config import ConfigResolver

    def _make(**kwargs):
        kwargs.setdefault("config_dir", config_dir.path)
        kwargs.setdefault("dotenv_path", config_dir.dotenv_path)
        kwargs.setdefault("environ", environ)
        return ConfigResolver(**kwargs)

    return _make


@pytest.fixture()
def debug_caplog(caplog):
    """Capture every goedu-theta record down to debug level."""
    caplog.set_level(logging.DEBUG, logger="goedu_theta")
    return caplog


@pytest.fixture(autouse=True)
def no_port_probe(monkeypatch):
    """Keep the validator's port probe away from the host's sockets."""
    import psutil

    monkeypatch.setattr(psutil, "net_connections", lambda kind="inet": [])
