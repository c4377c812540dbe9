"""Shared fixtures for the test suite."""

import json
import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers installed by configure_logging() so they never outlive a test's capture streams."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_nodecache_handler", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def make_repo(tmp_path):
    """Create a repository directory with a package.json and return its path."""
    def _make(dirname, dependencies=None, dev_dependencies=None, name=None):
        repo = tmp_path / dirname
        repo.mkdir(parents=True, exist_ok=True)
        manifest = {"version": "1.0.0"}
        if name is not None:
            manifest["name"] = name
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        (repo / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        return str(repo)
    return _make
