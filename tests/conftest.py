"""Shared test fixtures for openapi2lua.

Provides reusable fixtures for loading spec fixtures, building path trees,
creating isolated config environments, and managing output state.  These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from openapi2lua.generator import build_tree
from openapi2lua.models import PathTreeNode
from openapi2lua.output import OutputManager, reset_output, set_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager's Rich console caches ``sys.stderr`` at creation time.
    When Typer's CliRunner swaps the stream during a test, the cached
    reference goes stale; resetting forces a fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_spec_path() -> Path:
    """Path to the OpenAPI 3.0 example spec used across the suite."""
    return FIXTURES_DIR / "openapi.json"


@pytest.fixture
def example_raw(example_spec_path: Path) -> dict[str, Any]:
    """Load the raw example spec dict."""
    with open(example_spec_path) as f:
        return json.load(f)


@pytest.fixture
def example_routes() -> dict[str, dict[str, Any]]:
    """A small hand-written route map, already in tree-builder input shape."""
    return {
        "/users": {"get": {"operationId": "listUsers"}, "post": {"operationId": "createUser"}},
        "/users/{id}": {"get": {"operationId": "getUser"}},
        "/users/{id}/flags": {"get": {"operationId": "getUserFlags"}},
        "/echo": {"post": {"operationId": "echo"}},
        "/search": {"get": {"operationId": "search"}},
    }


@pytest.fixture
def example_tree(example_routes: dict[str, dict[str, Any]]) -> PathTreeNode:
    """Path tree built from :func:`example_routes`."""
    return build_tree(example_routes)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME at tmp_path, clears all OPENAPI2LUA_* environment
    variables, and changes the working directory to tmp_path so that no
    project file from the developer's checkout leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["OPENAPI2LUA_SPEC", "OPENAPI2LUA_OUT", "OPENAPI2LUA_NAME"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test's duration."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()
