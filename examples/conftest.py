"""Shared pytest configuration for perch examples.

Provides the ``example_server`` fixture that loads a fresh Server from the
``app.py`` file in the same directory as the test. Each call re-executes
app.py in an isolated module namespace and builds the server on an
in-process ``AsgiTransport``, so every test starts with a clean store and
no socket is bound.
"""

import importlib.util
from pathlib import Path

import pytest

from perch.server.transport import AsgiTransport


@pytest.fixture
def example_module(request: pytest.FixtureRequest):
    """Load the sibling app.py next to the test file as a fresh module."""
    app_path = Path(request.path).parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_server(example_module):
    return example_module.create_server(AsgiTransport())
