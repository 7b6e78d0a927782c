"""Shared pytest configuration for perch examples.

Provides the ``example_app`` fixture that loads a fresh App instance
from the ``app.py`` file in the same directory as the test.  Each call
re-executes app.py in an isolated module namespace, so every test gets
its own route table.
"""

import importlib.util
from pathlib import Path

import pytest


def load_example_module(app_path: Path):
    """Execute *app_path* as a fresh module and return it."""
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_module(request: pytest.FixtureRequest):
    """Load the sibling app.py next to the test file as a module."""
    return load_example_module(Path(request.path).parent / "app.py")


@pytest.fixture
def example_app(example_module):
    """Load a fresh App from the sibling app.py next to the test file."""
    return example_module.app
