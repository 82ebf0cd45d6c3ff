"""Shared test fixtures for java-stack-nav."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from fakes import FakeProvider, class_symbol

from java_stack_nav.core.resolver import ResolutionCache, get_resolution_cache

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
TRACES_DIR = FIXTURES_DIR / "traces"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def simple_trace() -> str:
    """Load a single stack trace with three frames."""
    return (TRACES_DIR / "simple.txt").read_text()


@pytest.fixture
def caused_by_trace() -> str:
    """Load a stack trace with a "Caused by" section."""
    return (TRACES_DIR / "caused_by.txt").read_text()


@pytest.fixture
def wrapped_trace() -> str:
    """Load a stack trace with a frame wrapped over two lines."""
    return (TRACES_DIR / "wrapped.txt").read_text()


@pytest.fixture
def multiple_traces() -> str:
    """Load a log holding two separate stack traces."""
    return (TRACES_DIR / "multiple.txt").read_text()


@pytest.fixture
def resolution_cache() -> ResolutionCache:
    """A fresh cache, isolated from the process-wide one."""
    return ResolutionCache()


@pytest.fixture
def app_provider() -> FakeProvider:
    """A jdtls provider that knows the classes of the sample traces."""
    known = [
        "com.example.app.Service",
        "com.example.app.Controller",
        "com.example.app.Main",
        "com.example.io.Reader",
    ]
    return FakeProvider(
        "jdtls",
        symbols={
            name: [class_symbol(name, "/src/" + name.replace(".", "/") + ".java")]
            for name in known
        },
    )


@pytest.fixture(autouse=True)
def reset_resolution_cache() -> Iterator[None]:
    """Keep the process-wide cache from leaking between tests."""
    get_resolution_cache().clear()
    yield
    get_resolution_cache().clear()
