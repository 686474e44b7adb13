"""Shared pytest fixtures for sourceform tests."""

import ast

import pytest

from sourceform.core.context import stack_depth
from sourceform.core.environment import SOURCEFORM_HOST_VAR, configure_host, reset_host
from sourceform.core.hosts import CapableHost, PlainHost


@pytest.fixture(autouse=True)
def fresh_host(monkeypatch: pytest.MonkeyPatch):
    """Start every test with no selected host and no leftover frames."""
    monkeypatch.delenv(SOURCEFORM_HOST_VAR, raising=False)
    reset_host()
    assert stack_depth() == 0
    yield
    reset_host()
    assert stack_depth() == 0, "annotation frame leaked out of a test"


@pytest.fixture
def capable_host() -> CapableHost:
    return configure_host(CapableHost())


@pytest.fixture
def plain_host() -> PlainHost:
    return configure_host(PlainHost())


@pytest.fixture
def sample_source() -> str:
    """Return a small module with a nested call."""
    return "x = 1\nresult = outer(inner(x), 42)\nprint(result)\n"


@pytest.fixture
def sample_tree(sample_source: str) -> ast.Module:
    return ast.parse(sample_source, filename="sample.py")


@pytest.fixture
def outer_call(sample_tree: ast.Module) -> ast.Call:
    assign = sample_tree.body[1]
    assert isinstance(assign, ast.Assign)
    assert isinstance(assign.value, ast.Call)
    return assign.value
