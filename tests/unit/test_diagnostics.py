"""Tests for located diagnostics built from active annotations."""

from __future__ import annotations

import ast

import pytest

from sourceform.core.annotate import current_source_form, with_current_source_form
from sourceform.core.diagnostics import (
    annotate_exception,
    current_error_context,
    current_location,
    located_error,
)
from sourceform.core.errors import ExpansionError, UsageError
from sourceform.core.hosts import CapableHost, PlainHost


class TestCurrentLocation:
    def test_no_annotations(self, capable_host: CapableHost) -> None:
        assert current_location() is None
        assert current_error_context() is None

    def test_innermost_frame_wins(self, capable_host: CapableHost, outer_call: ast.Call) -> None:
        inner = outer_call.args[0]
        with current_source_form(outer_call):
            with current_source_form(inner):
                location = current_location(file="sample.py")
        assert location is not None
        assert (location.line, location.column) == (2, 16)

    def test_falls_back_within_frame(self, capable_host: CapableHost, outer_call: ast.Call) -> None:
        with current_source_form(42, outer_call):
            location = current_location()
        assert location is not None
        assert location.column == 10

    def test_falls_back_to_enclosing_frame(
        self, capable_host: CapableHost, outer_call: ast.Call
    ) -> None:
        with current_source_form(outer_call):
            with current_source_form(42, "x"):
                location = current_location()
        assert location is not None
        assert location.column == 10

    def test_plain_host_has_no_location(self, plain_host: PlainHost, outer_call: ast.Call) -> None:
        with current_source_form(outer_call):
            assert current_location() is None


class TestLocatedError:
    def test_error_points_at_sub_form(
        self, capable_host: CapableHost, outer_call: ast.Call, sample_source: str
    ) -> None:
        inner = outer_call.args[0]

        def check():
            raise located_error("bad argument", file="sample.py", source=sample_source)

        with pytest.raises(ExpansionError) as excinfo:
            with_current_source_form([inner, outer_call], check)

        error = excinfo.value
        assert error.message == "bad argument"
        assert error.context is not None
        assert (error.context.file, error.context.line, error.context.column) == (
            "sample.py",
            2,
            16,
        )
        assert error.context.form == "Call"
        text = str(error)
        assert text.startswith("sample.py:2:16 in Call\n")
        assert "   2 | result = outer(inner(x), 42)" in text
        assert text.endswith("bad argument")

    def test_without_location(self, capable_host: CapableHost) -> None:
        with current_source_form(42):
            error = located_error("no position")
        assert isinstance(error, ExpansionError)
        assert error.context is None
        assert str(error) == "no position"

    def test_custom_error_class(self, capable_host: CapableHost, outer_call: ast.Call) -> None:
        with current_source_form(outer_call):
            error = located_error("misuse", error_cls=UsageError)
        assert isinstance(error, UsageError)
        assert error.context is not None
        assert error.context.line == 2

    def test_logs_when_unresolved(
        self, capable_host: CapableHost, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("DEBUG", logger="sourceform.core.diagnostics"):
            with current_source_form("atom"):
                located_error("x")
        assert "No active source form" in caplog.text


class TestAnnotateException:
    def test_adds_note(self, capable_host: CapableHost, outer_call: ast.Call) -> None:
        with current_source_form(outer_call):
            exc = annotate_exception(ValueError("bad"), file="sample.py")
        assert exc.__notes__ == ["while processing source form at sample.py:2:10"]
        assert str(exc) == "bad"

    def test_leaves_exception_alone_without_location(self, capable_host: CapableHost) -> None:
        exc = annotate_exception(ValueError("bad"))
        assert not hasattr(exc, "__notes__")
