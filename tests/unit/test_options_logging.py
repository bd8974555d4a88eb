#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for traversal options, findings, and logging configuration."""

import dataclasses
import io
import logging

import pytest
from utils import expr_stmt, ident, program

from astvisit import (
    Finding,
    FindingCollector,
    FindingSink,
    TraversalOptions,
    ValidationError,
    VisitorRegistry,
    traverse,
)
from astvisit.constants import DEFAULT_MAX_REVISITS
from astvisit.logging_utils import configure_logging, reset_logging


@pytest.mark.unit
class TestTraversalOptions:
    """Test the options dataclass."""

    def test_defaults(self) -> None:
        options = TraversalOptions()

        assert options.validate_tree is True
        assert options.max_revisits == DEFAULT_MAX_REVISITS
        assert options.fail_on_unknown_types is False
        assert options.require_program_root is True

    def test_create_updated(self) -> None:
        options = TraversalOptions()

        updated = options.create_updated(max_revisits=5)

        assert updated.max_revisits == 5
        assert options.max_revisits == DEFAULT_MAX_REVISITS
        assert isinstance(updated, TraversalOptions)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            TraversalOptions().max_revisits = 1  # type: ignore[misc]

    def test_negative_max_revisits(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TraversalOptions(max_revisits=-1)

        assert exc_info.value.parameter_name == "max_revisits"
        assert exc_info.value.parameter_value == -1

    def test_create_updated_validates(self) -> None:
        with pytest.raises(ValidationError):
            TraversalOptions().create_updated(max_revisits=-5)

    def test_field_help_metadata(self) -> None:
        for option_field in dataclasses.fields(TraversalOptions):
            assert option_field.metadata.get("help")


@pytest.mark.unit
class TestFindings:
    """Test findings and sinks."""

    def test_equality_uses_node_identity(self) -> None:
        first = ident("x")
        second = ident("x")

        assert Finding(first, "msg") == Finding(first, "msg")
        assert Finding(first, "msg") != Finding(second, "msg")
        assert len({Finding(first, "msg"), Finding(first, "msg")}) == 1

    def test_immutable(self) -> None:
        finding = Finding(ident("x"), "msg")

        with pytest.raises(dataclasses.FrozenInstanceError):
            finding.message = "other"  # type: ignore[misc]

    def test_str_without_location(self) -> None:
        assert str(Finding(ident("x"), "Too short.", rule="short-names")) == "error: Too short. (short-names)"

    def test_collector(self) -> None:
        collector = FindingCollector()
        finding = Finding(ident("x"), "msg")

        collector.add(finding)

        assert isinstance(collector, FindingSink)
        assert collector.findings == [finding]
        assert list(collector) == [finding]
        collector.clear()
        assert len(collector) == 0


@pytest.fixture
def package_logger():
    """Undo configure_logging after each test."""
    yield logging.getLogger("astvisit")
    reset_logging()


@pytest.mark.unit
class TestConfigureLogging:
    """Test logging configuration for host applications."""

    def test_level_by_name(self, package_logger) -> None:
        configured = configure_logging("warning", stream=io.StringIO())

        assert configured is package_logger
        assert configured.level == logging.WARNING
        assert len(configured.handlers) == 1
        assert configured.propagate is False

    def test_unknown_level_name_falls_back_to_info(self, package_logger) -> None:
        assert configure_logging("chatty", stream=io.StringIO()).level == logging.INFO

    def test_root_handlers_untouched(self, package_logger) -> None:
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        try:
            configure_logging(logging.INFO, stream=io.StringIO())

            assert sentinel in root.handlers
        finally:
            root.removeHandler(sentinel)

    def test_reconfiguring_replaces_handlers(self, package_logger) -> None:
        first = io.StringIO()
        second = io.StringIO()
        configure_logging(logging.INFO, stream=first)
        configure_logging(logging.INFO, stream=second)

        logging.getLogger("astvisit.registry").info("registered")

        assert len(package_logger.handlers) == 1
        assert first.getvalue() == ""
        assert second.getvalue() == "INFO: registered\n"

    def test_level_filters_library_messages(self, package_logger) -> None:
        stream = io.StringIO()
        configure_logging("warning", stream=stream)

        logging.getLogger("astvisit.registry").info("quiet")
        logging.getLogger("astvisit.registry").warning("loud")

        assert stream.getvalue() == "WARNING: loud\n"

    def test_trace_mode_logs_node_visits(self, package_logger) -> None:
        stream = io.StringIO()
        configure_logging(logging.INFO, trace_mode=True, stream=stream)

        logging.getLogger("astvisit.traversal").debug("Visiting Identifier")
        logging.getLogger("astvisit.registry").debug("not traced")

        assert logging.getLogger("astvisit.traversal").level == logging.DEBUG
        assert "[DEBUG] [astvisit.traversal] Visiting Identifier" in stream.getvalue()
        assert "not traced" not in stream.getvalue()

    def test_log_file(self, package_logger, tmp_path) -> None:
        log_file = tmp_path / "astvisit.log"

        configured = configure_logging(logging.INFO, log_file=str(log_file), stream=io.StringIO())
        logging.getLogger("astvisit.rules").info("hello from the linter")
        for handler in configured.handlers:
            handler.flush()

        assert len(configured.handlers) == 2
        assert "hello from the linter" in log_file.read_text(encoding="utf-8")

    def test_reset_logging(self, package_logger) -> None:
        configure_logging(logging.DEBUG, trace_mode=True, stream=io.StringIO())

        reset_logging()

        assert package_logger.handlers == []
        assert package_logger.propagate is True
        assert package_logger.level == logging.NOTSET
        assert logging.getLogger("astvisit.traversal").level == logging.NOTSET

    def test_trace_mode_follows_a_traversal(self, package_logger) -> None:
        stream = io.StringIO()
        configure_logging(logging.INFO, trace_mode=True, stream=stream)

        traverse(program(expr_stmt(ident("x"))), VisitorRegistry())

        output = stream.getvalue()
        assert "Visiting NodePath(Program at <root>)" in output
        assert "Visiting NodePath(Identifier at ExpressionStatement.expression)" in output
