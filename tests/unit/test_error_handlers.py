"""
Unit tests for error handling utilities.
"""

import logging

from page_resolver.utils.error_handlers import (
    ConfigurationError,
    CycleError,
    DataSourceConnectionError,
    LoadError,
    NoSelectionError,
    QueryError,
    ResolverError,
    log_error_with_context,
)


class TestResolverErrors:
    """Test the exception hierarchy."""

    def test_all_are_resolver_errors(self):
        errors = [
            DataSourceConnectionError("down"),
            LoadError("bad row"),
            QueryError("bad query"),
            CycleError(5, [5, 6, 5]),
            NoSelectionError(),
            ConfigurationError("bad config"),
        ]
        assert all(isinstance(error, ResolverError) for error in errors)

    def test_stages(self):
        assert DataSourceConnectionError("x").stage == "connect"
        assert LoadError("x").stage == "load"
        assert QueryError("x").stage == "query"
        assert CycleError(1, [1, 1]).stage == "resolve"
        assert NoSelectionError().stage == "select"
        assert ConfigurationError("x").stage == "initialization"

    def test_to_dict_with_original_error(self):
        original = ValueError("not a number")
        error = LoadError(
            "cannot read pages row 3",
            relation="pages",
            row_number=3,
            original_error=original,
        )

        result = error.to_dict()

        assert result["error_type"] == "LoadError"
        assert result["stage"] == "load"
        assert result["relation"] == "pages"
        assert result["row_number"] == 3
        assert result["original_error_type"] == "ValueError"
        assert result["original_error_message"] == "not a number"

    def test_cycle_error_message(self):
        error = CycleError(7, [7, 8, 7])

        assert str(error) == "Cyclic page hierarchy reached from page 7: 7 -> 8 -> 7"
        assert error.to_dict()["path"] == [7, 8, 7]

    def test_no_selection_message(self):
        assert str(NoSelectionError()) == "no UIDs found"


class TestLogErrorWithContext:
    """Test log_error_with_context."""

    def test_logs_stage_and_context(self, caplog):
        logger = logging.getLogger("test_error_handlers")
        error = QueryError(
            "cannot execute argument query", original_error=KeyError("k")
        )

        with caplog.at_level(logging.ERROR, logger="test_error_handlers"):
            log_error_with_context(error, logger, {"context": "Resolution failed"})

        assert "Error in query: [QueryError]" in caplog.text
        assert "Original error: [KeyError]" in caplog.text
        assert "context: Resolution failed" in caplog.text

    def test_plain_exception(self, caplog):
        logger = logging.getLogger("test_error_handlers")

        with caplog.at_level(logging.ERROR, logger="test_error_handlers"):
            log_error_with_context(RuntimeError("boom"), logger, {"stage": "load"})

        assert "Error in load: [RuntimeError] boom" in caplog.text
