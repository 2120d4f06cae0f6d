"""
Error handling utilities for the Page Resolver.

This module provides the exception hierarchy raised by the resolution pipeline
and helpers for reporting those errors to the operator.

Classes:
    ResolverError: Base exception for all resolver errors.
    DataSourceConnectionError: Exception for data source connect/ping failures.
    LoadError: Exception for startup relation read/decode failures.
    QueryError: Exception for ad-hoc query read/decode failures.
    CycleError: Exception for cyclic parent chains in the page relation.
    NoSelectionError: Exception for an empty final id selection.
    ConfigurationError: Exception for configuration errors.

Functions:
    log_error_with_context: Log error with full context for debugging.
"""

import logging
import traceback
from typing import Any, Dict, List, Optional, Sequence


class ResolverError(Exception):
    """
    Base exception for page resolver errors.

    Every resolver error is terminal for the run; there is no recoverable
    variant.

    Attributes:
        message: Error message describing what went wrong.
        stage: Optional pipeline stage where the error occurred.
        original_error: Optional underlying exception that was wrapped.
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize ResolverError.

        Args:
            message: Error message describing the issue.
            stage: Optional pipeline stage name.
            original_error: Optional underlying exception that caused this error.
        """
        self.message = message
        self.stage = stage
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dictionary containing error_type, message, stage, and original
            error information if available.
        """
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "stage": self.stage,
        }

        if self.original_error:
            result["original_error_type"] = type(self.original_error).__name__
            result["original_error_message"] = str(self.original_error)

        return result


class DataSourceConnectionError(ResolverError):
    """
    Exception raised when the data source cannot be opened or pinged.

    Attributes:
        dsn: Connection string with the password masked, if known.
    """

    def __init__(
        self,
        message: str,
        dsn: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            stage="connect",
            original_error=original_error,
        )
        self.dsn = dsn

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["dsn"] = self.dsn
        return result


class LoadError(ResolverError):
    """
    Exception for startup relation read/decode failures.

    Attributes:
        relation: Name of the relation being loaded ("pages" or "domains").
        row_number: Optional 1-based row number that failed to decode.
    """

    def __init__(
        self,
        message: str,
        relation: Optional[str] = None,
        row_number: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize LoadError.

        Args:
            message: Error message describing the load issue.
            relation: Optional relation name.
            row_number: Optional 1-based row number of the bad row.
            original_error: Optional underlying driver or decode exception.
        """
        super().__init__(
            message=message,
            stage="load",
            original_error=original_error,
        )
        self.relation = relation
        self.row_number = row_number

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary including relation and row number.

        Returns:
            Dictionary with all base fields plus relation and row_number.
        """
        result = super().to_dict()
        result["relation"] = self.relation
        result["row_number"] = self.row_number
        return result


class QueryError(ResolverError):
    """
    Exception for ad-hoc query read/decode failures.

    Attributes:
        row_number: Optional 1-based row number that failed to decode.
    """

    def __init__(
        self,
        message: str,
        row_number: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            stage="query",
            original_error=original_error,
        )
        self.row_number = row_number

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["row_number"] = self.row_number
        return result


class CycleError(ResolverError):
    """
    Exception for a parent chain that loops back on itself.

    Attributes:
        start_id: Page id the traversal started from.
        path: Ids visited up to and including the repeated id.
    """

    def __init__(self, start_id: int, path: Sequence[int]):
        """
        Initialize CycleError.

        Args:
            start_id: Page id the traversal started from.
            path: Ids visited, ending with the id seen twice.
        """
        chain = " -> ".join(str(uid) for uid in path)
        super().__init__(
            message=f"Cyclic page hierarchy reached from page {start_id}: {chain}",
            stage="resolve",
        )
        self.start_id = start_id
        self.path: List[int] = list(path)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["start_id"] = self.start_id
        result["path"] = self.path
        return result


class NoSelectionError(ResolverError):
    """Exception raised when the final id selection is empty."""

    def __init__(self, message: str = "no UIDs found"):
        super().__init__(message=message, stage="select")


class ConfigurationError(ResolverError):
    """
    Exception for configuration errors.

    Attributes:
        config_key: Optional configuration key that caused the error.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Error message describing configuration issue.
            config_key: Optional configuration key that is invalid.
            original_error: Optional underlying exception that caused this error.
        """
        super().__init__(
            message=message,
            stage="initialization",
            original_error=original_error,
        )
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary including config key.

        Returns:
            Dictionary with all base fields plus config_key.
        """
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result


def log_error_with_context(
    error: Exception, logger: logging.Logger, context: Dict[str, Any]
) -> None:
    """
    Log error with context information for debugging.

    Logs error type, message, the wrapped driver error if any, and every
    context entry. In DEBUG mode, also logs the full stack trace.

    Args:
        error: The exception that occurred.
        logger: Logger instance to use for logging.
        context: Dictionary with contextual information (stage, dsn, etc.).
    """
    error_type = type(error).__name__
    stage = context.get("stage")
    if stage is None and isinstance(error, ResolverError):
        stage = error.stage

    logger.error(f"Error in {stage or 'unknown'}: [{error_type}] {error}")

    if isinstance(error, ResolverError) and error.original_error:
        original_type = type(error.original_error).__name__
        logger.error(f"  Original error: [{original_type}] {error.original_error}")

    for key, value in context.items():
        if key != "stage":
            logger.error(f"  {key}: {value}")

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Stack trace:")
        logger.debug(traceback.format_exc())
