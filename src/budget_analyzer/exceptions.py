"""Custom exceptions for the Budget Analyzer.

This module provides a hierarchy of exception classes for consistent error
handling across the budget estimation workflow. All exceptions inherit from
BudgetAnalyzerError, making it easy to catch all application-specific errors.

Example:
    try:
        estimate = await client.estimate_net_income(request)
    except AnalysisError as e:
        logger.error("analysis_failed", error=str(e), **e.details)
    except EstimationError as e:
        # Tax stage and analysis stage failures both land here
        logger.error("estimation_failed", error=str(e), **e.details)
"""

from typing import Any, Optional


class BudgetAnalyzerError(Exception):
    """Base exception for all Budget Analyzer errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise BudgetAnalyzerError("Something went wrong", details={"code": 500})
        BudgetAnalyzerError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize BudgetAnalyzerError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable by the
                user re-running the calculation. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(BudgetAnalyzerError):
    """Error raised when the budget form is not ready for estimation.

    Raised before any remote call is attempted. The message is meant to be
    shown to the user as-is.

    Attributes:
        field: The form field that failed validation (if known).
        value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value


class EstimationError(BudgetAnalyzerError):
    """Error raised when a call to the estimation service fails.

    Covers network failures, non-2xx responses, timeouts, and structured
    responses that cannot be parsed into the expected shape.

    Attributes:
        operation: The client operation being attempted.
        api_error: The underlying error message from the service or parser.

    Example:
        >>> raise EstimationError(
        ...     "Failed to generate tax estimation",
        ...     operation="estimate_net_income",
        ...     api_error="Missing field: disclaimer",
        ... )
        EstimationError: Failed to generate tax estimation
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        api_error: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize EstimationError.

        Args:
            message: Human-readable error description.
            operation: The client operation that failed.
            api_error: The underlying API or parse error message.
            details: Optional dictionary with additional context.
            recoverable: Whether re-running may succeed. Defaults to True
                since most service errors (rate limits, timeouts) are transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.api_error = api_error

        if operation:
            self.details["operation"] = operation
        if api_error:
            self.details["api_error"] = api_error


class AnalysisError(EstimationError):
    """Error raised when the narrative budget analysis cannot be produced."""


class ConfigurationError(BudgetAnalyzerError):
    """Error raised when configuration is invalid or missing.

    Configuration errors are fatal at startup and require the operator to
    fix the environment.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected


__all__ = [
    "BudgetAnalyzerError",
    "ValidationError",
    "EstimationError",
    "AnalysisError",
    "ConfigurationError",
]
