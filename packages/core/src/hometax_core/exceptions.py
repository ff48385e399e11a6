"""Custom exceptions for the Hometax filing core.

Validation outcomes (missing reports, broken structure, no business income)
are returned as values, not raised. The exceptions below cover the remaining
cases: data the aggregator cannot read, callers who prefer exceptions over
the discriminated result, and invalid configuration.

Example:
    result = process_hometax_filing(reports, start_year=2023)
    try:
        summary = result.unwrap()
    except FilingValidationError as e:
        if e.code == ErrorCode.MISSING_REPORT:
            ask_user_to_refetch(e.report_name)
        else:
            raise
"""

from typing import Any, Optional


class HometaxError(Exception):
    """Base exception for all Hometax core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
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


class ReportDataError(HometaxError):
    """Error raised when a report lacks data the aggregator needs.

    Raised from inside the pipeline, for example when the first-page report
    carries no summary payload or its filing start date is not numeric. The
    entry point converts it into a ``PROCESSING_ERROR`` outcome.

    Attributes:
        report_name: Name of the report being read (if known).
        field: The payload or field that could not be read.
    """

    def __init__(
        self,
        message: str,
        *,
        report_name: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.report_name = report_name
        self.field = field

        if report_name:
            self.details["report_name"] = report_name
        if field:
            self.details["field"] = field


class FilingValidationError(HometaxError):
    """Error raised by ``FilingResult.unwrap()`` for a failed filing.

    Attributes:
        code: The machine-checkable error code of the outcome.
        report_name: The report the outcome refers to (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        report_name: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        # Missing or malformed reports can be fixed by fetching again
        super().__init__(
            message, details=details, recoverable=code != "PROCESSING_ERROR"
        )
        self.code = code
        self.report_name = report_name

        self.details["code"] = str(code)
        if report_name:
            self.details["report_name"] = report_name


class ConfigurationError(HometaxError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "HometaxError",
    "ReportDataError",
    "FilingValidationError",
    "ConfigurationError",
]
