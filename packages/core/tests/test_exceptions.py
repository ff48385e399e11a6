"""Tests for the exception hierarchy."""

import pytest

from hometax_core import (
    ConfigurationError,
    FilingValidationError,
    HometaxError,
    ReportDataError,
)


class TestExceptionHierarchy:
    """All package errors should be catchable as HometaxError."""

    @pytest.mark.parametrize(
        "exc",
        [
            ReportDataError("bad data"),
            FilingValidationError("missing", code="MISSING_REPORT"),
            ConfigurationError("bad config"),
        ],
    )
    def test_subclasses(self, exc):
        assert isinstance(exc, HometaxError)

    def test_str_is_message(self):
        assert str(HometaxError("Something went wrong")) == "Something went wrong"

    def test_repr(self):
        err = HometaxError("oops", details={"a": 1})

        assert repr(err) == "HometaxError(message='oops', details={'a': 1}, recoverable=False)"


class TestReportDataError:
    def test_details_populated(self):
        err = ReportDataError("no payload", report_name="납부계산서", field="ttirnam101DVO")

        assert err.details == {"report_name": "납부계산서", "field": "ttirnam101DVO"}
        assert not err.recoverable


class TestFilingValidationError:
    def test_processing_errors_are_not_recoverable(self):
        err = FilingValidationError("boom", code="PROCESSING_ERROR")

        assert not err.recoverable
        assert err.details["code"] == "PROCESSING_ERROR"

    def test_missing_reports_are_recoverable(self):
        err = FilingValidationError("missing", code="MISSING_REPORT", report_name="세액공제명세서")

        assert err.recoverable
        assert err.report_name == "세액공제명세서"
