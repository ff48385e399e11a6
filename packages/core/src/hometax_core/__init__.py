"""Hometax Core - Filing report validation and yearly summary aggregation."""

__version__ = "0.1.0"

from .aggregator import FilingAggregator
from .config import HometaxSettings, configure_logging, get_settings, load_settings
from .exceptions import (
    ConfigurationError,
    FilingValidationError,
    HometaxError,
    ReportDataError,
)
from .locator import find_report
from .models import (
    ErrorCode,
    FilingResult,
    Report,
    ReportKind,
    ValidationOutcome,
    YearlyFilingSummary,
    merge_keyed_records,
)
from .processor import HometaxFilingProcessor, process_hometax_filing
from .tax_codes import DEFAULT_TAX_CODES, TaxCodeTable
from .validator import REQUIRED_REPORTS, validate_reports

__all__ = [
    # Pipeline
    "process_hometax_filing",
    "HometaxFilingProcessor",
    "FilingAggregator",
    "find_report",
    "validate_reports",
    "REQUIRED_REPORTS",
    # Models
    "ErrorCode",
    "FilingResult",
    "Report",
    "ReportKind",
    "ValidationOutcome",
    "YearlyFilingSummary",
    "merge_keyed_records",
    # Code tables
    "DEFAULT_TAX_CODES",
    "TaxCodeTable",
    # Configuration
    "HometaxSettings",
    "configure_logging",
    "get_settings",
    "load_settings",
    # Exceptions
    "HometaxError",
    "ReportDataError",
    "FilingValidationError",
    "ConfigurationError",
]
