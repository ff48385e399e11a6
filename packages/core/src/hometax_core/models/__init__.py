"""Data models for hometax-core.

- Report payloads as returned by the filing lookup (reports.py)
- Summary records and pipeline results (results.py)
- Audit trail of each run (audit.py)
"""

from hometax_core.models.audit import (
    AuditEntry,
    AuditError,
    AuditTrail,
    RunStatus,
)
from hometax_core.models.reports import (
    BUSINESS_INCOME_CODE,
    DeductionItem,
    FilingSummary,
    IncomeRow,
    IncomeRowList,
    Report,
    ReportKind,
    TaxComputation,
    TaxCreditRow,
    TaxCreditRowList,
    coerce_amount,
    parse_amount,
)
from hometax_core.models.results import (
    ErrorCode,
    FilingResult,
    ValidationOutcome,
    YearlyFilingSummary,
    merge_keyed_records,
)

__all__ = [
    # Audit
    "AuditEntry",
    "AuditError",
    "AuditTrail",
    "RunStatus",
    # Reports
    "BUSINESS_INCOME_CODE",
    "DeductionItem",
    "FilingSummary",
    "IncomeRow",
    "IncomeRowList",
    "Report",
    "ReportKind",
    "TaxComputation",
    "TaxCreditRow",
    "TaxCreditRowList",
    "coerce_amount",
    "parse_amount",
    # Results
    "ErrorCode",
    "FilingResult",
    "ValidationOutcome",
    "YearlyFilingSummary",
    "merge_keyed_records",
]
