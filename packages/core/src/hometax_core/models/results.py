"""Result models for filing resolution.

The pipeline returns a ``FilingResult``: either a ``YearlyFilingSummary``
or a ``ValidationOutcome``, never both. The summary is a fixed-schema record
tagged with its year index; ``as_keyed_record()`` renders the flat
``<field>_year<N>`` mapping that downstream consumers store.
"""

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import FilingValidationError
from .audit import AuditTrail


class ErrorCode(str, Enum):
    """Stable, machine-checkable outcome codes."""

    MISSING_REPORT = "MISSING_REPORT"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    NO_BUSINESS_INCOME = "NO_BUSINESS_INCOME"
    PROCESSING_ERROR = "PROCESSING_ERROR"


class ValidationOutcome(BaseModel):
    """A failed validation or processing step."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str
    report_name: Optional[str] = None


class YearlyFilingSummary(BaseModel):
    """Financial summary derived from one filing.

    The basic fields are always present. The extended fields are ``None``
    for the base year (``year_index <= 0``); ``income_deduction`` and the
    credit/reduction partition can also stay ``None`` when the detail
    report carries no list to read.
    """

    model_config = ConfigDict(frozen=True)

    year_index: int = Field(description="filing year - start year + 1")

    # Basic fields (납부계산서)
    account_duty: str = Field(description="Bookkeeping duty classification code")
    filing_type: str = Field(
        serialization_alias="filling_type",
        description="Income tax return type code",
    )
    total_income: Decimal
    taxation_standard: Decimal
    calculated_tax: Decimal
    tax_reduction: Decimal
    tax_credit: Decimal
    determined_tax: Decimal
    additional_tax: Decimal = Decimal("0")
    pre_paid_tax: Decimal
    paid_agricultural_tax: Decimal = Decimal("0")

    # Extended fields (year_index > 0)
    business_income: Optional[Decimal] = None
    income_deduction: Optional[Decimal] = None
    tax_reduction_excluded: Optional[Decimal] = None
    tax_credit_excluded: Optional[Decimal] = None
    tax_reduction_included: Optional[Decimal] = None
    tax_credit_included: Optional[Decimal] = None

    @property
    def is_base_year(self) -> bool:
        return self.year_index <= 0

    def as_keyed_record(self) -> dict[str, Any]:
        """Render the ``<field>_year<N>`` mapping, omitting absent fields."""
        values = self.model_dump(by_alias=True, exclude_none=True, exclude={"year_index"})
        return {f"{name}_year{self.year_index}": value for name, value in values.items()}


def merge_keyed_records(summaries: Iterable[YearlyFilingSummary]) -> dict[str, Any]:
    """Combine summaries from separate filings into one flat person record.

    Raises:
        ValueError: If two summaries share a year index.
    """
    merged: dict[str, Any] = {}
    seen: set[int] = set()
    for summary in sorted(summaries, key=lambda s: s.year_index):
        if summary.year_index in seen:
            raise ValueError(f"Duplicate year index: {summary.year_index}")
        seen.add(summary.year_index)
        merged.update(summary.as_keyed_record())
    return merged


class FilingResult(BaseModel):
    """Discriminated pipeline result: exactly one of data/error is set."""

    model_config = ConfigDict(frozen=True)

    data: Optional[YearlyFilingSummary] = None
    error: Optional[ValidationOutcome] = None
    audit_trail: Optional[AuditTrail] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "FilingResult":
        if (self.data is None) == (self.error is None):
            raise ValueError("Exactly one of data or error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> YearlyFilingSummary:
        """Return the summary or raise FilingValidationError."""
        if self.error is not None:
            raise FilingValidationError(
                self.error.message,
                code=self.error.code.value,
                report_name=self.error.report_name,
            )
        return self.data
