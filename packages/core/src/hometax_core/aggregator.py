"""Derivation of the yearly summary fields from a validated report collection.

The summary is built in bursts: the basic first-page fields always, then for
years after the base year the business income, the income deductions and the
tax reduction/credit partition. Every step is logged for the audit trail.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, Optional

import structlog

from .exceptions import ReportDataError
from .locator import find_report
from .models import (
    AuditTrail,
    DeductionItem,
    Report,
    ReportKind,
    TaxCreditRow,
    YearlyFilingSummary,
)
from .tax_codes import DEFAULT_TAX_CODES, TaxCodeTable

logger = structlog.get_logger()

ZERO = Decimal("0")


def sum_item_amounts(items: Iterable[DeductionItem]) -> Decimal:
    return sum((item.parsed_amount() for item in items), ZERO)


def sum_rows_by_code(rows: Iterable[TaxCreditRow], codes: frozenset[str]) -> Decimal:
    """Sum the amounts of rows whose entry code is in ``codes``."""
    return sum((row.parsed_amount() for row in rows if row.entry_code in codes), ZERO)


class FilingAggregator:
    """
    Build a YearlyFilingSummary from a report collection.

    The collection must already have passed ``validate_reports`` for the
    same year index; the aggregator does not repeat those checks.
    """

    def __init__(
        self,
        code_table: Optional[TaxCodeTable] = None,
        audit_trail: Optional[AuditTrail] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            code_table: Reduction/credit code sets (default: built-in tables)
            audit_trail: Trail to record steps on; steps are only logged when None
        """
        self.code_table = code_table or DEFAULT_TAX_CODES
        self._audit_trail = audit_trail

    def _log_step(
        self,
        step: str,
        field_name: str,
        input_value: str,
        output_value: Any,
        source: str,
        year_index: int,
    ) -> None:
        """Log a derived field and add it to the audit trail."""
        key = f"{field_name}_year{year_index}"
        if self._audit_trail is not None:
            self._audit_trail.add_entry(
                step=step,
                action=f"set {key}",
                input_value=input_value,
                output_value=str(output_value),
                source=source,
                field_name=key,
            )
        logger.info(
            "aggregation_step",
            step=step,
            field=key,
            input=input_value,
            output=str(output_value),
            source=source,
        )

    def initialize_basic_data(self, first_page: Report, year_index: int) -> dict[str, Any]:
        """
        Read the basic fields off the first-page report.

        Raises:
            ReportDataError: If either first-page payload is missing
        """
        summary = first_page.filing_summary
        computation = first_page.tax_computation
        if summary is None or computation is None:
            missing = "ttirndm001DVO" if summary is None else "ttirnam101DVO"
            raise ReportDataError(
                f"{ReportKind.PAYMENT_COMPUTATION.value}에 {missing} 데이터가 없습니다.",
                report_name=first_page.name,
                field=missing,
            )

        fields: dict[str, Any] = {
            "account_duty": summary.bookkeeping_duty_code,
            "filing_type": summary.return_type_code,
            "total_income": summary.total_income,
            "taxation_standard": computation.taxation_standard,
            "calculated_tax": computation.computed_tax,
            "tax_reduction": computation.reduction_tax,
            "tax_credit": computation.credit_tax,
            "determined_tax": computation.determined_tax,
            # Not derived yet
            "additional_tax": ZERO,
            "pre_paid_tax": computation.prepaid_tax,
            "paid_agricultural_tax": ZERO,
        }
        source = first_page.name or ReportKind.PAYMENT_COMPUTATION.value
        for name, value in fields.items():
            self._log_step(
                step="basic_data",
                field_name=name,
                input_value=str(value),
                output_value=value,
                source=source,
                year_index=year_index,
            )
        return fields

    def process_business_income(
        self,
        reports: Sequence[Report],
        fields: dict[str, Any],
        year_index: int,
    ) -> None:
        """Take the first business-income row (code 40); 0 when absent."""
        report = find_report(reports, ReportKind.COMPREHENSIVE_INCOME)
        rows = []
        if report is not None and report.income_rows is not None:
            rows = report.income_rows.rows or []

        row = next((r for r in rows if r.is_business_income), None)
        business_income = row.parsed_amount() if row is not None and row.has_amount else ZERO

        fields["business_income"] = business_income
        self._log_step(
            step="business_income",
            field_name="business_income",
            input_value=f"{len(rows)} income rows",
            output_value=business_income,
            source=ReportKind.COMPREHENSIVE_INCOME.value,
            year_index=year_index,
        )

    def process_deductions(
        self,
        reports: Sequence[Report],
        fields: dict[str, Any],
        year_index: int,
    ) -> None:
        """Sum the deduction items; leave the field unset without an items list."""
        report = find_report(reports, ReportKind.INCOME_DEDUCTION)
        if report is None or report.deduction_items is None:
            return

        total = sum_item_amounts(report.deduction_items)
        fields["income_deduction"] = total
        self._log_step(
            step="income_deduction",
            field_name="income_deduction",
            input_value=f"{len(report.deduction_items)} deduction items",
            output_value=total,
            source=ReportKind.INCOME_DEDUCTION.value,
            year_index=year_index,
        )

    def process_tax_credits_and_reductions(
        self,
        reports: Sequence[Report],
        fields: dict[str, Any],
        year_index: int,
    ) -> None:
        """
        Partition the breakdown rows into excluded reduction/credit sums.

        The included parts are the first-page totals minus the excluded
        sums. Negative results are kept as they are.
        """
        report = find_report(reports, ReportKind.TAX_CREDIT)
        if report is None or report.tax_credit_rows is None or report.tax_credit_rows.rows is None:
            return

        rows = report.tax_credit_rows.rows
        reduction_excluded = sum_rows_by_code(rows, self.code_table.reduction)
        credit_excluded = sum_rows_by_code(rows, self.code_table.credit)

        fields["tax_reduction_excluded"] = reduction_excluded
        fields["tax_credit_excluded"] = credit_excluded
        self._log_step(
            step="tax_reduction_excluded",
            field_name="tax_reduction_excluded",
            input_value=f"{len(rows)} rows, table {self.code_table.version}",
            output_value=reduction_excluded,
            source=ReportKind.TAX_CREDIT.value,
            year_index=year_index,
        )
        self._log_step(
            step="tax_credit_excluded",
            field_name="tax_credit_excluded",
            input_value=f"{len(rows)} rows, table {self.code_table.version}",
            output_value=credit_excluded,
            source=ReportKind.TAX_CREDIT.value,
            year_index=year_index,
        )

        self.calculate_included_taxes(fields, year_index)

    def calculate_included_taxes(self, fields: dict[str, Any], year_index: int) -> None:
        reduction_included = fields["tax_reduction"] - fields["tax_reduction_excluded"]
        credit_included = fields["tax_credit"] - fields["tax_credit_excluded"]

        if reduction_included < 0 or credit_included < 0:
            logger.warning(
                "included_tax_negative",
                year_index=year_index,
                tax_reduction_included=str(reduction_included),
                tax_credit_included=str(credit_included),
            )

        fields["tax_reduction_included"] = reduction_included
        fields["tax_credit_included"] = credit_included
        self._log_step(
            step="tax_reduction_included",
            field_name="tax_reduction_included",
            input_value=f"{fields['tax_reduction']} - {fields['tax_reduction_excluded']}",
            output_value=reduction_included,
            source=ReportKind.PAYMENT_COMPUTATION.value,
            year_index=year_index,
        )
        self._log_step(
            step="tax_credit_included",
            field_name="tax_credit_included",
            input_value=f"{fields['tax_credit']} - {fields['tax_credit_excluded']}",
            output_value=credit_included,
            source=ReportKind.PAYMENT_COMPUTATION.value,
            year_index=year_index,
        )

    def aggregate(
        self,
        reports: Sequence[Report],
        first_page: Report,
        year_index: int,
    ) -> YearlyFilingSummary:
        """
        Derive the full summary for ``year_index``.

        Args:
            reports: Validated report collection
            first_page: The 납부계산서 report of the collection
            year_index: Resolved year index

        Returns:
            Frozen YearlyFilingSummary
        """
        fields = self.initialize_basic_data(first_page, year_index)

        if year_index > 0:
            self.process_business_income(reports, fields, year_index)
            self.process_deductions(reports, fields, year_index)
            self.process_tax_credits_and_reductions(reports, fields, year_index)

        return YearlyFilingSummary(year_index=year_index, **fields)
