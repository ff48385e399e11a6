"""Presence and structure checks for a filing's report collection.

Validation runs before any value is derived. Which reports are required
depends on the year index: the base year (``year_index <= 0``) only needs
the first page, later years need the four detail reports as well.

Outcomes are returned, never raised. The first failure wins.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Optional

import structlog

from .locator import find_report
from .models import ErrorCode, Report, ReportKind, ValidationOutcome

logger = structlog.get_logger()


def _always(year_index: int) -> bool:
    return True


def _after_base_year(year_index: int) -> bool:
    return year_index > 0


@dataclass(frozen=True)
class ReportRequirement:
    """A report that must be present when ``applies(year_index)`` holds."""

    kind: ReportKind
    applies: Callable[[int], bool]

    def is_required(self, year_index: int) -> bool:
        return self.applies(year_index)


# Checked in this order
REQUIRED_REPORTS: tuple[ReportRequirement, ...] = (
    ReportRequirement(ReportKind.PAYMENT_COMPUTATION, _always),
    ReportRequirement(ReportKind.BUSINESS_INCOME_BREAKDOWN, _after_base_year),
    ReportRequirement(ReportKind.COMPREHENSIVE_INCOME, _after_base_year),
    ReportRequirement(ReportKind.INCOME_DEDUCTION, _after_base_year),
    ReportRequirement(ReportKind.TAX_CREDIT, _after_base_year),
)


def required_reports(year_index: int) -> list[ReportKind]:
    """Report kinds required for ``year_index``, in check order."""
    return [req.kind for req in REQUIRED_REPORTS if req.is_required(year_index)]


def _missing(kind: ReportKind) -> ValidationOutcome:
    return ValidationOutcome(
        code=ErrorCode.MISSING_REPORT,
        message=(
            "전자신고결과조회 데이터에 오류가 있습니다.\n"
            f"오류내용: {kind.value} 페이지가 조회되지 않습니다."
        ),
        report_name=kind.value,
    )


def _invalid_structure(kind: ReportKind) -> ValidationOutcome:
    return ValidationOutcome(
        code=ErrorCode.INVALID_STRUCTURE,
        message=f"{kind.value}의 데이터 구조가 올바르지 않습니다.",
        report_name=kind.value,
    )


def validate_report_structures(reports: Sequence[Report]) -> Optional[ValidationOutcome]:
    """
    Check the nested lists of the year-dependent reports.

    Each check only applies when its report is present. Empty lists count
    as present.
    """
    income_report = find_report(reports, ReportKind.COMPREHENSIVE_INCOME)
    if income_report is not None:
        rows = (
            income_report.income_rows.rows if income_report.income_rows is not None else None
        )
        if rows is None:
            return _invalid_structure(ReportKind.COMPREHENSIVE_INCOME)

        has_business_income = any(
            row.is_business_income and row.has_amount for row in rows
        )
        if not has_business_income:
            return ValidationOutcome(
                code=ErrorCode.NO_BUSINESS_INCOME,
                message=(
                    f"{ReportKind.COMPREHENSIVE_INCOME.value}에서 "
                    "사업소득 데이터를 찾을 수 없습니다."
                ),
                report_name=ReportKind.COMPREHENSIVE_INCOME.value,
            )

    credit_report = find_report(reports, ReportKind.TAX_CREDIT)
    if credit_report is not None and (
        credit_report.tax_credit_rows is None or credit_report.tax_credit_rows.rows is None
    ):
        return _invalid_structure(ReportKind.TAX_CREDIT)

    deduction_report = find_report(reports, ReportKind.INCOME_DEDUCTION)
    if deduction_report is not None and deduction_report.deduction_items is None:
        return _invalid_structure(ReportKind.INCOME_DEDUCTION)

    return None


def validate_reports(
    reports: Optional[Sequence[Report]],
    year_index: int,
) -> Optional[ValidationOutcome]:
    """
    Validate a report collection for the given year index.

    Args:
        reports: The filing's report collection
        year_index: Resolved year index (``<= 0`` is the base year)

    Returns:
        None when the collection is usable, otherwise the first failure
    """
    for requirement in REQUIRED_REPORTS:
        if requirement.is_required(year_index) and find_report(reports, requirement.kind) is None:
            logger.info(
                "report_missing",
                report=requirement.kind.value,
                year_index=year_index,
            )
            return _missing(requirement.kind)

    if year_index > 0:
        outcome = validate_report_structures(reports)
        if outcome is not None:
            logger.info(
                "report_structure_invalid",
                code=outcome.code.value,
                report=outcome.report_name,
                year_index=year_index,
            )
            return outcome

    logger.debug("reports_validated", year_index=year_index, report_count=len(reports or ()))
    return None
