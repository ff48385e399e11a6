"""Public entry point: resolve a filing's report collection into a summary.

The pipeline per call:
1. Ingest raw report mappings into Report models (payloads of the
   reports the pipeline reads are validated, the rest are kept by name)
2. Locate the 납부계산서 (first page) and resolve the year index from it
3. Validate report presence and structure for that year index
4. Aggregate the yearly summary

Validation failures come back as a FilingResult with ``error`` set. Anything
raised along the way is converted into a ``PROCESSING_ERROR`` outcome, so
the caller always gets exactly one of ``data`` or ``error``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

import structlog

from .aggregator import FilingAggregator
from .config import HometaxSettings, get_settings
from .exceptions import ReportDataError
from .locator import find_report
from .models import (
    AuditError,
    AuditTrail,
    ErrorCode,
    FilingResult,
    Report,
    ReportKind,
    ValidationOutcome,
)
from .tax_codes import DEFAULT_TAX_CODES, TaxCodeTable
from .validator import validate_reports

logger = structlog.get_logger()

ReportInput = Union[Report, Mapping[str, Any]]

DEFAULT_PROCESSING_ERROR_MESSAGE = "데이터 처리 중 오류가 발생했습니다."


def _report_name(report: Any) -> Optional[str]:
    if isinstance(report, Report):
        return report.name
    name = report.get("ReportName") if isinstance(report, Mapping) else None
    return name if isinstance(name, str) else None


def ingest_reports(reports: Optional[Sequence[ReportInput]]) -> list[Report]:
    """
    Turn raw report mappings into Report models, keeping order.

    Only the report the locator would resolve for each ReportKind (the
    first whose name contains the kind) has its payload validated. Every
    other entry keeps just its name, so unrelated or duplicate reports
    cannot fail the filing.
    """
    if not reports:
        return []

    names = [_report_name(report) for report in reports]
    resolved = set()
    for kind in ReportKind:
        for index, name in enumerate(names):
            if name is not None and kind.value in name:
                resolved.add(index)
                break

    collection = []
    for index, report in enumerate(reports):
        if isinstance(report, Report):
            collection.append(report)
        elif index in resolved:
            collection.append(Report.model_validate(report))
        else:
            logger.debug("report_payload_skipped", report=names[index], position=index)
            collection.append(Report(name=names[index]))
    return collection


def resolve_year_index(first_page: Report, start_year: int) -> int:
    """
    Compute ``filing year - start_year + 1`` from the first page.

    The filing year is the first four characters of the taxable period
    start date (``txnrmStrtDt``).

    Raises:
        ReportDataError: If the start date is missing or not numeric
    """
    computation = first_page.tax_computation
    if computation is None:
        raise ReportDataError(
            f"{ReportKind.PAYMENT_COMPUTATION.value}에 ttirnam101DVO 데이터가 없습니다.",
            report_name=first_page.name,
            field="ttirnam101DVO",
        )

    year_text = computation.filing_period_start[:4]
    if len(year_text) != 4 or not year_text.isdigit():
        raise ReportDataError(
            f"신고기간 시작일을 해석할 수 없습니다: {computation.filing_period_start!r}",
            report_name=first_page.name,
            field="txnrmStrtDt",
        )
    return int(year_text) - start_year + 1


class HometaxFilingProcessor:
    """
    Resolve Hometax filing lookups into yearly summaries.

    Holds no per-filing state, so one instance can serve many filings,
    including concurrently.
    """

    def __init__(
        self,
        settings: Optional[HometaxSettings] = None,
        code_table: Optional[TaxCodeTable] = None,
    ):
        """
        Initialize the processor.

        Args:
            settings: Core settings (default: the cached environment settings,
                resolved on each run)
            code_table: Reduction/credit code sets (default: built-in tables)
        """
        self.settings = settings
        self.code_table = code_table or DEFAULT_TAX_CODES

    def _failure(
        self,
        outcome: ValidationOutcome,
        audit_trail: Optional[AuditTrail],
    ) -> FilingResult:
        if audit_trail is not None:
            if not audit_trail.errors:
                audit_trail.add_error(
                    AuditError(code=outcome.code.value, message=outcome.message)
                )
            audit_trail.fail()
        return FilingResult(error=outcome, audit_trail=audit_trail)

    def process(
        self,
        reports: Optional[Sequence[ReportInput]],
        start_year: int,
    ) -> FilingResult:
        """
        Run the full pipeline for one filing.

        Args:
            reports: The filing's report collection (models or raw mappings)
            start_year: Baseline filing year supplied by the caller

        Returns:
            FilingResult with exactly one of data/error set
        """
        audit_trail = None
        log = logger.bind(start_year=start_year)

        try:
            settings = self.settings or get_settings()
            if settings.record_audit_trail:
                audit_trail = AuditTrail()

            collection = ingest_reports(reports)

            first_page = find_report(collection, ReportKind.PAYMENT_COMPUTATION)
            if first_page is None:
                log.info("first_page_missing", report_count=len(collection))
                return self._failure(
                    ValidationOutcome(
                        code=ErrorCode.MISSING_REPORT,
                        message=f"{ReportKind.PAYMENT_COMPUTATION.value}를 찾을 수 없습니다.",
                        report_name=ReportKind.PAYMENT_COMPUTATION.value,
                    ),
                    audit_trail,
                )

            year_index = resolve_year_index(first_page, start_year)
            log = log.bind(year_index=year_index)
            if audit_trail is not None:
                audit_trail.year_index = year_index
                audit_trail.add_entry(
                    step="year_index",
                    action="resolve year index",
                    input_value=first_page.tax_computation.filing_period_start,
                    output_value=str(year_index),
                    source=first_page.name,
                )

            outcome = validate_reports(collection, year_index)
            if outcome is not None:
                return self._failure(outcome, audit_trail)

            aggregator = FilingAggregator(code_table=self.code_table, audit_trail=audit_trail)
            summary = aggregator.aggregate(collection, first_page, year_index)
        except Exception as e:
            log.exception("filing_processing_failed", error=str(e))
            if audit_trail is not None:
                audit_trail.add_error(
                    AuditError.from_exception(e, ErrorCode.PROCESSING_ERROR.value)
                )
            return self._failure(
                ValidationOutcome(
                    code=ErrorCode.PROCESSING_ERROR,
                    message=str(e) or DEFAULT_PROCESSING_ERROR_MESSAGE,
                ),
                audit_trail,
            )

        if audit_trail is not None:
            audit_trail.complete()
        log.info("filing_processed", field_count=len(summary.as_keyed_record()))
        return FilingResult(data=summary, audit_trail=audit_trail)


def process_hometax_filing(
    reports: Optional[Sequence[ReportInput]],
    start_year: int,
    *,
    code_table: Optional[TaxCodeTable] = None,
    settings: Optional[HometaxSettings] = None,
) -> FilingResult:
    """Resolve one filing's reports into a FilingResult."""
    processor = HometaxFilingProcessor(settings=settings, code_table=code_table)
    return processor.process(reports, start_year)
