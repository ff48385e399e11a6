"""Tests for the yearly summary aggregator."""

from decimal import Decimal

import pytest

from hometax_core import DEFAULT_TAX_CODES, FilingAggregator, ReportDataError, TaxCodeTable
from hometax_core.aggregator import sum_rows_by_code
from hometax_core.models import AuditTrail, Report, TaxCreditRow
from hometax_core.processor import ingest_reports

from conftest import comprehensive_income, first_page, full_filing, income_deduction, tax_credit


def _aggregate(reports, year_index=1, code_table=None):
    collection = ingest_reports(reports)
    aggregator = FilingAggregator(code_table=code_table)
    return aggregator.aggregate(collection, collection_first_page(collection), year_index)


def collection_first_page(collection):
    return next(r for r in collection if r.filing_summary is not None)


class TestBasicData:
    """Test suite for initialize_basic_data."""

    def test_reads_first_page_fields(self):
        """Basic fields should come straight from the first page."""
        page = Report.model_validate(first_page())
        fields = FilingAggregator().initialize_basic_data(page, 1)

        assert fields["account_duty"] == "01"
        assert fields["filing_type"] == "10"
        assert fields["total_income"] == Decimal("50000000")
        assert fields["taxation_standard"] == Decimal("42000000")
        assert fields["calculated_tax"] == Decimal("5040000")
        assert fields["tax_reduction"] == Decimal("300000")
        assert fields["tax_credit"] == Decimal("200000")
        assert fields["determined_tax"] == Decimal("4540000")
        assert fields["pre_paid_tax"] == Decimal("1000000")

    def test_placeholders_are_zero(self):
        """Additional and agricultural tax are not derived yet."""
        page = Report.model_validate(first_page())
        fields = FilingAggregator().initialize_basic_data(page, 1)

        assert fields["additional_tax"] == 0
        assert fields["paid_agricultural_tax"] == 0

    def test_numeric_wire_values_pass_through(self):
        """Amounts given as numbers should be accepted as-is."""
        page = Report.model_validate(first_page(agiAmt=1234, stasAmt=1000.5))
        fields = FilingAggregator().initialize_basic_data(page, 1)

        assert fields["total_income"] == Decimal("1234")
        assert fields["taxation_standard"] == Decimal("1000.5")

    def test_missing_payload_raises(self):
        """A first page without its summary payload cannot be read."""
        page = Report.model_validate({"ReportName": "납부계산서"})

        with pytest.raises(ReportDataError) as exc_info:
            FilingAggregator().initialize_basic_data(page, 1)

        assert exc_info.value.field == "ttirndm001DVO"


class TestBusinessIncome:
    """Test suite for process_business_income."""

    def test_takes_code_40_row(self):
        summary = _aggregate(full_filing())

        assert summary.business_income == Decimal("30000000")

    def test_first_match_not_sum(self):
        """Only the first code 40 row should be used."""
        reports = full_filing()
        reports[1] = comprehensive_income([
            {"incClCd": "40", "incAmt": "100"},
            {"incClCd": "40", "incAmt": "900"},
        ])

        assert _aggregate(reports).business_income == Decimal("100")

    def test_blank_amount_defaults_to_zero(self):
        """When the first code 40 row has no amount, the value is 0."""
        collection = ingest_reports([comprehensive_income([{"incClCd": "40", "incAmt": ""}])])
        fields = {}

        FilingAggregator().process_business_income(collection, fields, 1)

        assert fields["business_income"] == Decimal("0")

    def test_rows_without_classification_code_are_skipped(self):
        reports = full_filing()
        reports[1] = comprehensive_income([
            {"incAmt": "5"},
            {"incClCd": "40", "incAmt": "700"},
        ])

        assert _aggregate(reports).business_income == Decimal("700")

    def test_absent_report_defaults_to_zero(self):
        fields = {}

        FilingAggregator().process_business_income([], fields, 1)

        assert fields["business_income"] == Decimal("0")


class TestDeductions:
    """Test suite for process_deductions."""

    def test_sums_items(self):
        """String and numeric item amounts should both be summed."""
        assert _aggregate(full_filing()).income_deduction == Decimal("2000000")

    def test_empty_items_sum_to_zero(self):
        reports = full_filing()
        reports[3] = income_deduction([])

        assert _aggregate(reports).income_deduction == Decimal("0")

    def test_absent_items_leave_field_unset(self):
        """Without an items list the field is not written."""
        collection = ingest_reports([{"ReportName": "소득공제명세서"}])
        fields = {}

        FilingAggregator().process_deductions(collection, fields, 1)

        assert "income_deduction" not in fields


class TestTaxCreditsAndReductions:
    """Test suite for process_tax_credits_and_reductions."""

    def test_partitions_by_code_table(self):
        summary = _aggregate(full_filing())

        assert summary.tax_reduction_excluded == Decimal("100000")
        assert summary.tax_credit_excluded == Decimal("50000")

    def test_included_is_total_minus_excluded(self):
        summary = _aggregate(full_filing())

        assert summary.tax_reduction_included == summary.tax_reduction - summary.tax_reduction_excluded
        assert summary.tax_credit_included == summary.tax_credit - summary.tax_credit_excluded
        assert summary.tax_reduction_included == Decimal("200000")
        assert summary.tax_credit_included == Decimal("150000")

    def test_unmatched_rows_count_nowhere(self):
        """Rows with unknown codes contribute to neither excluded sum."""
        reports = full_filing()
        reports[0] = tax_credit([{"ereCd": "999", "ereAmt": "70000"}])

        summary = _aggregate(reports)

        assert summary.tax_reduction_excluded == 0
        assert summary.tax_credit_excluded == 0
        assert summary.tax_reduction_included == summary.tax_reduction

    def test_negative_included_is_preserved(self):
        """Excluded amounts above the first-page total are not clamped."""
        reports = full_filing()
        reports[0] = tax_credit([{"ereCd": "211", "ereAmt": "500000"}])

        summary = _aggregate(reports)

        assert summary.tax_reduction_included == Decimal("-200000")

    def test_overlapping_codes_count_in_both(self):
        """A code present in both tables lands in both excluded sums."""
        table = TaxCodeTable(reduction=frozenset({"777"}), credit=frozenset({"777"}))
        reports = full_filing()
        reports[0] = tax_credit([{"ereCd": "777", "ereAmt": "1000"}])

        summary = _aggregate(reports, code_table=table)

        assert table.overlapping_codes == frozenset({"777"})
        assert summary.tax_reduction_excluded == Decimal("1000")
        assert summary.tax_credit_excluded == Decimal("1000")

    def test_rows_outside_code_tables_need_no_amount(self):
        """Subtotal rows carry no amount and are never parsed."""
        reports = full_filing()
        reports[0] = tax_credit([
            {"ereCd": "211", "ereAmt": "100"},
            {"ereCd": "TOTAL"},
            {"ereAmt": "not a number"},
        ])

        summary = _aggregate(reports)

        assert summary.tax_reduction_excluded == Decimal("100")
        assert summary.tax_credit_excluded == Decimal("0")

    def test_absent_rows_leave_fields_unset(self):
        fields = {"tax_reduction": Decimal("1"), "tax_credit": Decimal("1")}

        FilingAggregator().process_tax_credits_and_reductions([], fields, 1)

        assert set(fields) == {"tax_reduction", "tax_credit"}

    def test_sum_rows_by_code(self):
        rows = [
            TaxCreditRow(entry_code="211", amount=Decimal("10")),
            TaxCreditRow(entry_code="211", amount=Decimal("5")),
            TaxCreditRow(entry_code="281", amount=Decimal("7")),
        ]

        assert sum_rows_by_code(rows, DEFAULT_TAX_CODES.reduction) == Decimal("15")
        assert sum_rows_by_code([], DEFAULT_TAX_CODES.reduction) == Decimal("0")

    def test_sum_rows_by_code_parses_matched_rows_only(self):
        rows = [
            TaxCreditRow(entry_code="211", amount="10"),
            TaxCreditRow(entry_code="999", amount="n/a"),
            TaxCreditRow(amount=None),
        ]

        assert sum_rows_by_code(rows, DEFAULT_TAX_CODES.reduction) == Decimal("10")


class TestAggregate:
    """Test suite for FilingAggregator.aggregate."""

    def test_base_year_has_no_extended_fields(self):
        summary = _aggregate([first_page()], year_index=0)

        assert summary.business_income is None
        assert summary.income_deduction is None
        assert summary.tax_reduction_excluded is None
        assert summary.tax_credit_included is None

    def test_records_audit_steps(self):
        """Every derived field should appear on the audit trail."""
        trail = AuditTrail()
        collection = ingest_reports(full_filing())
        FilingAggregator(audit_trail=trail).aggregate(
            collection, collection_first_page(collection), 1
        )

        steps = trail.steps()
        assert "basic_data" in steps
        assert "business_income" in steps
        assert "income_deduction" in steps
        assert "tax_reduction_included" in steps
        assert "business_income_year1" in {entry.field_name for entry in trail.entries}
