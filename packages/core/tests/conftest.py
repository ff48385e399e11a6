"""Shared report builders for the hometax-core tests."""

from typing import Any, Optional

import pytest

from hometax_core import HometaxSettings


def first_page(
    start_date: str = "20230101",
    name: str = "종합소득세 납부계산서",
    **overrides: Any,
) -> dict[str, Any]:
    """Raw 납부계산서 report as returned by the filing lookup."""
    summary = {
        "bkpDutyClCd": "01",
        "inctxRtnTypeCd": "10",
        "agiAmt": "50000000",
    }
    computation = {
        "txnrmStrtDt": start_date,
        "stasAmt": "42000000",
        "cmptTxamt": "5040000",
        "reTxamt": "300000",
        "ddcTxamt": "200000",
        "dcsTxamt": "4540000",
        "ppmTxamt": "1000000",
    }
    for key, value in overrides.items():
        if key in summary:
            summary[key] = value
        else:
            computation[key] = value
    return {"ReportName": name, "ttirndm001DVO": summary, "ttirnam101DVO": computation}


def business_income_breakdown() -> dict[str, Any]:
    return {"ReportName": "사업소득명세서"}


def comprehensive_income(rows: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    if rows is None:
        rows = [
            {"incClCd": "30", "incAmt": "8000000"},
            {"incClCd": "40", "incAmt": "30000000"},
        ]
    return {
        "ReportName": "종합소득금액및결손금이월결손금공제명세서",
        "ttirndl012DVOList": {"rows": rows},
    }


def income_deduction(items: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    if items is None:
        items = [{"Amount": "1500000"}, {"Amount": 500000}]
    return {"ReportName": "소득공제명세서", "Items": items}


def tax_credit(rows: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    if rows is None:
        rows = [
            {"ereCd": "211", "ereAmt": "100000"},
            {"ereCd": "281", "ereAmt": "50000"},
            {"ereCd": "999", "ereAmt": "70000"},
        ]
    return {"ReportName": "세액공제명세서", "txamtDdcReSpecBrkdDVOList": {"rows": rows}}


def full_filing(start_date: str = "20230101") -> list[dict[str, Any]]:
    """A complete collection for a year after the base year, shuffled."""
    return [
        tax_credit(),
        comprehensive_income(),
        first_page(start_date),
        income_deduction(),
        business_income_breakdown(),
    ]


@pytest.fixture
def settings() -> HometaxSettings:
    return HometaxSettings(env="test", log_level="DEBUG", record_audit_trail=True)


@pytest.fixture
def filing() -> list[dict[str, Any]]:
    return full_filing()
