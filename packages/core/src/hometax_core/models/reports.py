"""Report models for the Hometax electronic-filing result lookup.

A filing lookup returns a flat list of sub-reports (전자신고결과조회). Each
report is tagged by a Korean name and carries at most one payload shape:

- 납부계산서 (first page): ``ttirndm001DVO`` and ``ttirnam101DVO``
- 종합소득금액및결손금이월결손금공제명세서: ``ttirndl012DVOList.rows``
- 소득공제명세서: ``Items``
- 세액공제명세서: ``txamtDdcReSpecBrkdDVOList.rows``

Field aliases match the wire keys so the models can be validated directly
from decoded JSON. Amounts arrive as strings or numbers. First-page amounts
are coerced to ``Decimal`` on validation; detail-row amounts are kept raw
and coerced only when a row is summed.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


class ReportKind(str, Enum):
    """Canonical names of the sub-reports the core looks up.

    Lookups are substring matches, since the source may append qualifiers
    (e.g. ``"납부계산서_2024"``).
    """

    PAYMENT_COMPUTATION = "납부계산서"
    BUSINESS_INCOME_BREAKDOWN = "사업소득명세서"
    COMPREHENSIVE_INCOME = "종합소득금액및결손금이월결손금공제명세서"
    INCOME_DEDUCTION = "소득공제명세서"
    TAX_CREDIT = "세액공제명세서"


BUSINESS_INCOME_CODE = "40"


def coerce_amount(value: Any) -> Any:
    """Tolerant string-or-number coercion for wire amounts.

    Numbers pass through. Strings are parsed as-is (no currency or locale
    stripping); a blank string counts as zero. Anything that is not a plain
    decimal literal is left for pydantic to reject.
    """
    if isinstance(value, str):
        value = value.strip()
        return value or Decimal("0")
    return value


Amount = Annotated[Decimal, BeforeValidator(coerce_amount)]

# Detail-row amounts stay as received until a row is actually summed
RawAmount = Optional[Union[Decimal, int, float, str]]

_AMOUNT_ADAPTER = TypeAdapter(Amount)


def parse_amount(value: RawAmount) -> Decimal:
    """Coerce a raw row amount, raising ValidationError when unusable."""
    return _AMOUNT_ADAPTER.validate_python(value)


def is_blank_amount(value: RawAmount) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# =============================================================================
# 납부계산서 (FIRST PAGE)
# =============================================================================

class FilingSummary(_WireModel):
    """``ttirndm001DVO``: filer classification and total income."""

    bookkeeping_duty_code: str = Field(
        alias="bkpDutyClCd",
        description="Bookkeeping duty classification (기장의무구분)",
    )
    return_type_code: str = Field(
        alias="inctxRtnTypeCd",
        description="Income tax return type (신고유형)",
    )
    total_income: Amount = Field(
        alias="agiAmt",
        description="Comprehensive income amount (종합소득금액)",
    )


class TaxComputation(_WireModel):
    """``ttirnam101DVO``: the tax computation block of the first page."""

    filing_period_start: str = Field(
        alias="txnrmStrtDt",
        description="Taxable period start date, YYYYMMDD",
    )
    taxation_standard: Amount = Field(alias="stasAmt")
    computed_tax: Amount = Field(alias="cmptTxamt")
    reduction_tax: Amount = Field(alias="reTxamt")
    credit_tax: Amount = Field(alias="ddcTxamt")
    determined_tax: Amount = Field(alias="dcsTxamt")
    prepaid_tax: Amount = Field(alias="ppmTxamt")


# =============================================================================
# DETAIL PAGES
# =============================================================================

class IncomeRow(_WireModel):
    """One income-classification row of the comprehensive income report."""

    classification_code: Optional[str] = Field(default=None, alias="incClCd")
    amount: RawAmount = Field(default=None, alias="incAmt")

    @property
    def is_business_income(self) -> bool:
        return self.classification_code == BUSINESS_INCOME_CODE

    @property
    def has_amount(self) -> bool:
        """A blank ``incAmt`` counts as absent; ``"0"`` is present."""
        return not is_blank_amount(self.amount)

    def parsed_amount(self) -> Decimal:
        return parse_amount(self.amount)


class IncomeRowList(_WireModel):
    rows: Optional[list[IncomeRow]] = None


class DeductionItem(_WireModel):
    """One item of the income-deduction detail."""

    amount: RawAmount = Field(default=None, alias="Amount")

    def parsed_amount(self) -> Decimal:
        return parse_amount(self.amount)


class TaxCreditRow(_WireModel):
    """One breakdown row of the tax reduction/credit detail.

    Rows outside the code tables (subtotals, notes) are carried as received;
    only rows that get summed have their amount parsed.
    """

    entry_code: Optional[str] = Field(default=None, alias="ereCd")
    amount: RawAmount = Field(default=None, alias="ereAmt")

    def parsed_amount(self) -> Decimal:
        return parse_amount(self.amount)


class TaxCreditRowList(_WireModel):
    rows: Optional[list[TaxCreditRow]] = None


# =============================================================================
# REPORT
# =============================================================================

class Report(_WireModel):
    """A single sub-report of a filing lookup.

    Only the payload relevant to the report's kind is populated.
    """

    name: Optional[str] = Field(default=None, alias="ReportName")
    filing_summary: Optional[FilingSummary] = Field(default=None, alias="ttirndm001DVO")
    tax_computation: Optional[TaxComputation] = Field(default=None, alias="ttirnam101DVO")
    income_rows: Optional[IncomeRowList] = Field(default=None, alias="ttirndl012DVOList")
    deduction_items: Optional[list[DeductionItem]] = Field(default=None, alias="Items")
    tax_credit_rows: Optional[TaxCreditRowList] = Field(
        default=None, alias="txamtDdcReSpecBrkdDVOList"
    )

    def matches(self, name_fragment: str) -> bool:
        """Whether this report's name contains ``name_fragment``."""
        return self.name is not None and name_fragment in self.name
