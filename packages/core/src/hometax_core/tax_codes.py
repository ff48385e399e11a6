"""Entry-code tables for the tax reduction/credit breakdown (세액공제명세서).

Each row of the breakdown carries an entry code (``ereCd``). Rows whose code
appears in one of the tables below are reported separately as "excluded"
reduction or credit amounts; everything else stays in the "included" part
that is derived by subtraction from the first-page totals.

The two sets are independent. A code listed in both tables is counted in
both excluded sums.
"""

from dataclasses import dataclass


# =============================================================================
# VERSION TRACKING
# =============================================================================

TAX_CODES_VERSION = "2024"


def get_tax_codes_version() -> str:
    """Return current code table version."""
    return TAX_CODES_VERSION


# =============================================================================
# 세액감면 (TAX REDUCTION) CODES
# =============================================================================

REDUCTION_CODES = frozenset({
    "211",  # 중소기업에 대한 특별세액감면
    "212",  # 창업중소기업 등에 대한 세액감면
    "213",  # 수도권과밀억제권역 밖 이전 중소기업 세액감면
    "214",  # 농공단지 입주기업 등에 대한 세액감면
    "215",  # 영농조합법인 등에 대한 세액감면
    "216",  # 사회적기업 및 장애인 표준사업장 세액감면
})


# =============================================================================
# 세액공제 (TAX CREDIT) CODES
# =============================================================================

CREDIT_CODES = frozenset({
    "281",  # 통합투자세액공제
    "282",  # 고용증대 세액공제
    "283",  # 연구·인력개발비 세액공제
    "284",  # 통합고용세액공제
    "285",  # 중소기업 사회보험료 세액공제
    "286",  # 성과공유 중소기업 경영성과급 세액공제
})


@dataclass(frozen=True)
class TaxCodeTable:
    """The pair of code sets used to partition breakdown rows."""

    reduction: frozenset[str]
    credit: frozenset[str]
    version: str = TAX_CODES_VERSION

    def is_reduction(self, code: str) -> bool:
        return code in self.reduction

    def is_credit(self, code: str) -> bool:
        return code in self.credit

    @property
    def overlapping_codes(self) -> frozenset[str]:
        """Codes present in both tables (counted twice when partitioning)."""
        return self.reduction & self.credit


DEFAULT_TAX_CODES = TaxCodeTable(reduction=REDUCTION_CODES, credit=CREDIT_CODES)
