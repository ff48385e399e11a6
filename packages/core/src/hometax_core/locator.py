"""Sub-report lookup by partial name.

Report names vary between tax years and form revisions (the source may append
suffixes such as ``"납부계산서_2024"``), so lookups match on substring.
"""

from collections.abc import Sequence
from typing import Optional, Union

import structlog

from .models import Report, ReportKind

logger = structlog.get_logger()


def find_report(
    reports: Optional[Sequence[Report]],
    name_fragment: Union[ReportKind, str],
) -> Optional[Report]:
    """
    Return the first report whose name contains ``name_fragment``.

    Args:
        reports: The filing's report collection, in source order
        name_fragment: Canonical report name or any fragment of it

    Returns:
        The first matching report, or None when nothing matches or the
        collection is empty
    """
    fragment = name_fragment.value if isinstance(name_fragment, ReportKind) else name_fragment
    if not reports:
        logger.debug("report_lookup_empty_collection", fragment=fragment)
        return None

    for report in reports:
        if report.matches(fragment):
            logger.debug("report_found", fragment=fragment, report_name=report.name)
            return report

    logger.debug("report_not_found", fragment=fragment, candidates=len(reports))
    return None
