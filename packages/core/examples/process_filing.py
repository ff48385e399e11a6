#!/usr/bin/env python3
"""
Resolve a Hometax Filing Lookup into a Yearly Summary

Reads a JSON file holding the report list returned by the Hometax
electronic-filing result lookup (전자신고결과조회), runs validation and
aggregation, and prints the year-suffixed summary record or the error.

Usage:
    python examples/process_filing.py reports.json --start-year 2023
    python examples/process_filing.py reports.json --start-year 2023 --json-logs
    python examples/process_filing.py reports.json --start-year 2023 --show-audit

The JSON file may contain either a list of reports or an object with the
list under "reports".
"""

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path

from hometax_core import configure_logging, load_settings, process_hometax_filing


def _json_default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Resolve a Hometax filing lookup into a yearly summary record",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "reports_file",
        type=str,
        help="JSON file with the filing's report list",
    )
    parser.add_argument(
        "--start-year",
        type=int,
        required=True,
        help="Baseline filing year (year index 1)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render logs as JSON",
    )
    parser.add_argument(
        "--show-audit",
        action="store_true",
        help="Print the audit trail after the record",
    )

    args = parser.parse_args()

    reports_path = Path(args.reports_file)
    if not reports_path.exists():
        print(f"Error: File not found: {reports_path}")
        sys.exit(1)

    settings = load_settings(log_format="json" if args.json_logs else "console")
    configure_logging(settings)

    payload = json.loads(reports_path.read_text(encoding="utf-8"))
    reports = payload.get("reports", []) if isinstance(payload, dict) else payload

    result = process_hometax_filing(reports, args.start_year, settings=settings)

    if result.error is not None:
        print(f"Error [{result.error.code.value}]: {result.error.message}")
        sys.exit(2)

    print(json.dumps(
        result.data.as_keyed_record(),
        ensure_ascii=False,
        indent=2,
        default=_json_default,
    ))

    if args.show_audit and result.audit_trail is not None:
        print()
        for entry in result.audit_trail.entries:
            print(f"  {entry.step:<24} {entry.field_name or '':<32} {entry.output_value}")


if __name__ == "__main__":
    main()
