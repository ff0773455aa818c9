# -*- coding: utf-8 -*-
"""
Invoice output formatters.

Both projections are pure functions of the enriched records; nothing here
resolves chains or tokens again.
"""

import csv
import io
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from everclear_tools.parser import epoch_seconds_to_iso

CSV_COLUMNS = ["Intent ID", "Owner", "Amount", "Origin", "Destination", "Asset", "Created At"]

SIMPLIFIED_FIELDS = (
    "intent_id",
    "owner",
    "amount",
    "origin",
    "destinations",
    "destination",
    "asset",
    "createdAt",
    "hub_invoice_enqueued_timestamp",
)

MISSING = "N/A"
NO_DATA_ERROR = "No invoice data found"


@dataclass
class InvoiceReport:
    """Tabular + simplified views of one enriched batch"""
    tabular: str = ""
    simplified: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    raw_response: Any = None


def _cell(value: Any) -> str:
    if value is None or value == "":
        return MISSING
    return str(value)


def format_invoices_csv(records: list[dict[str, Any]]) -> str:
    """
    CSV with a fixed column order; every data cell is quoted.

    "Created At" comes from hub_invoice_enqueued_timestamp (epoch seconds), not
    from createdAt, which only feeds the open time.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_COLUMNS) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow([
            _cell(record.get("intent_id")),
            _cell(record.get("owner")),
            _cell(record.get("amount")),
            _cell(record.get("origin")),
            _cell(record.get("destination")),
            _cell(record.get("asset")),
            _cell(epoch_seconds_to_iso(record.get("hub_invoice_enqueued_timestamp"))),
        ])

    return buffer.getvalue().rstrip("\n")


def simplify_invoice(record: dict[str, Any]) -> dict[str, Any]:
    simplified = {name: record.get(name) for name in SIMPLIFIED_FIELDS}
    simplified["createdAt"] = epoch_seconds_to_iso(record.get("hub_invoice_enqueued_timestamp"))
    return simplified


def simplify_invoices(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [simplify_invoice(record) for record in records]


def build_invoice_report(records: list[dict[str, Any]]) -> InvoiceReport:
    return InvoiceReport(
        tabular=format_invoices_csv(records),
        simplified=simplify_invoices(records),
    )


def format_invoice_report(report: InvoiceReport) -> str:
    """
    Render the report as the text returned to the caller.

    A normal batch becomes a ```csv block followed by a ```json block; an
    unshaped upstream response becomes a JSON diagnostic document.
    """
    if report.error:
        return json.dumps(
            {
                "invoices": [],
                "total": 0,
                "error": report.error,
                "rawResponse": report.raw_response,
            },
            indent=2,
            ensure_ascii=False,
            default=str,
        )

    invoices_json = json.dumps(
        {"invoices": report.simplified},
        indent=2,
        ensure_ascii=False,
        default=str,
    )
    return f"```csv\n{report.tabular}\n```\n\n```json\n{invoices_json}\n```"
