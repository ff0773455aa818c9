# -*- coding: utf-8 -*-
"""
Invoice Enrichment Processor

Pipeline entry: raw ledger response -> normalized batch -> concurrent
per-invoice enrichment -> tabular + simplified projections.
"""

import logging
from typing import Any, Optional

from everclear_tools.chain_data import ChainDataService
from everclear_tools.enricher import enrich_batch
from everclear_tools.formatters import NO_DATA_ERROR, InvoiceReport, build_invoice_report
from everclear_tools.parser import BatchShape, current_millis, normalize_invoice_batch
from everclear_tools.services.everclear_client import EverclearClient
from everclear_tools.shared.identifier_resolver import IdentifierResolver

logger = logging.getLogger(__name__)


def enrich_invoices(
    raw_batch: Any,
    chain_data: ChainDataService,
    now_ms: Optional[int] = None,
    *,
    max_workers: Optional[int] = None,
) -> InvoiceReport:
    """
    Enrich a raw ledger response and build both output projections.

    Args:
        raw_batch: Ledger response (list, wrapper object, single invoice, or anything else)
        chain_data: Registry cache; read once so the whole batch sees one snapshot
        now_ms: Current time in epoch milliseconds (defaults to now)
        max_workers: Thread pool size for per-invoice enrichment

    Returns:
        InvoiceReport: tabular + simplified views, or an empty report with
        error set when the response has no recognizable shape
    """
    batch = normalize_invoice_batch(raw_batch)
    if not BatchShape.has_records(batch.shape):
        logger.warning("No invoice data found in ledger response")
        return InvoiceReport(error=NO_DATA_ERROR, raw_response=raw_batch)

    logger.info(f"Normalized {len(batch)} invoices from {batch.shape.value} response")

    if now_ms is None:
        now_ms = current_millis()

    resolver = IdentifierResolver(chain_data.get())
    results = enrich_batch(batch.records, resolver, now_ms, max_workers=max_workers)
    return build_invoice_report([result.record for result in results])


def get_invoices_formatted(
    client: EverclearClient,
    chain_data: ChainDataService,
    *,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    now_ms: Optional[int] = None,
) -> InvoiceReport:
    """Fetch invoices from the ledger API and enrich them"""
    raw = client.get_invoices(status=status, limit=limit)
    return enrich_invoices(raw, chain_data, now_ms)
