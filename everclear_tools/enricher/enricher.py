# -*- coding: utf-8 -*-
"""
Core Enricher Logic

對 raw invoice 進行 enrichment：chain 名稱、token symbol、金額換算、open time。
每一筆 invoice 獨立處理，單筆失敗只會降級該筆，不會中斷整批。
"""

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from everclear_tools.chain_data import DEFAULT_DECIMALS
from everclear_tools.config import ENRICH_MAX_WORKERS
from everclear_tools.parser import (
    ZERO_AMOUNT,
    compute_open_time_seconds,
    current_millis,
    millis_to_iso,
    parse_created_at,
    to_decimal_string,
)
from everclear_tools.shared.identifier_resolver import (
    UNKNOWN_CHAIN,
    IdentifierResolver,
    unknown_chain,
    unknown_token,
)
from .types import EnrichmentResult

logger = logging.getLogger(__name__)

UNKNOWN_ID = "unknown"


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _format_id(value: Any) -> str:
    return str(value) if _is_present(value) else UNKNOWN_ID


def _destination_ids(invoice: Mapping) -> str:
    destinations = invoice.get("destinations")
    if isinstance(destinations, list) and destinations:
        return ",".join(_format_id(dest) for dest in destinations)
    return _format_id(invoice.get("destination"))


def _fingerprint(invoice: Mapping) -> Any:
    asset = invoice.get("asset")
    return asset if _is_present(asset) else invoice.get("ticker_hash")


def _chain_label(resolver: IdentifierResolver, chain_id: Any) -> str:
    """'<Name> (<id>)'; unknown or missing IDs become 'Unknown Chain (<id>)'"""
    if not _is_present(chain_id):
        return unknown_chain(UNKNOWN_ID)
    name = resolver.lookup_chain_name(chain_id)
    return f"{name} ({chain_id})" if name else unknown_chain(chain_id)


def _resolve_destinations(resolver: IdentifierResolver, invoice: Mapping) -> tuple[str, Any]:
    """
    Returns:
        (destination summary, destinations field)
    """
    destinations = invoice.get("destinations")
    if isinstance(destinations, list) and destinations:
        names = [resolver.lookup_chain_name(dest) or UNKNOWN_CHAIN for dest in destinations]
        labels = [_chain_label(resolver, dest) for dest in destinations]
        summary = f"{', '.join(names)} ({_destination_ids(invoice)})"
        return summary, labels

    return _chain_label(resolver, invoice.get("destination")), destinations


def _resolve_asset(resolver: IdentifierResolver, fingerprint: Any) -> tuple[str, int]:
    """
    Returns:
        (asset label, decimals)
    """
    if not _is_present(fingerprint):
        return unknown_token(UNKNOWN_ID), DEFAULT_DECIMALS

    resolution = resolver.resolve_asset(fingerprint)
    if resolution is not None:
        return f"{resolution.symbol} ({fingerprint})", resolution.decimals

    name = resolver.resolve_asset_name_only(fingerprint)
    if name == unknown_token(fingerprint):
        return name, DEFAULT_DECIMALS
    return f"{name} ({fingerprint})", DEFAULT_DECIMALS


def _open_time(invoice: Mapping, now_ms: int) -> int:
    created_at = invoice.get("createdAt")
    created_ms = parse_created_at(created_at)
    if created_ms is None and _is_present(created_at):
        logger.warning(f"Unparseable createdAt {created_at!r}, treating open time as 0")
    return compute_open_time_seconds(created_ms, now_ms)


def _amount_raw(invoice: Mapping) -> str:
    raw = invoice.get("amount")
    return str(raw) if _is_present(raw) else "0"


def _enrich(invoice: Mapping, resolver: IdentifierResolver, now_ms: int) -> dict[str, Any]:
    open_time = _open_time(invoice, now_ms)
    origin = _chain_label(resolver, invoice.get("origin"))
    destination, destinations = _resolve_destinations(resolver, invoice)

    fingerprint = _fingerprint(invoice)
    asset, decimals = _resolve_asset(resolver, fingerprint)
    amount = to_decimal_string(invoice.get("amount"), decimals)

    return {
        **invoice,
        "createdAt": invoice.get("createdAt") or millis_to_iso(now_ms),
        "origin": origin,
        "destination": destination,
        "destinations": destinations,
        "asset": asset,
        "amount": amount,
        "open_time": f"{open_time} seconds",
        "open_time_seconds": open_time,
        "amount_raw": _amount_raw(invoice),
    }


def _degraded(invoice: Mapping, now_ms: int, error: str) -> dict[str, Any]:
    """最小格式化版本：不做任何 lookup"""
    destinations = invoice.get("destinations")
    if isinstance(destinations, list):
        destinations = [unknown_chain(_format_id(dest)) for dest in destinations]

    return {
        **invoice,
        "createdAt": invoice.get("createdAt") or millis_to_iso(now_ms),
        "origin": unknown_chain(_format_id(invoice.get("origin"))),
        "destination": unknown_chain(_destination_ids(invoice)),
        "destinations": destinations,
        "asset": unknown_token(_format_id(_fingerprint(invoice))),
        "amount": ZERO_AMOUNT,
        "open_time": "0 seconds",
        "open_time_seconds": 0,
        "amount_raw": _amount_raw(invoice),
        "processing_error": error,
    }


def enrich_record(
    raw: Any,
    resolver: IdentifierResolver,
    now_ms: Optional[int] = None,
) -> EnrichmentResult:
    """
    Enrich one raw invoice.

    Args:
        raw: Raw invoice (untyped mapping from the ledger API)
        resolver: Identifier resolver bound to one registry snapshot
        now_ms: Current time in epoch milliseconds (defaults to now)

    Returns:
        EnrichmentResult: never raises; on an unexpected fault the record is
        minimally formatted and carries processing_error
    """
    if now_ms is None:
        now_ms = current_millis()

    invoice = raw if isinstance(raw, Mapping) else {}
    try:
        if not isinstance(raw, Mapping):
            raise TypeError(f"Invoice record is not an object: {type(raw).__name__}")
        return EnrichmentResult(record=_enrich(invoice, resolver, now_ms))
    except Exception as e:
        error = str(e) or type(e).__name__
        logger.error(f"Error processing invoice {invoice.get('intent_id', 'N/A')}: {error}")
        return EnrichmentResult(record=_degraded(invoice, now_ms, error), error=error)


def enrich_batch(
    records: list,
    resolver: IdentifierResolver,
    now_ms: Optional[int] = None,
    *,
    max_workers: Optional[int] = None,
) -> list[EnrichmentResult]:
    """
    Enrich every invoice concurrently and return results in input order.

    All records share the same resolver snapshot and the same "now", and no
    record waits on another. The output always has len(records) entries.
    """
    if not records:
        return []

    if now_ms is None:
        now_ms = current_millis()

    workers = max(1, min(max_workers or ENRICH_MAX_WORKERS, len(records)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(enrich_record, raw, resolver, now_ms) for raw in records]
        results = [future.result() for future in futures]

    degraded = sum(1 for result in results if result.degraded)
    if degraded:
        logger.warning(f"Enriched {len(results)} invoices, {degraded} degraded")
    else:
        logger.info(f"Enriched {len(results)} invoices")
    return results
