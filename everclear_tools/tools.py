# -*- coding: utf-8 -*-
"""
Tool registry and dispatch.

Each tool takes a dict of arguments and returns text. Ledger tools pass the
API response through as pretty-printed JSON; the converter tools and
get_invoices_formatted go through the chain registry. Errors are returned as
"Error: <message>" text instead of being raised to the caller.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable, Optional

from everclear_tools.chain_data import ChainDataService
from everclear_tools.formatters import format_invoice_report
from everclear_tools.processor import get_invoices_formatted
from everclear_tools.services.everclear_client import EverclearClient
from everclear_tools.shared.identifier_resolver import IdentifierResolver

logger = logging.getLogger(__name__)


def _schema(properties: dict[str, Any], required: Optional[list[str]] = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


_STATUS = {"type": "string", "description": "Filter by status"}
_LIMIT = {"type": "number", "description": "Number of results to return"}
_METRICS_SCHEMA = _schema({
    "timeRange": {"type": "string", "description": "Time range for metrics"},
    "chainId": {"type": "string", "description": "Filter by specific chain"},
})

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "get_intents",
        "description": "Retrieve a list of intents from Everclear",
        "inputSchema": _schema({
            "status": _STATUS,
            "limit": _LIMIT,
            "offset": {"type": "number", "description": "Pagination offset"},
        }),
    },
    {
        "name": "get_intent_details",
        "description": "Get detailed information about a specific intent",
        "inputSchema": _schema(
            {"intentId": {"type": "string", "description": "The ID of the intent"}},
            ["intentId"],
        ),
    },
    {
        "name": "get_invoices",
        "description": "Retrieve a list of invoices",
        "inputSchema": _schema({"status": _STATUS, "limit": _LIMIT}),
    },
    {
        "name": "get_invoice_details",
        "description": "Get detailed information about a specific invoice",
        "inputSchema": _schema(
            {"invoiceId": {"type": "string", "description": "The ID of the invoice"}},
            ["invoiceId"],
        ),
    },
    {
        "name": "get_invoice_min_amounts",
        "description": "Calculate minimum amounts needed to settle an invoice",
        "inputSchema": _schema(
            {"invoiceId": {"type": "string", "description": "The ID of the invoice"}},
            ["invoiceId"],
        ),
    },
    {
        "name": "get_route_quote",
        "description": "Get a quote for a route including fees and limits",
        "inputSchema": _schema(
            {
                "fromChain": {"type": "string", "description": "Source chain identifier"},
                "toChain": {"type": "string", "description": "Destination chain identifier"},
                "amount": {"type": "string", "description": "Amount to transfer"},
                "token": {"type": "string", "description": "Token address or identifier"},
            },
            ["fromChain", "toChain", "amount", "token"],
        ),
    },
    {
        "name": "get_liquidity_flow",
        "description": "Retrieve liquidity flow metrics",
        "inputSchema": _METRICS_SCHEMA,
    },
    {
        "name": "get_clearing_volume",
        "description": "Retrieve clearing volume metrics",
        "inputSchema": _METRICS_SCHEMA,
    },
    {
        "name": "convert_chain_id_to_name",
        "description": (
            "Convert a chain ID to its human-readable name (e.g. \"Arbitrum\"). "
            "Returns \"Unknown Chain (ID)\" if the chain ID is not known."
        ),
        "inputSchema": _schema(
            {"chainId": {"type": "string", "description": "The chain ID to convert"}},
            ["chainId"],
        ),
    },
    {
        "name": "convert_tickerhash_to_name",
        "description": (
            "Convert a tickerhash to its human-readable token name (e.g. \"USDC\"). "
            "Returns \"Unknown Token (hash)\" if the tickerhash is not known."
        ),
        "inputSchema": _schema(
            {"tickerhash": {"type": "string", "description": "The tickerhash to convert"}},
            ["tickerhash"],
        ),
    },
    {
        "name": "get_invoices_formatted",
        "description": (
            "Get invoices with chain and token names resolved, amounts converted "
            "from base units, and open time computed. Returns CSV and JSON."
        ),
        "inputSchema": _schema({"limit": _LIMIT, "status": _STATUS}),
    },
]

_REQUIRED_ARGS = {
    tool["name"]: tool["inputSchema"].get("required", []) for tool in TOOL_DEFINITIONS
}


def _to_json_text(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class EverclearTools:
    def __init__(
        self,
        client: Optional[EverclearClient] = None,
        chain_data: Optional[ChainDataService] = None,
    ):
        self.client = client or EverclearClient()
        self.chain_data = chain_data or ChainDataService()
        self._handlers: dict[str, Callable[[dict[str, Any]], str]] = {
            "get_intents": self._get_intents,
            "get_intent_details": self._get_intent_details,
            "get_invoices": self._get_invoices,
            "get_invoice_details": self._get_invoice_details,
            "get_invoice_min_amounts": self._get_invoice_min_amounts,
            "get_route_quote": self._get_route_quote,
            "get_liquidity_flow": self._get_liquidity_flow,
            "get_clearing_volume": self._get_clearing_volume,
            "convert_chain_id_to_name": self._convert_chain_id_to_name,
            "convert_tickerhash_to_name": self._convert_tickerhash_to_name,
            "get_invoices_formatted": self._get_invoices_formatted,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        return copy.deepcopy(TOOL_DEFINITIONS)

    def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> str:
        args = arguments or {}
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise ValueError(f"Unknown tool: {name}")

            missing = [key for key in _REQUIRED_ARGS.get(name, []) if args.get(key) in (None, "")]
            if missing:
                raise ValueError(f"Missing required argument(s): {', '.join(missing)}")

            return handler(args)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            return f"Error: {str(e) or 'Unknown error occurred'}"

    # --- ledger pass-through ---

    def _get_intents(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_intents(
            status=args.get("status"), limit=args.get("limit"), offset=args.get("offset"),
        ))

    def _get_intent_details(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_intent_details(args["intentId"]))

    def _get_invoices(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_invoices(status=args.get("status"), limit=args.get("limit")))

    def _get_invoice_details(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_invoice_details(args["invoiceId"]))

    def _get_invoice_min_amounts(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_invoice_min_amounts(args["invoiceId"]))

    def _get_route_quote(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_route_quote(
            from_chain=args["fromChain"],
            to_chain=args["toChain"],
            amount=args["amount"],
            token=args["token"],
        ))

    def _get_liquidity_flow(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_liquidity_flow(
            time_range=args.get("timeRange"), chain_id=args.get("chainId"),
        ))

    def _get_clearing_volume(self, args: dict[str, Any]) -> str:
        return _to_json_text(self.client.get_clearing_volume(
            time_range=args.get("timeRange"), chain_id=args.get("chainId"),
        ))

    # --- registry lookups ---

    def _convert_chain_id_to_name(self, args: dict[str, Any]) -> str:
        chain_id = args["chainId"]
        chain_name = IdentifierResolver(self.chain_data.get()).resolve_chain_name(chain_id)
        return (
            f"Chain ID: {chain_id}\n"
            f"Chain Name: {chain_name}\n"
            "\n"
            "FORMATTING INSTRUCTIONS:\n"
            "- Use this name when displaying chain information to users\n"
            "- Consider using get_liquidity_flow with this chain ID for metrics"
        )

    def _convert_tickerhash_to_name(self, args: dict[str, Any]) -> str:
        tickerhash = args["tickerhash"]
        resolver = IdentifierResolver(self.chain_data.get())
        resolution = resolver.resolve_asset(tickerhash)
        if resolution is not None:
            lines = [f"Token Name: {resolution.symbol}", f"Decimals: {resolution.decimals}"]
        else:
            lines = [f"Token Name: {resolver.resolve_asset_name_only(tickerhash)}"]
        return (
            f"Tickerhash: {tickerhash}\n"
            + "\n".join(lines)
            + "\n\n"
            "FORMATTING INSTRUCTIONS:\n"
            "- Use this name when displaying token information to users\n"
            "- Combine with get_route_quote for complete transfer analysis"
        )

    def _get_invoices_formatted(self, args: dict[str, Any]) -> str:
        report = get_invoices_formatted(
            self.client,
            self.chain_data,
            status=args.get("status"),
            limit=args.get("limit"),
        )
        return format_invoice_report(report)
