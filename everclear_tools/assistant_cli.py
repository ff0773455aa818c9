# -*- coding: utf-8 -*-
"""Everclear assistant CLI.

Local entry point for calling the Everclear tools from a shell or from an
assistant that shells out (e.g. `everclear-tools invoices --limit 20`).

Every command prints the tool text (or JSON for listings) on stdout; logs go
to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from everclear_tools.config import LOG_LEVEL
from everclear_tools.tools import EverclearTools


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2))
    sys.stdout.write("\n")


def _print_tool_text(text: str) -> int:
    sys.stdout.write(text)
    sys.stdout.write("\n")
    return 1 if text.startswith("Error:") else 0


def cmd_tools(args: argparse.Namespace) -> int:
    _print_json(EverclearTools().list_tools())
    return 0


def cmd_call(args: argparse.Namespace) -> int:
    try:
        arguments = json.loads(args.args_json) if args.args_json else {}
    except json.JSONDecodeError as e:
        return _print_tool_text(f"Error: invalid --args-json: {e}")
    if not isinstance(arguments, dict):
        return _print_tool_text("Error: --args-json must be a JSON object")
    return _print_tool_text(EverclearTools().call_tool(args.name, arguments))


def cmd_invoices(args: argparse.Namespace) -> int:
    arguments = {"limit": args.limit, "status": args.status}
    return _print_tool_text(EverclearTools().call_tool("get_invoices_formatted", arguments))


def cmd_chain(args: argparse.Namespace) -> int:
    return _print_tool_text(EverclearTools().call_tool("convert_chain_id_to_name", {"chainId": args.chain_id}))


def cmd_token(args: argparse.Namespace) -> int:
    return _print_tool_text(
        EverclearTools().call_tool("convert_tickerhash_to_name", {"tickerhash": args.tickerhash})
    )


def cmd_chains(args: argparse.Namespace) -> int:
    chain_data = EverclearTools().chain_data
    _print_json(dict(zip(chain_data.get_all_chain_ids(), chain_data.get_all_chain_names())))
    return 0


def cmd_tokens(args: argparse.Namespace) -> int:
    chain_data = EverclearTools().chain_data
    _print_json({
        "tickerhashes": chain_data.get_all_tickerhashes(),
        "symbols": chain_data.get_all_token_names(),
    })
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="everclear-tools", description="Everclear ledger tools CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    tools = sub.add_parser("tools", help="List available tools as JSON")
    tools.set_defaults(func=cmd_tools)

    call = sub.add_parser("call", help="Call any tool by name")
    call.add_argument("name")
    call.add_argument("--args-json", default=None, help="Tool arguments as a JSON object")
    call.set_defaults(func=cmd_call)

    invoices = sub.add_parser("invoices", help="Fetch and enrich invoices (CSV + JSON)")
    invoices.add_argument("--limit", type=int, default=None)
    invoices.add_argument("--status", default=None)
    invoices.set_defaults(func=cmd_invoices)

    chain = sub.add_parser("chain", help="Convert a chain ID to its name")
    chain.add_argument("chain_id")
    chain.set_defaults(func=cmd_chain)

    token = sub.add_parser("token", help="Convert a tickerhash to its token name")
    token.add_argument("tickerhash")
    token.set_defaults(func=cmd_token)

    chains = sub.add_parser("chains", help="List known chain IDs and names")
    chains.set_defaults(func=cmd_chains)

    tokens = sub.add_parser("tokens", help="List registry tickerhashes and symbols")
    tokens.set_defaults(func=cmd_tokens)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
