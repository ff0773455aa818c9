# -*- coding: utf-8 -*-
"""
End-to-end invoice pipeline: ledger response -> registry snapshot ->
concurrent enrichment -> CSV + JSON report. HTTP is mocked at requests.
"""

import json

import pytest
import requests

from everclear_tools.chain_data import ChainDataService
from everclear_tools.formatters import format_invoice_report
from everclear_tools.processor import enrich_invoices, get_invoices_formatted
from everclear_tools.services.everclear_client import EverclearClient


@pytest.fixture
def chain_data(mocker, registry_payload):
    response = mocker.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = registry_payload
    mock_get = mocker.patch("everclear_tools.chain_data.requests.get", return_value=response)
    service = ChainDataService(url="https://registry.example.test/everclear.json", ttl=300)
    service.mock_get = mock_get
    return service


@pytest.fixture
def ledger(mocker):
    """Patches the ledger API; set ledger.return_value.json.return_value per test."""
    response = mocker.Mock()
    response.ok = True
    response.status_code = 200
    return mocker.patch(
        "everclear_tools.services.everclear_client.requests.request",
        return_value=response,
    )


def _invoices():
    return [
        {
            "intent_id": "0x01",
            "owner": "0xaaa",
            "origin": "1",
            "destinations": ["42161", "8453"],
            "ticker_hash": "0xUSDC",
            "amount": "123456789",
            "createdAt": "2023-11-14T21:13:20Z",
            "hub_invoice_enqueued_timestamp": "1699999000",
        },
        {
            "intent_id": "0x02",
            "owner": "0xbbb",
            "origin": "1399811149",
            "destination": "10",
            "asset": "0xWETH",
            "amount": "123456789012345678901234567890",
            "createdAt": 1_699_999_999_000,
            "hub_invoice_enqueued_timestamp": 1699999999,
        },
        {
            "intent_id": "0x03",
            "origin": "31337",
            "destinations": [],
            "ticker_hash": "0xmystery",
            "amount": "not-a-number",
        },
    ]


class TestInvoicePipeline:
    @pytest.mark.parametrize("wrap", [
        lambda invoices: invoices,
        lambda invoices: {"invoices": invoices},
        lambda invoices: {"data": invoices, "cursor": "abc"},
        lambda invoices: {"results": invoices},
    ])
    def test_all_batch_shapes_produce_same_report(self, chain_data, now_ms, wrap):
        report = enrich_invoices(wrap(_invoices()), chain_data, now_ms)

        assert report.error is None
        assert [row["intent_id"] for row in report.simplified] == ["0x01", "0x02", "0x03"]

    def test_enriched_values(self, chain_data, now_ms):
        report = enrich_invoices(_invoices(), chain_data, now_ms)
        first, second, third = report.simplified

        assert first["origin"] == "Ethereum (1)"
        assert first["destination"] == "Arbitrum, Base (42161,8453)"
        assert first["destinations"] == ["Arbitrum (42161)", "Base (8453)"]
        assert first["asset"] == "USDC (0xUSDC)"
        assert first["amount"] == "123.456789"
        assert first["createdAt"] == "2023-11-14T21:56:40.000Z"

        assert second["origin"] == "Solana (1399811149)"
        assert second["destination"] == "Optimism (10)"
        assert second["asset"] == "WETH (0xWETH)"
        assert second["amount"] == "123456789012.345678"

        assert third["origin"] == "Unknown Chain (31337)"
        assert third["destination"] == "Unknown Chain (unknown)"
        assert third["asset"] == "Unknown Token (0xmystery)"
        assert third["amount"] == "0.000000"
        assert third["createdAt"] is None

    def test_csv_rows(self, chain_data, now_ms):
        report = enrich_invoices(_invoices(), chain_data, now_ms)
        lines = report.tabular.split("\n")

        assert len(lines) == 4
        assert lines[1] == (
            '"0x01","0xaaa","123.456789","Ethereum (1)","Arbitrum, Base (42161,8453)",'
            '"USDC (0xUSDC)","2023-11-14T21:56:40.000Z"'
        )
        assert lines[3] == (
            '"0x03","N/A","0.000000","Unknown Chain (31337)","Unknown Chain (unknown)",'
            '"Unknown Token (0xmystery)","N/A"'
        )

    def test_single_invoice_object(self, chain_data, now_ms):
        report = enrich_invoices(_invoices()[1], chain_data, now_ms)

        assert len(report.simplified) == 1
        assert report.simplified[0]["intent_id"] == "0x02"

    @pytest.mark.parametrize("raw", [None, "oops", 42])
    def test_unshaped_response(self, chain_data, now_ms, raw):
        report = enrich_invoices(raw, chain_data, now_ms)

        assert report.error == "No invoice data found"
        assert report.raw_response == raw
        assert report.simplified == []
        chain_data.mock_get.assert_not_called()

    def test_registry_fetched_once_per_batch(self, chain_data, now_ms):
        enrich_invoices(_invoices() * 10, chain_data, now_ms, max_workers=8)
        enrich_invoices(_invoices(), chain_data, now_ms)

        assert chain_data.mock_get.call_count == 1

    def test_registry_outage_still_returns_every_row(self, mocker, now_ms):
        mocker.patch("everclear_tools.chain_data.requests.get", side_effect=requests.ConnectionError("down"))
        report = enrich_invoices(_invoices(), ChainDataService(), now_ms)

        assert len(report.simplified) == 3
        assert report.simplified[0]["origin"] == "Unknown Chain (1)"
        assert report.simplified[0]["asset"] == "Unknown Token (0xUSDC)"


class TestGetInvoicesFormatted:
    def test_fetch_and_render(self, ledger, chain_data, now_ms):
        ledger.return_value.json.return_value = {"invoices": _invoices()}
        client = EverclearClient(base_url="https://api.example.test")

        report = get_invoices_formatted(client, chain_data, status="INVOICED", limit=3, now_ms=now_ms)
        text = format_invoice_report(report)

        args, kwargs = ledger.call_args
        assert args == ("GET", "https://api.example.test/invoices")
        assert kwargs["params"] == {"status": "INVOICED", "limit": 3}

        csv_block, json_block = text.split("\n```\n\n```json\n")
        assert csv_block.startswith("```csv\nIntent ID,Owner,Amount,Origin,Destination,Asset,Created At\n")
        invoices = json.loads(json_block[: -len("\n```")])["invoices"]
        assert [row["amount"] for row in invoices] == ["123.456789", "123456789012.345678", "0.000000"]
