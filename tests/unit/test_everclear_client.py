# -*- coding: utf-8 -*-
"""
Test Everclear API client
"""

from unittest.mock import Mock, patch

import pytest
import requests

from everclear_tools.services.everclear_client import EverclearAPIError, EverclearClient


def _response(payload=None, status_code=200, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return EverclearClient(base_url="https://api.example.test/", timeout=5)


class TestMakeRequest:
    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_get_with_params_drops_none(self, mock_request, client):
        mock_request.return_value = _response([{"id": "1"}])

        result = client.get_invoices(status="INVOICED", limit=None)

        assert result == [{"id": "1"}]
        mock_request.assert_called_once_with(
            "GET",
            "https://api.example.test/invoices",
            params={"status": "INVOICED"},
            json=None,
            headers={"Content-Type": "application/json"},
            timeout=5,
        )

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_no_params_sends_none(self, mock_request, client):
        mock_request.return_value = _response({})

        client.get_invoice_details("0xabc")

        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://api.example.test/invoices/0xabc")
        assert kwargs["params"] is None

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_route_quote_posts_body(self, mock_request, client):
        mock_request.return_value = _response({"fee": "1"})

        client.get_route_quote("1", "42161", "1000000", "0xUSDC")

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.example.test/routes/quotes")
        assert kwargs["json"] == {"fromChain": "1", "toChain": "42161", "amount": "1000000", "token": "0xUSDC"}

    @pytest.mark.parametrize("method_name,args,path", [
        ("get_intents", (), "/intents"),
        ("get_intent_details", ("0x1",), "/intents/0x1"),
        ("get_invoice_min_amounts", ("0x2",), "/invoices/0x2/min-amounts"),
        ("get_liquidity_flow", ("24h", "1"), "/metrics/liquidity-flow"),
        ("get_clearing_volume", ("7d",), "/metrics/clearing-volume"),
    ])
    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_endpoints(self, mock_request, client, method_name, args, path):
        mock_request.return_value = _response({"ok": True})

        assert getattr(client, method_name)(*args) == {"ok": True}
        assert mock_request.call_args[0][1] == f"https://api.example.test{path}"

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_metrics_params(self, mock_request, client):
        mock_request.return_value = _response({})

        client.get_liquidity_flow(time_range="24h", chain_id="10")

        assert mock_request.call_args[1]["params"] == {"timeRange": "24h", "chainId": "10"}


class TestErrors:
    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_non_2xx_raises(self, mock_request, client):
        mock_request.return_value = _response(status_code=404, reason="Not Found")

        with pytest.raises(EverclearAPIError) as exc_info:
            client.get_invoice_details("missing")

        assert str(exc_info.value) == "API request failed: 404 Not Found"
        assert exc_info.value.status_code == 404

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_timeout(self, mock_request, client):
        mock_request.side_effect = requests.Timeout()

        with pytest.raises(EverclearAPIError, match="timed out after 5s"):
            client.get_intents()

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_connection_error(self, mock_request, client):
        mock_request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(EverclearAPIError, match="API request failed: refused"):
            client.get_intents()

    @patch('everclear_tools.services.everclear_client.requests.request')
    def test_invalid_json(self, mock_request, client):
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_request.return_value = response

        with pytest.raises(EverclearAPIError, match="invalid JSON"):
            client.get_invoices()
