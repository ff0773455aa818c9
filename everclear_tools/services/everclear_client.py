# -*- coding: utf-8 -*-
"""
Everclear API Client Module

Thin pass-through client for the Everclear ledger API (intents, invoices,
routes, metrics). Responses are returned as parsed JSON without interpretation.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from everclear_tools.config import API_TIMEOUT, EVERCLEAR_API_BASE_URL

logger = logging.getLogger(__name__)


@dataclass
class EverclearAPIError(Exception):
    """Ledger API request failed (non-2xx, network error or invalid JSON)"""

    message: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        return self.message


class EverclearClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or EVERCLEAR_API_BASE_URL).rstrip("/")
        self.timeout = API_TIMEOUT if timeout is None else timeout
        self.headers = {"Content-Type": "application/json"}

    def make_request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request to the ledger API and return the parsed JSON body

        Args:
            endpoint: Path starting with '/', e.g. '/invoices'
            method: HTTP method
            params: Query parameters (None values are dropped)
            body: JSON body for POST requests

        Raises:
            EverclearAPIError: On non-2xx responses, network errors or invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            logger.info(f"{method} {url} params={query}")
            response = requests.request(
                method,
                url,
                params=query or None,
                json=body,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error(f"Everclear API timeout: {method} {url}")
            raise EverclearAPIError(f"API request timed out after {self.timeout}s")
        except requests.RequestException as e:
            logger.error(f"Everclear API request error: {e}")
            raise EverclearAPIError(f"API request failed: {e}")

        if not response.ok:
            logger.warning(f"Everclear API returned {response.status_code} for {method} {url}")
            raise EverclearAPIError(
                f"API request failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Everclear API returned invalid JSON: {e}")
            raise EverclearAPIError("API request failed: invalid JSON response", response.status_code)

    def get_intents(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Any:
        return self.make_request("/intents", params={"status": status, "limit": limit, "offset": offset})

    def get_intent_details(self, intent_id: str) -> Any:
        return self.make_request(f"/intents/{intent_id}")

    def get_invoices(self, status: Optional[str] = None, limit: Optional[int] = None) -> Any:
        # The API paginates invoices by cursor, so there is no offset
        return self.make_request("/invoices", params={"status": status, "limit": limit})

    def get_invoice_details(self, invoice_id: str) -> Any:
        return self.make_request(f"/invoices/{invoice_id}")

    def get_invoice_min_amounts(self, invoice_id: str) -> Any:
        return self.make_request(f"/invoices/{invoice_id}/min-amounts")

    def get_route_quote(self, from_chain: str, to_chain: str, amount: str, token: str) -> Any:
        return self.make_request(
            "/routes/quotes",
            method="POST",
            body={"fromChain": from_chain, "toChain": to_chain, "amount": amount, "token": token},
        )

    def get_liquidity_flow(self, time_range: Optional[str] = None, chain_id: Optional[str] = None) -> Any:
        return self.make_request(
            "/metrics/liquidity-flow",
            params={"timeRange": time_range, "chainId": chain_id},
        )

    def get_clearing_volume(self, time_range: Optional[str] = None, chain_id: Optional[str] = None) -> Any:
        return self.make_request(
            "/metrics/clearing-volume",
            params={"timeRange": time_range, "chainId": chain_id},
        )
