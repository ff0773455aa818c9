# -*- coding: utf-8 -*-
"""
Chain Data Service Module

This module keeps an in-process snapshot of the Everclear chain/asset registry:
1. The registry JSON is fetched from GitHub (connext/chaindata)
2. Snapshots are immutable and replaced wholesale when the TTL expires
3. On fetch or transform failure the previous snapshot is kept (stale over unavailable)
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

import requests

from everclear_tools.config import CHAINDATA_TIMEOUT, CHAINDATA_TTL, CHAINDATA_URL

logger = logging.getLogger(__name__)

# Chain ID -> display name. Chain IDs outside this table have no name.
KNOWN_CHAIN_NAMES: Dict[str, str] = {
    "1": "Ethereum",
    "10": "Optimism",
    "56": "BSC",
    "137": "Polygon",
    "250": "Fantom",
    "42161": "Arbitrum",
    "43114": "Avalanche",
    "8453": "Base",
    "59144": "Linea",
    "534352": "Scroll",
    "48900": "Zircuit",
    "81457": "Blast",
    "167000": "Taiko",
    "33139": "ApeChain",
    "34443": "Mode",
    "130": "UniChain",
    "324": "zkSync",
    "2020": "Ronin",
    "1399811149": "Solana",
    "80094": "Berachain",
    "100": "Gnosis",
    "5000": "Mantle",
    "146": "Sonic",
    "57073": "Ink",
    "728126428": "Tron",
}

# Solana and Tron; everything else in the registry (hub included) is EVM
NON_EVM_CHAIN_IDS = frozenset({"1399811149", "728126428"})

HUB_CHAIN_ID = "hub"

DEFAULT_DECIMALS = 18


@dataclass(frozen=True)
class AssetRecord:
    """One asset deployment as listed in the registry (hub or a single chain)."""

    fingerprint: str
    symbol: str
    decimals: int
    is_evm_chain: bool
    chain_id: str = HUB_CHAIN_ID


@dataclass(frozen=True)
class ReferenceSnapshot:
    """
    Immutable point-in-time copy of the chain/asset registry.

    Assets keep registry order (hub first, then each chain) and may repeat the
    same fingerprint once per chain the asset is deployed on.
    """

    chains: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    assets: Tuple[AssetRecord, ...] = ()
    fetched_at: float = 0.0
    _by_fingerprint: Mapping[str, Tuple[AssetRecord, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        index: Dict[str, List[AssetRecord]] = {}
        for asset in self.assets:
            index.setdefault(asset.fingerprint.lower(), []).append(asset)
        object.__setattr__(
            self,
            "_by_fingerprint",
            MappingProxyType({key: tuple(values) for key, values in index.items()}),
        )

    @classmethod
    def empty(cls) -> "ReferenceSnapshot":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.chains and not self.assets

    def chain_name(self, chain_id: Any) -> Optional[str]:
        """Look up a chain display name by chain ID (None if unknown)"""
        if chain_id is None:
            return None
        return self.chains.get(str(chain_id).strip())

    def assets_for(self, fingerprint: Any) -> Tuple[AssetRecord, ...]:
        """All asset records matching a tickerhash (case-insensitive), in registry order"""
        if not fingerprint:
            return ()
        return self._by_fingerprint.get(str(fingerprint).strip().lower(), ())


def _parse_decimals(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_DECIMALS
    if isinstance(value, int):
        return value if value >= 0 else DEFAULT_DECIMALS
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return DEFAULT_DECIMALS


def _iter_assets(assets: Any, chain_id: str, is_evm_chain: bool) -> Iterator[AssetRecord]:
    if not isinstance(assets, dict):
        return
    for asset in assets.values():
        if not isinstance(asset, dict):
            continue
        ticker_hash = asset.get("tickerHash")
        symbol = asset.get("symbol")
        # Entries without a tickerhash or symbol cannot be resolved to anything useful
        if not ticker_hash or not symbol:
            continue
        yield AssetRecord(
            fingerprint=str(ticker_hash),
            symbol=str(symbol),
            decimals=_parse_decimals(asset.get("decimals")),
            is_evm_chain=is_evm_chain,
            chain_id=chain_id,
        )


def build_snapshot(payload: Any, fetched_at: float) -> ReferenceSnapshot:
    """
    Transform the raw registry document into a ReferenceSnapshot

    Args:
        payload: Parsed JSON shaped {hub: {assets}, chains: {id: {network, assets}}}
        fetched_at: Capture time (epoch seconds)

    Returns:
        ReferenceSnapshot

    Raises:
        ValueError: If the document does not have the expected top-level shape
    """
    if not isinstance(payload, dict):
        raise ValueError("Chain data payload is not a JSON object")

    hub = payload.get("hub")
    chains = payload.get("chains", {})
    if not isinstance(hub, dict):
        raise ValueError("Chain data payload has no 'hub' object")
    if not isinstance(chains, dict):
        raise ValueError("Chain data payload 'chains' is not an object")

    assets: List[AssetRecord] = list(_iter_assets(hub.get("assets"), HUB_CHAIN_ID, True))
    for chain_id, chain in chains.items():
        if not isinstance(chain, dict):
            continue
        chain_key = str(chain_id)
        assets.extend(
            _iter_assets(chain.get("assets"), chain_key, chain_key not in NON_EVM_CHAIN_IDS)
        )

    return ReferenceSnapshot(
        chains=MappingProxyType(dict(KNOWN_CHAIN_NAMES)),
        assets=tuple(assets),
        fetched_at=fetched_at,
    )


class ChainDataService:
    """Time-bounded cache of the chain/asset registry"""

    def __init__(
        self,
        url: Optional[str] = None,
        ttl: Optional[float] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize chain data service

        Args:
            url: Registry URL (defaults to CHAINDATA_URL)
            ttl: Cache TTL in seconds (defaults to CHAINDATA_TTL)
            timeout: HTTP timeout in seconds (defaults to CHAINDATA_TIMEOUT)
            clock: Time source returning epoch seconds
        """
        self.url = url or CHAINDATA_URL
        self.ttl = CHAINDATA_TTL if ttl is None else ttl
        self.timeout = CHAINDATA_TIMEOUT if timeout is None else timeout
        self._clock = clock
        self._snapshot = ReferenceSnapshot.empty()
        self._refresh_lock = threading.Lock()
        self._force_refresh = False

    @property
    def snapshot(self) -> ReferenceSnapshot:
        """Current snapshot without triggering a refresh"""
        return self._snapshot

    def get(self) -> ReferenceSnapshot:
        """
        Return the current snapshot, refreshing it first if it has expired.

        Never raises: if the refresh fails the previous (possibly stale or empty)
        snapshot is returned.
        """
        snapshot = self._snapshot
        if not self._is_stale(snapshot):
            return snapshot

        # Concurrent callers share one in-flight refresh
        with self._refresh_lock:
            snapshot = self._snapshot
            if not self._is_stale(snapshot):
                return snapshot

            refreshed = self._refresh(snapshot)
            if refreshed is None:
                return snapshot

            self._snapshot = refreshed
            self._force_refresh = False
            return refreshed

    def invalidate(self) -> None:
        """Force the next get() to refresh (the current snapshot stays readable)"""
        self._force_refresh = True

    def fetch_registry(self) -> Any:
        """GET the registry document and return the parsed JSON"""
        logger.info(f"Fetching chain data from {self.url}")
        response = requests.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_all_chain_ids(self) -> List[str]:
        return list(self.get().chains.keys())

    def get_all_chain_names(self) -> List[str]:
        return list(self.get().chains.values())

    def get_all_tickerhashes(self) -> List[str]:
        return list(dict.fromkeys(asset.fingerprint for asset in self.get().assets))

    def get_all_token_names(self) -> List[str]:
        return list(dict.fromkeys(asset.symbol for asset in self.get().assets))

    def _is_stale(self, snapshot: ReferenceSnapshot) -> bool:
        if self._force_refresh or snapshot.fetched_at <= 0:
            return True
        return self._clock() - snapshot.fetched_at >= self.ttl

    def _refresh(self, previous: ReferenceSnapshot) -> Optional[ReferenceSnapshot]:
        """Fetch and build a new snapshot; None on any failure"""
        try:
            payload = self.fetch_registry()
            fetched_at = self._clock()
            if fetched_at <= previous.fetched_at:
                fetched_at = previous.fetched_at + 0.001
            snapshot = build_snapshot(payload, fetched_at)

        except requests.Timeout:
            logger.error(f"Chain data request timeout after {self.timeout}s, keeping previous snapshot")
            return None

        except requests.RequestException as e:
            logger.error(f"Failed to fetch chain data: {e}, keeping previous snapshot")
            return None

        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Chain data parsing error: {e}, keeping previous snapshot")
            return None

        logger.info(
            f"Chain data refreshed: {len(snapshot.chains)} chains, {len(snapshot.assets)} assets"
        )
        return snapshot
