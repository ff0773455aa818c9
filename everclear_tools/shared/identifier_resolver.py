"""Chain ID and tickerhash resolution over one registry snapshot."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from everclear_tools.chain_data import ChainDataService, ReferenceSnapshot


UNKNOWN_CHAIN = "Unknown Chain"
UNKNOWN_TOKEN = "Unknown Token"


@dataclass(frozen=True)
class AssetResolution:
    symbol: str
    decimals: int


def unknown_chain(chain_id: Any) -> str:
    return f"{UNKNOWN_CHAIN} ({chain_id})"


def unknown_token(fingerprint: Any) -> str:
    return f"{UNKNOWN_TOKEN} ({fingerprint})"


class IdentifierResolver:
    """
    Resolves identifiers against a single immutable snapshot.

    Every lookup for one batch goes through the same snapshot, so a registry
    refresh in the middle of a batch cannot mix old and new data.
    """

    def __init__(self, snapshot: ReferenceSnapshot):
        self.snapshot = snapshot

    @classmethod
    def from_service(cls, service: ChainDataService) -> "IdentifierResolver":
        return cls(service.get())

    def lookup_chain_name(self, chain_id: Any) -> str | None:
        return self.snapshot.chain_name(chain_id)

    def resolve_chain_name(self, chain_id: Any) -> str:
        """Chain display name, or 'Unknown Chain (<id>)' (never empty)."""
        name = self.lookup_chain_name(chain_id)
        return name if name else unknown_chain(chain_id)

    def resolve_asset(self, fingerprint: Any) -> AssetResolution | None:
        """
        Symbol and decimals for a tickerhash, or None when it is not in the registry.

        The same tickerhash may be deployed on several chains with different
        decimals metadata. EVM deployments are preferred when there are any;
        within the chosen set the most frequent decimals value wins (ties go to
        the value seen first), and the symbol comes from the first match.
        """
        matches = self.snapshot.assets_for(fingerprint)
        if not matches:
            return None

        evm_matches = [asset for asset in matches if asset.is_evm_chain]
        candidates = evm_matches or list(matches)

        # Counter preserves first-seen order, and most_common() is stable for ties
        decimals, _count = Counter(asset.decimals for asset in candidates).most_common(1)[0]
        return AssetResolution(symbol=candidates[0].symbol, decimals=decimals)

    def resolve_asset_name_only(self, fingerprint: Any) -> str:
        matches = self.snapshot.assets_for(fingerprint)
        if matches:
            return matches[0].symbol
        return unknown_token(fingerprint)
