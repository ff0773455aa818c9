from __future__ import annotations

from pathlib import Path

import pytest

from everclear_tools.chain_data import build_snapshot

# 2023-11-14T22:13:20.000Z
NOW_MS = 1_700_000_000_000


def _top_level_tests_group(path: Path) -> str | None:
    parts = path.parts
    try:
        tests_index = parts.index("tests")
    except ValueError:
        return None
    if tests_index + 1 >= len(parts):
        return None
    return parts[tests_index + 1]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    for item in items:
        group = _top_level_tests_group(Path(str(item.fspath)))
        if group == "unit":
            item.add_marker(pytest.mark.unit)
        elif group == "integration":
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def registry_payload() -> dict:
    """Trimmed-down everclear.json with one tickerhash deployed on EVM and non-EVM chains."""
    return {
        "hub": {
            "assets": {
                "0xhubusdc": {"symbol": "USDC", "tickerHash": "0xUSDC", "decimals": 6},
            }
        },
        "chains": {
            "1": {
                "network": "mainnet",
                "assets": {
                    "0xa0b8": {"symbol": "USDC", "tickerHash": "0xUSDC", "decimals": 6},
                    "0xc02a": {"symbol": "WETH", "tickerHash": "0xWETH", "decimals": 18},
                },
            },
            "1399811149": {
                "network": "mainnet",
                "assets": {
                    "EPjF": {"symbol": "USDC", "tickerHash": "0xUSDC", "decimals": 9},
                },
            },
            "728126428": {
                "network": "mainnet",
                "assets": {
                    "TR7N": {"symbol": "USDT", "tickerHash": "0xUSDT", "decimals": "6"},
                },
            },
            "42161": {
                "network": "mainnet",
                "assets": {
                    "0x82af": {"symbol": "WETH", "tickerHash": "0xWETH", "decimals": 18},
                    "0xbroken": {"symbol": "NOHASH"},
                },
            },
        },
    }


@pytest.fixture
def snapshot(registry_payload):
    return build_snapshot(registry_payload, fetched_at=1_000.0)
