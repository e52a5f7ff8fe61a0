"""
Shared test helpers and builders for project-wide use.

Builders return dictionaries shaped like indexer responses, so tests feed
the same camelCase payloads the GraphQL endpoint produces.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock


# Ensure project root is on path when tests run
def _ensure_project_root() -> Path:
    root = Path(__file__).resolve().parent.parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    return root


def ensure_project_root() -> Path:
    """Add project root to sys.path. Idempotent. Returns root Path."""
    return _ensure_project_root()


CONSUMER_ADDRESS = "0x" + "c0" * 20
TOKEN_ADDRESS = "0x" + "00" * 20
ONE_MILLI = 10**15


def address(n: int) -> str:
    """Deterministic address for provider number n."""
    return "0x" + f"{n:040x}"


def commitment(n: int) -> str:
    return "0x" + f"{n:064x}"


def pointer_dict(
    provider: int,
    preimage_indices: List[int],
    *,
    price: int = ONE_MILLI,
    duration: int = 12,
    offset: int = 0,
    token: str = TOKEN_ADDRESS,
) -> Dict:
    """Pointer as returned by pointersOrderedBySelf, with nested preimages."""
    return {
        "provider": address(provider),
        "token": token,
        "price": str(price),
        "duration": str(duration),
        "durationIsTimestamp": False,
        "offset": str(offset),
        "preimages": {
            "items": [
                {"index": str(i), "data": commitment(provider * 100 + i), "heatId": None}
                for i in preimage_indices
            ]
        },
    }


def secret_dict(data: str, start_key: str, heat_index: int, secret: Optional[str]) -> Dict:
    """Preimage as returned by unlinkedSecrets."""
    return {
        "index": "0",
        "data": data,
        "secret": secret,
        "heat": {"index": heat_index},
        "start": {"key": start_key},
    }


def start_dict(
    key: str,
    heats: List[Dict],
    *,
    chopped: bool = False,
    cast_id: Optional[str] = None,
    with_heats: bool = True,
) -> Dict:
    """Preimage item as returned by unfinishedStarts, wrapping its start."""
    return {
        "heat": {
            "start": {
                "key": key,
                "chopped": chopped,
                "castId": cast_id,
                "heat": {"items": heats} if with_heats else None,
            }
        }
    }


def heat_dict(heat_index: int, provider: int, preimage_index: int) -> Dict:
    return {
        "index": heat_index,
        "preimage": {
            "index": str(preimage_index),
            "pointer": {
                "provider": address(provider),
                "token": TOKEN_ADDRESS,
                "price": str(ONE_MILLI),
                "duration": "12",
                "durationIsTimestamp": False,
                "offset": "0",
            },
        },
    }


def build_mock_chain_client(base_fee: int = 50, tx_hash: str = "0x" + "ab" * 32) -> MagicMock:
    """Chain client double: fixed base fee, every submission returns `tx_hash`."""
    chain = MagicMock()
    chain.address = CONSUMER_ADDRESS
    chain.latest_base_fee = AsyncMock(return_value=base_fee)
    chain.submit = AsyncMock(return_value=tx_hash)
    chain.wait_for_receipt = AsyncMock(return_value={"status": 1, "blockNumber": 1})
    return chain


def build_mock_contract() -> MagicMock:
    """Contract double whose function calls record their arguments."""
    contract = MagicMock()
    contract.address = address(0xFEED)
    return contract


def build_mock_w3(base_fee: int = 50, receipts=None) -> MagicMock:
    """AsyncWeb3 double for ChainClient; `receipts` are returned in order."""
    w3 = MagicMock()
    w3.eth.get_block = AsyncMock(return_value={"number": 10, "baseFeePerGas": base_fee})
    w3.eth.get_transaction_count = AsyncMock(return_value=7)
    w3.eth.send_raw_transaction = AsyncMock(return_value=b"\x12" * 32)
    if receipts is None:
        receipts = [{"status": 1, "blockNumber": 11}]
        w3.eth.wait_for_transaction_receipt = AsyncMock(return_value=receipts[0])
    else:
        w3.eth.wait_for_transaction_receipt = AsyncMock(side_effect=receipts)
    return w3


def build_mock_account() -> MagicMock:
    account = MagicMock()
    account.address = CONSUMER_ADDRESS
    account.sign_transaction.return_value.raw_transaction = b"signed"
    return account
