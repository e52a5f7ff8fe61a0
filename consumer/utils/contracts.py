"""
Contract bindings built from the ABIs bundled under `abis/`.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract

logger = logging.getLogger(__name__)

ABI_DIR = Path(__file__).parent / "abis"


def load_abi(name: str) -> List[Dict[str, Any]]:
    """Read the bundled ABI `name`.json, accepting bare or {"abi": [...]} files."""
    path = ABI_DIR / f"{name}.json"
    if not path.is_file():
        raise FileNotFoundError(f"ABI not found at {path}")

    with open(path, "r") as f:
        abi_data = json.load(f)
    if isinstance(abi_data, dict):
        return abi_data["abi"]
    return abi_data


def make_contract(w3: AsyncWeb3, name: str, address: str) -> AsyncContract:
    contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=load_abi(name))
    logger.debug(f"Bound {name} at {contract.address}")
    return contract
