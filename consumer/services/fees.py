"""
Gas fee overrides for consumer transactions.

Fees are recomputed from the latest base fee right before every submission.
"""
from typing import Any, Dict

from pydantic import BaseModel, Field

DEFAULT_GAS_LIMIT = 10_000_000
DYNAMIC_FEE = "dynamic-fee"
# EIP-1559 transaction type
DYNAMIC_FEE_TX_TYPE = 2


class FeeOverrides(BaseModel):
    """Dynamic fee parameters attached to a transaction."""

    max_fee_per_gas: int = Field(..., description="Fee cap per gas unit")
    max_priority_fee_per_gas: int = Field(..., description="Tip per gas unit")
    tx_kind: str = Field(DYNAMIC_FEE, description="Transaction kind")
    gas: int = Field(DEFAULT_GAS_LIMIT, description="Gas limit")

    def to_tx_params(self) -> Dict[str, Any]:
        return {
            "maxFeePerGas": self.max_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "type": DYNAMIC_FEE_TX_TYPE,
            "gas": self.gas,
        }


def compute_fee_overrides(base_fee: int) -> FeeOverrides:
    """
    Derive fee overrides from a base fee.

    The fee cap is twice the base fee. The tip is a tenth of the base fee,
    never below 1 wei.
    """
    priority_fee = max(base_fee // 10, 1) if base_fee > 10 else 1
    return FeeOverrides(
        max_fee_per_gas=base_fee * 2,
        max_priority_fee_per_gas=priority_fee,
    )


class FeeEstimator:
    """Computes fresh fee overrides from the chain's latest base fee."""

    def __init__(self, chain_client):
        self.chain_client = chain_client

    async def estimate(self) -> FeeOverrides:
        base_fee = await self.chain_client.latest_base_fee()
        return compute_fee_overrides(base_fee)
