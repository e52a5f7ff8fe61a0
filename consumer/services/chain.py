"""
Blockchain client for the consumer account.

Signs transactions locally with the consumer key and submits them through
an AsyncWeb3 provider.
"""
import logging
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.contract.async_contract import AsyncContractFunction

from consumer.services.fees import FeeOverrides

logger = logging.getLogger(__name__)


class ChainClient:
    """Thin wrapper over AsyncWeb3 for fee lookup, submission and receipts."""

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        chain_id: Optional[int] = None,
    ):
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id

    @classmethod
    def from_private_key(
        cls, w3: AsyncWeb3, private_key: str, chain_id: Optional[int] = None
    ) -> "ChainClient":
        return cls(w3, Account.from_key(private_key), chain_id=chain_id)

    @property
    def address(self) -> str:
        return self.account.address

    async def latest_base_fee(self) -> int:
        block = await self.w3.eth.get_block("latest")
        base_fee = block.get("baseFeePerGas")
        if base_fee is None:
            raise RuntimeError(
                f"Block {block.get('number')} has no base fee; chain does not support EIP-1559"
            )
        return int(base_fee)

    async def submit(
        self,
        call: AsyncContractFunction,
        overrides: FeeOverrides,
        value: int = 0,
    ) -> str:
        """Build, sign and broadcast a contract call. Returns the tx hash."""
        if self.chain_id is None:
            self.chain_id = await self.w3.eth.chain_id
        nonce = await self.w3.eth.get_transaction_count(self.address, "pending")
        tx = await call.build_transaction(
            {
                "from": self.address,
                "nonce": nonce,
                "chainId": self.chain_id,
                "value": value,
                **overrides.to_tx_params(),
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.debug(f"Broadcast {call.fn_name} tx {tx_hash_hex} (nonce={nonce})")
        return tx_hash_hex

    async def wait_for_receipt(self, tx_hash: str):
        """
        Wait until `tx_hash` is mined and return its receipt.

        A reverted transaction is still mined: it is logged and its receipt
        returned. Only failures of the wait itself raise.
        """
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt.get("status") == 0:
            logger.warning(
                f"Transaction {tx_hash} reverted in block {receipt.get('blockNumber')}"
            )
            return receipt
        logger.info(
            f"Transaction {tx_hash} mined in block {receipt.get('blockNumber')}"
        )
        return receipt
