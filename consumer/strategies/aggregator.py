"""
Reveal aggregation: casts starts whose secrets have all been revealed.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from protocol.models import Location, Preimage, Start
from consumer.services.fees import FeeEstimator

logger = logging.getLogger(__name__)


def _heat_order(preimage: Preimage):
    # Preimages without a heat go last
    if preimage.heat is None:
        return (1, 0)
    return (0, preimage.heat.index)


def group_by_start(preimages: List[Preimage]) -> Dict[str, List[Preimage]]:
    grouped: Dict[str, List[Preimage]] = defaultdict(list)
    for preimage in preimages:
        if preimage.start is not None:
            grouped[preimage.start.key].append(preimage)
    return grouped


class RevealAggregator:
    """Detects completed starts and submits their cast transaction."""

    def __init__(
        self,
        indexer,
        chain_client,
        contract,
        fee_estimator: Optional[FeeEstimator] = None,
        halt_on_repeat: bool = False,
    ):
        self.indexer = indexer
        self.chain_client = chain_client
        self.contract = contract
        self.fee_estimator = fee_estimator or FeeEstimator(chain_client)
        self.halt_on_repeat = halt_on_repeat

    async def _find_start(self, data: str) -> Optional[Start]:
        preimages = await self.indexer.unfinished_starts(data)
        if not preimages:
            return None
        heat = preimages[0].heat
        return heat.start if heat is not None else None

    async def detect_secrets(self) -> List[str]:
        """
        Run one detection pass.

        Returns:
            Hashes of the cast transactions sent during this pass.
        """
        preimages = await self.indexer.unlinked_secrets(secret_not=None, cast_id=None)
        by_start = group_by_start(preimages)
        hashes = list(dict.fromkeys(p.data for p in preimages))

        checked = set()
        sent: List[str] = []
        for data in hashes:
            start = await self._find_start(data)
            if start is None or not start.is_castable:
                continue
            heats = start.heats
            if not heats:
                continue
            if start.key in checked:
                if self.halt_on_repeat:
                    break
                continue
            checked.add(start.key)

            ordered = sorted(by_start.get(start.key, []), key=_heat_order)
            secrets = [p.secret for p in ordered if p.secret]
            if len(secrets) != len(heats):
                logger.debug(
                    f"Start {start.key} has {len(secrets)}/{len(heats)} secrets"
                )
                continue

            tx_hash = await self.cast(start, secrets)
            sent.append(tx_hash)
        return sent

    async def cast(self, start: Start, secrets: List[str]) -> str:
        """Submit the cast for a complete start and wait until it is mined."""
        overrides = await self.fee_estimator.estimate()
        heats = sorted(start.heats or [], key=lambda h: h.index)
        locations = [
            Location.from_pointer(heat.preimage.pointer, heat.preimage.index)
            for heat in heats
        ]
        call = self.contract.functions.cast(
            start.key,
            [location.to_contract_arg() for location in locations],
            secrets,
        )
        tx_hash = await self.chain_client.submit(call, overrides)
        logger.info(f"sending cast {tx_hash} for start {start.key}")
        await self.chain_client.wait_for_receipt(tx_hash)
        return tx_hash
