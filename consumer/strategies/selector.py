"""
Location selection: opens new heats from unclaimed preimages.

For every configured stream a random byte picks a commitment threshold; the
unclaimed preimages at or above it, under pointers that fit the stream's
price and duration, become the heat's locations.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional

from pydantic import BaseModel, Field

from protocol.models import Location, RandomnessConfig, RandomnessStream
from consumer.services.fees import FeeEstimator
from consumer.utils.units import pad_byte, parse_units

logger = logging.getLogger(__name__)

REQUIRED_LOCATIONS = 3
# More candidates than this means others are competing for the same preimages
MAX_CANDIDATES = 3
POINTER_LIMIT = 100
PRICE_DECIMALS = 18


class LocationsExhaustedError(RuntimeError):
    """Not enough unclaimed preimages to open a heat."""

    def __init__(self, token: str, required: int, found: int):
        super().__init__(
            f"ran out of locations for token {token}: required={required} found={found}"
        )
        self.token = token
        self.required = required
        self.found = found


class StreamOutcome(BaseModel):
    """Result of consuming one stream during a selector pass."""

    token: str
    status: str = Field(..., description="'submitted', 'skipped' or 'failed'")
    tx_hash: Optional[str] = None
    error: Optional[str] = None


class StreamsFailedError(RuntimeError):
    """One or more streams failed during a selector pass."""

    def __init__(self, outcomes: List[StreamOutcome]):
        failed = [o for o in outcomes if o.status == "failed"]
        super().__init__(
            f"{len(failed)}/{len(outcomes)} streams failed: "
            + "; ".join(f"{o.token}: {o.error}" for o in failed)
        )
        self.outcomes = outcomes


class LocationSelector:
    """Consumes randomness by opening one heat per configured stream."""

    def __init__(
        self,
        config: RandomnessConfig,
        indexer,
        chain_client,
        contract,
        fee_estimator: Optional[FeeEstimator] = None,
        rng: Optional[random.Random] = None,
        threshold_padding: str = "left",
    ):
        self.config = config
        self.indexer = indexer
        self.chain_client = chain_client
        self.contract = contract
        self.fee_estimator = fee_estimator or FeeEstimator(chain_client)
        self.rng = rng or random.Random()
        self.threshold_padding = threshold_padding
        self.required = REQUIRED_LOCATIONS

    async def consume_randomness(self) -> List[StreamOutcome]:
        """
        Process all streams concurrently and wait for every one of them.

        A failing stream is logged and reported in its outcome; it never
        cancels the others.

        Raises:
            StreamsFailedError: If any stream failed, once all have finished.
        """
        streams = self.config.streams
        results = await asyncio.gather(
            *(self.consume_stream(stream) for stream in streams),
            return_exceptions=True,
        )

        outcomes = []
        for stream, result in zip(streams, results):
            token = stream.info.token
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(
                    f"Stream {token} failed: {result}",
                    exc_info=(type(result), result, result.__traceback__),
                )
                outcomes.append(
                    StreamOutcome(token=token, status="failed", error=str(result))
                )
            elif result is None:
                outcomes.append(StreamOutcome(token=token, status="skipped"))
            else:
                outcomes.append(
                    StreamOutcome(token=token, status="submitted", tx_hash=result)
                )

        if any(o.status == "failed" for o in outcomes):
            raise StreamsFailedError(outcomes)
        return outcomes

    async def find_locations(
        self, stream: RandomnessStream, threshold: int
    ) -> List[Location]:
        """Unclaimed locations at or above `threshold` that fit the stream."""
        info = stream.info
        price = parse_units(info.price, PRICE_DECIMALS)
        pointers = await self.indexer.pointers_ordered_by_self(
            pointer_limit=POINTER_LIMIT,
            pointer_filter={
                "token": info.token,
                "price_lte": str(price),
                "duration_lte": info.duration,
                "durationIsTimestamp": info.duration_is_timestamp,
            },
            preimage_limit=self.required,
            preimage_filter={
                "data_gte": pad_byte(threshold, side=self.threshold_padding),
                "heatId": None,
            },
        )
        return [
            Location.from_pointer(pointer, preimage.index)
            for pointer in pointers
            for preimage in (pointer.preimages.items if pointer.preimages else [])
        ]

    async def consume_stream(self, stream: RandomnessStream) -> Optional[str]:
        """
        Open a heat for one stream.

        Returns:
            The heat tx hash, or None when the candidate set was ambiguous.

        Raises:
            LocationsExhaustedError: If fewer than `required` locations exist.
        """
        info = stream.info
        threshold = self.rng.randrange(256)
        locations = await self.find_locations(stream, threshold)

        if len(locations) > MAX_CANDIDATES:
            logger.debug(
                f"Skipping stream {info.token}: {len(locations)} candidates"
            )
            return None
        if len(locations) < self.required:
            logger.warning(
                f"required={self.required} locations={[loc.model_dump() for loc in locations]}"
            )
            raise LocationsExhaustedError(info.token, self.required, len(locations))

        settings = Location(
            provider=self.chain_client.address,
            token=info.token,
            price=parse_units(info.price, PRICE_DECIMALS),
            duration=info.duration * 2,
            duration_is_timestamp=info.duration_is_timestamp,
            offset=0,
            index=0,
        )
        value = sum(location.stake for location in locations)

        logger.info(f"consuming {len(locations)} locations for stream {info.token}")
        overrides = await self.fee_estimator.estimate()
        call = self.contract.functions.heat(
            self.required,
            settings.to_contract_arg(),
            [location.to_contract_arg() for location in locations],
        )
        tx_hash = await self.chain_client.submit(call, overrides, value=value)
        logger.info(f"sent heat {tx_hash} for stream {info.token} (value={value})")
        return tx_hash
