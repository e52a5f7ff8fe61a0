"""
Randomness consumer package.

Keeps randomness streams flowing on a commit-reveal protocol: opens heats
from unclaimed preimages and casts starts once every secret is revealed.
"""
from consumer.scheduler import Scheduler
from consumer.strategies.aggregator import RevealAggregator
from consumer.strategies.selector import (
    LocationSelector,
    LocationsExhaustedError,
    StreamsFailedError,
)

__all__ = [
    "Scheduler",
    "RevealAggregator",
    "LocationSelector",
    "LocationsExhaustedError",
    "StreamsFailedError",
]
