"""
Package containing protocol related models for the randomness consumer.

Defines the typed shapes of indexer results (pointers, preimages, heats,
starts), the locations passed to the Random contract, and the stream
configuration consumed by the agent.
"""

from protocol.models import (
    Pointer,
    PointerWithPreimages,
    Preimage,
    Location,
    Heat,
    Start,
    StreamInfo,
    RandomnessStream,
    RandomnessConfig,
)

__all__ = [
    # Indexer models
    "Pointer",
    "PointerWithPreimages",
    "Preimage",
    "Location",
    "Heat",
    "Start",
    # Configuration
    "StreamInfo",
    "RandomnessStream",
    "RandomnessConfig",
]
