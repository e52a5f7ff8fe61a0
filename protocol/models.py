"""
Shared data models for the randomness protocol.

Indexer results are parsed into these models at the query boundary. Field
names follow Python conventions; the camelCase names used by the indexer and
the contract ABI are kept as aliases.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from web3 import Web3


class _IndexerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Pointer(_IndexerModel):
    """A provider's standing commitment offer."""

    provider: str = Field(..., description="Provider address")
    token: str = Field(..., description="Token the provider is paid in")
    price: int = Field(..., description="Price per preimage (fixed point)")
    duration: int = Field(..., description="Reveal window")
    duration_is_timestamp: bool = Field(..., alias="durationIsTimestamp")
    offset: int = Field(..., description="Offset of the first preimage")


class PreimagePage(_IndexerModel):
    items: List["Preimage"] = Field(default_factory=list)


class PointerWithPreimages(Pointer):
    preimages: Optional[PreimagePage] = None


class StartRef(_IndexerModel):
    key: str


class HeatRef(_IndexerModel):
    index: int


class Preimage(_IndexerModel):
    """One committed value under a pointer."""

    index: int = Field(..., description="Position of the preimage under its pointer")
    data: str = Field(..., description="Commitment hash")
    secret: Optional[str] = Field(None, description="Revealed value")
    heat_id: Optional[str] = Field(None, alias="heatId")
    heat: Optional[HeatRef] = None
    start: Optional[StartRef] = None


class Location(_IndexerModel):
    """A single preimage of a single pointer, as consumed by heat and cast."""

    provider: str
    token: str
    price: int
    duration: int
    duration_is_timestamp: bool = Field(..., alias="durationIsTimestamp")
    offset: int
    index: int

    @classmethod
    def from_pointer(cls, pointer: Pointer, index: int) -> "Location":
        return cls(
            provider=pointer.provider,
            token=pointer.token,
            price=pointer.price,
            duration=pointer.duration,
            duration_is_timestamp=pointer.duration_is_timestamp,
            offset=pointer.offset,
            index=index,
        )

    @property
    def stake(self) -> int:
        """Value that must accompany this location in a heat transaction."""
        return self.price

    def to_contract_arg(self) -> Dict[str, Any]:
        """Render as the contract's PreimageLocation tuple."""
        return {
            "provider": Web3.to_checksum_address(self.provider),
            "durationIsTimestamp": self.duration_is_timestamp,
            "duration": self.duration,
            "token": Web3.to_checksum_address(self.token),
            "price": self.price,
            "offset": self.offset,
            "index": self.index,
        }


class HeatPreimage(_IndexerModel):
    index: int
    pointer: Pointer


class Heat(_IndexerModel):
    """One claim inside a start, linked to the preimage it consumed."""

    index: int = 0
    preimage: HeatPreimage


class HeatPage(_IndexerModel):
    items: List[Heat] = Field(default_factory=list)


class Start(_IndexerModel):
    """A group of heats sharing one key."""

    key: str
    chopped: Optional[bool] = False
    cast_id: Optional[str] = Field(None, alias="castId")
    heat: Optional[HeatPage] = None

    @property
    def heats(self) -> Optional[List[Heat]]:
        if self.heat is None:
            return None
        return self.heat.items

    @property
    def is_castable(self) -> bool:
        return not self.chopped and self.cast_id is None


class StartingHeat(_IndexerModel):
    start: Optional[Start] = None


class StartingPreimage(_IndexerModel):
    heat: Optional[StartingHeat] = None


# Configuration models


class StreamInfo(_IndexerModel):
    """Parameters of one randomness stream the consumer keeps alive."""

    token: str = Field(..., description="Token used to pay providers")
    price: str = Field(..., description="Maximum price, decimal string")
    duration: int = Field(..., description="Maximum reveal window")
    duration_is_timestamp: bool = Field(False, alias="durationIsTimestamp")


class RandomnessStream(_IndexerModel):
    info: StreamInfo


class RandomnessConfig(_IndexerModel):
    streams: List[RandomnessStream] = Field(default_factory=list)


PreimagePage.model_rebuild()
PointerWithPreimages.model_rebuild()
