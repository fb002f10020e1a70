# Models for the rice paddy territory game

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ClaimOutcome(Enum):
    CLAIMED = "Claimed"
    OUT_OF_BOUNDS = "OutOfBounds"
    UNAVAILABLE = "AlreadyOccupiedOrInsufficientUnits"


class WaterOutcome(Enum):
    WATERED = "Watered"
    INSUFFICIENT_WATER = "InsufficientWater"
    NOT_ELIGIBLE = "NotControlledOrOutOfBounds"


class BuildOutcome(Enum):
    BUILT = "Built"
    INSUFFICIENT_RESOURCES = "InsufficientResources"
    NOT_ELIGIBLE = "NotEligibleTile"


class CollectOutcome(Enum):
    COLLECTED = "CollectedWater"


class OpponentOutcome(Enum):
    CLAIMED = "Claimed"
    CLAIM_FAILED = "ClaimFailed"
    WATERED = "Watered"
    BUILT = "Built"
    COLLECTED_WATER = "CollectedWater"


class TileState(Enum):
    EMPTY = "EMPTY"
    RICE = "RICE"
    RICE_WATERED = "RICEWATER"
    HOUSE = "HOUSE"
    HOUSE_WATERED = "HOUSEWATER"


class Ownership(Enum):
    SELF = 1
    OTHER = 2


RESOURCE_NAMES = ('water', 'rice', 'units', 'houses')


@dataclass
class Tile:
    """
    One grid cell. The owner is stored as a side index (0 or 1) into the
    game's two-element side registry, never as a Side object.
    """
    required_units: int = 0
    occupied: bool = False
    owner: Optional[int] = None
    watered: bool = False
    housed: bool = False

    def set_occupied(self, side_index: int) -> None:
        self.occupied = True
        self.owner = side_index


@dataclass(frozen=True)
class ResourceSnapshot:
    """Resources of a side at the end of one day."""
    water: float
    rice: float
    units: int
    houses: int

    def as_dict(self) -> dict:
        return {'water': self.water, 'rice': self.rice,
                'units': self.units, 'houses': self.houses}


@dataclass
class Side:
    """
    One of the two competing parties.

    Counters are owned exclusively by the side; the other side only affects
    them through board-mediated actions. controlled_tiles starts at 1 for
    the free home tile and only ever increases.
    """
    index: int  # Position in the side registry (0 = p1, 1 = p2)
    id: str  # 'p1' (human) or 'p2' (scripted opponent)
    home: Tuple[int, int] = (0, 0)
    rice: float = 20.0
    water: float = 10.0
    units: int = 15
    houses: int = 0
    controlled_tiles: int = 1
    history: List[ResourceSnapshot] = field(default_factory=list)

    def snapshot(self) -> ResourceSnapshot:
        return ResourceSnapshot(water=self.water, rice=self.rice,
                                units=self.units, houses=self.houses)
