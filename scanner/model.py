from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Literal, Mapping, Optional, Tuple
from enum import Enum
from types import MappingProxyType

Point = Tuple[int, int]  # (x, y) map units, y grows with depth
Reason = Literal["emergency", "pursue", "explore"]

MAP_MIN = 0
MAP_MAX = 10000

class RadarDirection(Enum):
    """Coarse bearing of a creature relative to a drone"""
    TOP_LEFT = "TL"
    TOP_RIGHT = "TR"
    BOTTOM_LEFT = "BL"
    BOTTOM_RIGHT = "BR"

# Relative pursuit weight per creature type (deeper types are worth more)
TYPE_PRIORITY: Dict[int, int] = {0: 1, 1: 2, 2: 3}
# Weight for types missing from the table, e.g. monsters (type -1)
UNKNOWN_TYPE_PRIORITY = 0

@dataclass(frozen=True)
class Tuning:
    """Constants driving target selection, exploration and move planning"""
    max_move: int = 600           # max displacement per turn
    score_scale: float = 1000.0   # numerator of the pursuit score
    light_battery: int = 10       # light needs battery strictly above this
    light_distance: float = 500   # ...and a target strictly farther than this
    shallow_depth: int = 2500     # above this depth we explore sideways and down
    explore_dx: int = 2000
    explore_dy: int = 1000
    edge_margin: int = 100        # anti-stall band along each map edge
    edge_low_snap: int = 1000
    edge_high_snap: int = 9000

DEFAULT_TUNING = Tuning()

class UnknownCreatureError(KeyError):
    """Raised when a creature id is not part of the game's catalog."""

@dataclass
class Creature:
    id: int
    color: int
    type: int
    pos: Optional[Point] = None  # last observed, stale when not visible
    velocity: Optional[Point] = None

@dataclass(frozen=True)
class Sighting:
    pos: Point
    velocity: Point

class CreatureCatalog:
    """Fixed set of creatures known from turn zero."""

    def __init__(self, creatures: Iterable[Creature] = ()):
        self._creatures: Dict[int, Creature] = {c.id: c for c in creatures}

    def add(self, creature: Creature) -> None:
        self._creatures[creature.id] = creature

    def get(self, creature_id: int) -> Creature:
        try:
            return self._creatures[creature_id]
        except KeyError:
            raise UnknownCreatureError(creature_id) from None

    def refresh(self, visible: Mapping[int, Sighting]) -> None:
        """Cache position/velocity of every visible creature we know about."""
        for creature_id, sighting in visible.items():
            creature = self._creatures.get(creature_id)
            if creature is None:
                continue
            creature.pos = sighting.pos
            creature.velocity = sighting.velocity

    def __contains__(self, creature_id: int) -> bool:
        return creature_id in self._creatures

    def __len__(self) -> int:
        return len(self._creatures)

@dataclass(frozen=True)
class Drone:
    id: int
    pos: Point
    emergency: bool = False
    battery: int = 30

@dataclass(frozen=True)
class Snapshot:
    """Everything known about the world for a single turn."""
    turn: int = 0
    my_score: int = 0
    foe_score: int = 0
    my_scans: FrozenSet[int] = frozenset()
    foe_scans: FrozenSet[int] = frozenset()
    my_drones: Tuple[Drone, ...] = ()
    foe_drones: Tuple[Drone, ...] = ()
    drone_scans: Mapping[int, FrozenSet[int]] = field(default_factory=dict)
    visible: Mapping[int, Sighting] = field(default_factory=dict)
    radar: Mapping[Tuple[int, int], RadarDirection] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        catalog: CreatureCatalog,
        *,
        turn: int = 0,
        my_score: int = 0,
        foe_score: int = 0,
        my_scans: Iterable[int] = (),
        foe_scans: Iterable[int] = (),
        my_drones: Iterable[Drone] = (),
        foe_drones: Iterable[Drone] = (),
        drone_scans: Optional[Mapping[int, Iterable[int]]] = None,
        visible: Optional[Mapping[int, Sighting]] = None,
        radar: Optional[Mapping[Tuple[int, int], RadarDirection]] = None,
    ) -> "Snapshot":
        """Freeze one turn of input and refresh the catalog's cached sightings."""
        visible = dict(visible or {})
        catalog.refresh(visible)
        return cls(
            turn=turn,
            my_score=my_score,
            foe_score=foe_score,
            my_scans=frozenset(my_scans),
            foe_scans=frozenset(foe_scans),
            my_drones=tuple(my_drones),
            foe_drones=tuple(foe_drones),
            drone_scans=MappingProxyType({d: frozenset(ids) for d, ids in (drone_scans or {}).items()}),
            visible=MappingProxyType(visible),
            radar=MappingProxyType(dict(radar or {})),
        )

    def carried_by(self, drone_id: int) -> FrozenSet[int]:
        return self.drone_scans.get(drone_id, frozenset())

    def already_scanned(self, drone_id: int) -> FrozenSet[int]:
        """Creatures banked by our side or already held by this drone."""
        return self.my_scans | self.carried_by(drone_id)

@dataclass(frozen=True)
class Target:
    creature_id: int
    pos: Point
    distance: float
    score: float

@dataclass(frozen=True)
class Command:
    drone_id: int
    target: Point
    light: bool = False
    reason: Reason = "explore"
    creature_id: Optional[int] = None

@dataclass
class Event:
    kind: str
    turn: int
    data: Dict
