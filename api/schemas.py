from typing import Literal, Optional, Tuple
from pydantic import BaseModel, Field

class CreatureIn(BaseModel):
    """Catalog entry sent once per game."""
    creature_id: int
    color: int
    type: int

class TuningIn(BaseModel):
    """Optional overrides of the decision constants."""
    max_move: Optional[int] = Field(default=None, gt=0)
    light_battery: Optional[int] = None
    light_distance: Optional[float] = None
    shallow_depth: Optional[int] = None
    explore_dx: Optional[int] = None
    explore_dy: Optional[int] = None

class BotStartRequest(BaseModel):
    """Bot session start request schema."""
    creatures: list[CreatureIn]
    tuning: Optional[TuningIn] = None
    type_priority: Optional[dict[int, int]] = None

class DroneIn(BaseModel):
    drone_id: int
    pos: Tuple[int, int]
    emergency: bool = False
    battery: int = 30

class SightingIn(BaseModel):
    creature_id: int
    pos: Tuple[int, int]
    velocity: Tuple[int, int] = (0, 0)

class DroneScanIn(BaseModel):
    drone_id: int
    creature_id: int

class RadarBlipIn(BaseModel):
    drone_id: int
    creature_id: int
    radar: Literal["TL", "TR", "BL", "BR"]

class TurnIn(BaseModel):
    """One turn of world state, mirroring the referee feed."""
    my_score: int = 0
    foe_score: int = 0
    my_scans: list[int] = Field(default_factory=list)
    foe_scans: list[int] = Field(default_factory=list)
    my_drones: list[DroneIn]
    foe_drones: list[DroneIn] = Field(default_factory=list)
    drone_scans: list[DroneScanIn] = Field(default_factory=list)
    visible: list[SightingIn] = Field(default_factory=list)
    radar: list[RadarBlipIn] = Field(default_factory=list)

class CommandOut(BaseModel):
    drone_id: int
    x: int
    y: int
    light: bool
    line: str

class ArenaStartRequest(BaseModel):
    """Arena start request schema."""
    seed: int = 42
    colors: int = Field(default=4, ge=1)
    drones_per_player: int = Field(default=2, ge=1)
    max_turns: int = Field(default=200, ge=1)

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]
