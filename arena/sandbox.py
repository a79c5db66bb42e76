"""Local practice referee.

A small, seeded re-creation of the scanning game so the bot can be played
end-to-end without the official referee. The rules follow the real game
closely enough to exercise every decision branch: creatures drift inside
depth bands, drones scan what falls inside their (optionally lit) radius
and bank their scans by returning to the surface.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from scanner.engine import DecisionEngine
from scanner.geometry import clamp_point, distance, step_toward
from scanner.model import (
    MAP_MAX,
    MAP_MIN,
    Command,
    Creature,
    CreatureCatalog,
    Drone,
    Event,
    Point,
    RadarDirection,
    Sighting,
    Snapshot,
)
from runtime.eventlog import EventLog
from .rng import DRNG

log = logging.getLogger(__name__)

# Depth band (min_y, max_y) each creature type lives in
HABITATS: Dict[int, Tuple[int, int]] = {0: (2500, 5000), 1: (5000, 7500), 2: (7500, 10000)}
CREATURE_SPEED = 200
DRONE_SPEED = 600
SCAN_RADIUS = 800
LIGHT_RADIUS = 2000
LIGHT_COST = 5
MAX_BATTERY = 30
SURFACE_DEPTH = 500

@dataclass
class ArenaCreature:
    id: int
    color: int
    type: int
    pos: Point
    velocity: Point

@dataclass
class ArenaDrone:
    id: int
    player: int
    pos: Point
    battery: int = MAX_BATTERY
    radius: int = SCAN_RADIUS
    carried: Set[int] = field(default_factory=set)

    def as_drone(self) -> Drone:
        return Drone(self.id, self.pos, False, self.battery)

def bearing(src: Point, dst: Point) -> RadarDirection:
    """Quadrant of dst as seen from src (y grows downward)."""
    top = dst[1] < src[1]
    left = dst[0] < src[0]
    if top:
        return RadarDirection.TOP_LEFT if left else RadarDirection.TOP_RIGHT
    return RadarDirection.BOTTOM_LEFT if left else RadarDirection.BOTTOM_RIGHT

def _bounce(v: int, dv: int, low: int, high: int) -> Tuple[int, int]:
    nv = v + dv
    if nv < low:
        return low, abs(dv)
    if nv > high:
        return high, -abs(dv)
    return nv, dv

class Arena:
    """Deterministic two-player match: same seed and commands, same game."""

    def __init__(self, seed: int, colors: int = 4, drones_per_player: int = 2,
                 max_turns: int = 200):
        if colors < 1:
            raise ValueError(f"Need at least one creature color, got {colors}")
        if drones_per_player < 1:
            raise ValueError(f"Need at least one drone per player, got {drones_per_player}")
        if max_turns < 1:
            raise ValueError(f"max_turns must be positive: {max_turns}")

        self.seed = seed
        self.max_turns = max_turns
        self.turn = 0
        self.scores = [0, 0]
        self.saved: List[Set[int]] = [set(), set()]
        self._rng = DRNG(seed)
        self.drones: Dict[int, ArenaDrone] = {}
        self.creatures: Dict[int, ArenaCreature] = {}
        self._spawn_drones(drones_per_player)
        self._spawn_creatures(colors)

    def _spawn_drones(self, per_player: int) -> None:
        for i in range(per_player):
            x = (2 * i + 1) * MAP_MAX // (4 * per_player)
            for player, px in ((0, x), (1, MAP_MAX - x)):
                drone_id = player * per_player + i
                self.drones[drone_id] = ArenaDrone(drone_id, player, (px, SURFACE_DEPTH))

    def _spawn_creatures(self, colors: int) -> None:
        next_id = len(self.drones)
        for color in range(colors):
            for creature_type, (low, high) in HABITATS.items():
                pos = (self._rng.integer(MAP_MIN, MAP_MAX), self._rng.integer(low, high))
                vel = self._rng.heading(CREATURE_SPEED)
                self.creatures[next_id] = ArenaCreature(next_id, color, creature_type, pos, vel)
                next_id += 1

    @property
    def done(self) -> bool:
        if self.turn >= self.max_turns:
            return True
        every = set(self.creatures)
        return self.saved[0] >= every and self.saved[1] >= every

    def catalog(self) -> CreatureCatalog:
        """Fresh catalog, as a player receives it at game start."""
        return CreatureCatalog(Creature(c.id, c.color, c.type) for c in self.creatures.values())

    def snapshot_for(self, player: int, catalog: CreatureCatalog) -> Snapshot:
        """Build what `player` is told at the start of the current turn."""
        foe = 1 - player
        mine = [d for d in self.drones.values() if d.player == player]
        theirs = [d for d in self.drones.values() if d.player == foe]

        visible: Dict[int, Sighting] = {}
        radar: Dict[Tuple[int, int], RadarDirection] = {}
        for c in self.creatures.values():
            if any(distance(d.pos, c.pos) <= d.radius for d in mine):
                visible[c.id] = Sighting(c.pos, c.velocity)
            if c.id in self.saved[player]:
                continue
            for d in mine:
                radar[(d.id, c.id)] = bearing(d.pos, c.pos)

        return Snapshot.build(
            catalog,
            turn=self.turn,
            my_score=self.scores[player],
            foe_score=self.scores[foe],
            my_scans=self.saved[player],
            foe_scans=self.saved[foe],
            my_drones=[d.as_drone() for d in mine],
            foe_drones=[d.as_drone() for d in theirs],
            drone_scans={d.id: d.carried for d in self.drones.values() if d.carried},
            visible=visible,
            radar=radar,
        )

    def _move_drones(self, commands_by_player: Dict[int, List[Command]]) -> None:
        orders: Dict[int, Command] = {}
        for player, commands in commands_by_player.items():
            for cmd in commands:
                drone = self.drones.get(cmd.drone_id)
                if drone is None or drone.player != player:
                    log.warning("[Arena] Player %d cannot command drone %d, ignoring",
                                player, cmd.drone_id)
                    continue
                orders[drone.id] = cmd

        for drone in self.drones.values():
            cmd = orders.get(drone.id)
            if cmd is not None and cmd.light and drone.battery >= LIGHT_COST:
                drone.battery -= LIGHT_COST
                drone.radius = LIGHT_RADIUS
            else:
                drone.battery = min(MAX_BATTERY, drone.battery + 1)
                drone.radius = SCAN_RADIUS
            if cmd is not None:
                drone.pos = step_toward(drone.pos, clamp_point(cmd.target), DRONE_SPEED)

    def _move_creatures(self) -> None:
        for c in self.creatures.values():
            low, high = HABITATS[c.type]
            x, vx = _bounce(c.pos[0], c.velocity[0], MAP_MIN, MAP_MAX)
            y, vy = _bounce(c.pos[1], c.velocity[1], low, high)
            c.pos = (x, y)
            c.velocity = (vx, vy)

    def _scan(self) -> List[Event]:
        evts: List[Event] = []
        for drone in self.drones.values():
            for c in self.creatures.values():
                if c.id in self.saved[drone.player] or c.id in drone.carried:
                    continue
                if distance(drone.pos, c.pos) <= drone.radius:
                    drone.carried.add(c.id)
                    evts.append(Event("Scanned", self.turn,
                                      {"drone_id": drone.id, "player": drone.player, "creature_id": c.id}))
        return evts

    def _surface(self) -> List[Event]:
        """Bank carried scans of drones at the surface."""
        evts: List[Event] = []
        banked_before = [set(s) for s in self.saved]
        for drone in self.drones.values():
            if drone.pos[1] > SURFACE_DEPTH or not drone.carried:
                continue
            foe = 1 - drone.player
            for creature_id in sorted(drone.carried - self.saved[drone.player]):
                points = self.creatures[creature_id].type + 1
                if creature_id not in banked_before[foe]:
                    points *= 2
                self.scores[drone.player] += points
                self.saved[drone.player].add(creature_id)
                evts.append(Event("Saved", self.turn,
                                  {"drone_id": drone.id, "player": drone.player,
                                   "creature_id": creature_id, "points": points}))
            drone.carried.clear()
        return evts

    def step(self, commands_by_player: Dict[int, List[Command]]) -> List[Event]:
        """Advance the match by one turn."""
        if self.done:
            raise RuntimeError("Game is already finished")

        evts: List[Event] = []
        self._move_drones(commands_by_player)
        self._move_creatures()
        evts += self._scan()
        evts += self._surface()
        self.turn += 1
        if self.done:
            evts.append(Event("GameOver", self.turn, {"scores": list(self.scores)}))
        return evts

    def play_turn(self, engines: Sequence[DecisionEngine]) -> List[Event]:
        """Let one engine per player decide, then advance the match."""
        commands = {
            player: engine.decide(self.snapshot_for(player, engine.catalog))
            for player, engine in enumerate(engines)
        }
        return self.step(commands)

    def play(self, engines: Sequence[DecisionEngine],
             events: Optional[EventLog] = None) -> Tuple[int, int]:
        """Play to the end and return the final scores."""
        while not self.done:
            evts = self.play_turn(engines)
            if events is not None:
                events.append_many(evts)
        log.info("[Arena] seed %d finished after %d turns: %d-%d",
                 self.seed, self.turn, self.scores[0], self.scores[1])
        return self.scores[0], self.scores[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn": self.turn,
            "done": self.done,
            "scores": list(self.scores),
            "drones": [
                {"id": d.id, "player": d.player, "pos": list(d.pos), "battery": d.battery,
                 "carried": sorted(d.carried)}
                for d in self.drones.values()
            ],
            "creatures": [
                {"id": c.id, "color": c.color, "type": c.type, "pos": list(c.pos),
                 "velocity": list(c.velocity)}
                for c in self.creatures.values()
            ],
        }
