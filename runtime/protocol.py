"""Line protocol spoken with the game referee.

Input is a stream of whitespace separated tokens: the creature catalog once
at game start, then one block per turn. Output is one ``MOVE x y light``
line per owned drone.
"""
from typing import Dict, Iterator, List, Set, TextIO, Tuple

from scanner.model import (
    Command,
    Creature,
    CreatureCatalog,
    Drone,
    RadarDirection,
    Sighting,
    Snapshot,
)

class ProtocolError(ValueError):
    """Raised when the referee feed does not match the expected layout."""

class TokenReader:
    """Pulls tokens from a text stream, one line at a time."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._pending: Iterator[str] = iter(())

    def token(self) -> str:
        while True:
            tok = next(self._pending, None)
            if tok is not None:
                return tok
            line = self._stream.readline()
            if not line:
                raise EOFError("referee feed closed")
            self._pending = iter(line.split())

    def integer(self) -> int:
        tok = self.token()
        try:
            return int(tok)
        except ValueError:
            raise ProtocolError(f"expected an integer, got {tok!r}") from None

    def integers(self, n: int) -> List[int]:
        return [self.integer() for _ in range(n)]

def read_catalog(reader: TokenReader) -> CreatureCatalog:
    """Read the one-off creature list sent before the first turn."""
    catalog = CreatureCatalog()
    for _ in range(reader.integer()):
        creature_id, color, creature_type = reader.integers(3)
        catalog.add(Creature(creature_id, color, creature_type))
    return catalog

def _read_drones(reader: TokenReader) -> List[Drone]:
    drones = []
    for _ in range(reader.integer()):
        drone_id, x, y, emergency, battery = reader.integers(5)
        drones.append(Drone(drone_id, (x, y), bool(emergency), battery))
    return drones

def _read_radar(reader: TokenReader) -> Dict[Tuple[int, int], RadarDirection]:
    radar: Dict[Tuple[int, int], RadarDirection] = {}
    for _ in range(reader.integer()):
        drone_id, creature_id = reader.integers(2)
        label = reader.token()
        try:
            radar[(drone_id, creature_id)] = RadarDirection(label)
        except ValueError:
            raise ProtocolError(f"unknown radar direction {label!r}") from None
    return radar

def read_turn(reader: TokenReader, catalog: CreatureCatalog, turn: int = 0) -> Snapshot:
    """Read one turn block and build its snapshot."""
    my_score = reader.integer()
    foe_score = reader.integer()
    my_scans = reader.integers(reader.integer())
    foe_scans = reader.integers(reader.integer())
    my_drones = _read_drones(reader)
    foe_drones = _read_drones(reader)

    drone_scans: Dict[int, Set[int]] = {}
    for _ in range(reader.integer()):
        drone_id, creature_id = reader.integers(2)
        drone_scans.setdefault(drone_id, set()).add(creature_id)

    visible: Dict[int, Sighting] = {}
    for _ in range(reader.integer()):
        creature_id, x, y, vx, vy = reader.integers(5)
        visible[creature_id] = Sighting((x, y), (vx, vy))

    radar = _read_radar(reader)

    return Snapshot.build(
        catalog,
        turn=turn,
        my_score=my_score,
        foe_score=foe_score,
        my_scans=my_scans,
        foe_scans=foe_scans,
        my_drones=my_drones,
        foe_drones=foe_drones,
        drone_scans=drone_scans,
        visible=visible,
        radar=radar,
    )

def format_command(cmd: Command) -> str:
    """Render a command as the referee expects it."""
    return f"MOVE {cmd.target[0]} {cmd.target[1]} {1 if cmd.light else 0}"
