import logging
from typing import List, Optional, TextIO
from scanner.engine import DecisionEngine
from scanner.model import Command, Event, Snapshot
from .eventlog import EventLog
from .protocol import TokenReader, format_command, read_turn

log = logging.getLogger(__name__)

def decision_events(snapshot: Snapshot, commands: List[Command]) -> List[Event]:
    """One event per command, for replay and debugging."""
    evts: List[Event] = []
    for cmd in commands:
        data = {"drone_id": cmd.drone_id, "to": list(cmd.target), "light": cmd.light}
        if cmd.creature_id is not None:
            data["creature_id"] = cmd.creature_id
        kind = {"emergency": "Surfacing", "pursue": "Pursuit", "explore": "Exploration"}[cmd.reason]
        evts.append(Event(kind, snapshot.turn, data))
    return evts

class TurnRunner:
    """Synchronous driver: read a turn, decide, answer, repeat."""

    def __init__(self, engine: DecisionEngine, reader: TokenReader, out: TextIO,
                 events: Optional[EventLog] = None):
        self.engine = engine
        self.reader = reader
        self.out = out
        self.events = events if events is not None else EventLog()
        self.turn = 0

    def play_turn(self) -> List[Command]:
        """Handle exactly one turn. Raises EOFError when the feed is over."""
        snapshot = read_turn(self.reader, self.engine.catalog, turn=self.turn)
        commands = self.engine.decide(snapshot)

        for cmd in commands:
            self.out.write(format_command(cmd) + "\n")
        self.out.flush()

        self.events.append_many(decision_events(snapshot, commands))
        for cmd in commands:
            log.debug("[TurnRunner] turn %d drone %d -> %s %s light=%s",
                      self.turn, cmd.drone_id, cmd.reason, cmd.target, cmd.light)
        log.info("[TurnRunner] Turn %d: score %d-%d, %d visible, %d commands",
                 self.turn, snapshot.my_score, snapshot.foe_score,
                 len(snapshot.visible), len(commands))
        self.turn += 1
        return commands

    def run(self, max_turns: Optional[int] = None) -> int:
        """Play until the feed ends or max_turns is reached; return turns played."""
        played = 0
        while max_turns is None or played < max_turns:
            try:
                self.play_turn()
            except EOFError:
                log.info("[TurnRunner] Feed closed after %d turns", played)
                break
            played += 1
        return played
