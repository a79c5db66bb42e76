import dataclasses
import logging
from fastapi import FastAPI, HTTPException
from arena.sandbox import Arena
from runtime.eventlog import EventLog
from runtime.protocol import format_command
from runtime.runner import decision_events
from scanner.engine import DecisionEngine
from scanner.model import (
    DEFAULT_TUNING,
    Creature,
    CreatureCatalog,
    Drone,
    RadarDirection,
    Sighting,
    Snapshot,
    UnknownCreatureError,
)
from .schemas import ArenaStartRequest, BotStartRequest, CommandOut, EventsResponse, TurnIn

log = logging.getLogger(__name__)

app = FastAPI(title="Seabed Scanner API")

engine: DecisionEngine | None = None
bot_turn = 0
bot_events = EventLog()

arena: Arena | None = None
arena_engines: list[DecisionEngine] = []
arena_events = EventLog()

def _snapshot_from(req: TurnIn, catalog: CreatureCatalog, turn: int) -> Snapshot:
    """Translate a posted turn into a snapshot."""
    drone_scans: dict[int, set[int]] = {}
    for s in req.drone_scans:
        drone_scans.setdefault(s.drone_id, set()).add(s.creature_id)
    return Snapshot.build(
        catalog,
        turn=turn,
        my_score=req.my_score,
        foe_score=req.foe_score,
        my_scans=req.my_scans,
        foe_scans=req.foe_scans,
        my_drones=[Drone(d.drone_id, d.pos, d.emergency, d.battery) for d in req.my_drones],
        foe_drones=[Drone(d.drone_id, d.pos, d.emergency, d.battery) for d in req.foe_drones],
        drone_scans=drone_scans,
        visible={v.creature_id: Sighting(v.pos, v.velocity) for v in req.visible},
        radar={(b.drone_id, b.creature_id): RadarDirection(b.radar) for b in req.radar},
    )

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Seabed Scanner API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.post("/bot/start")
async def start_bot(req: BotStartRequest):
    """Start a bot session for a new game."""
    global engine, bot_turn, bot_events
    catalog = CreatureCatalog(Creature(c.creature_id, c.color, c.type) for c in req.creatures)
    tuning = DEFAULT_TUNING
    if req.tuning is not None:
        tuning = dataclasses.replace(DEFAULT_TUNING, **req.tuning.model_dump(exclude_none=True))
    engine = DecisionEngine(catalog, tuning=tuning, type_priority=req.type_priority)
    bot_turn = 0
    bot_events = EventLog()
    log.info("[API] Bot session started with %d creatures", len(catalog))
    return {"session": "local", "creatures": len(catalog)}

@app.post("/bot/turn")
async def play_turn(req: TurnIn) -> list[CommandOut]:
    """Decide the commands for one turn."""
    global bot_turn
    if not engine:
        raise HTTPException(400, "Bot session not started")
    snapshot = _snapshot_from(req, engine.catalog, bot_turn)
    try:
        commands = engine.decide(snapshot)
    except UnknownCreatureError as e:
        raise HTTPException(422, f"Creature {e.args[0]} is not in the catalog") from None
    bot_events.append_many(decision_events(snapshot, commands))
    bot_turn += 1
    return [
        CommandOut(drone_id=c.drone_id, x=c.target[0], y=c.target[1], light=c.light,
                   line=format_command(c))
        for c in commands
    ]

@app.get("/bot/events")
async def get_bot_events(since: int = 0, limit: int = 500):
    """Get bot decision events since offset."""
    evts, next_offset = bot_events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "turn": e.turn, "data": e.data} for e in evts]
    )

@app.post("/arena/start")
async def start_arena(req: ArenaStartRequest):
    """Start a practice match with the bot playing both sides."""
    global arena, arena_engines, arena_events
    arena = Arena(req.seed, colors=req.colors, drones_per_player=req.drones_per_player,
                  max_turns=req.max_turns)
    arena_engines = [DecisionEngine(arena.catalog()), DecisionEngine(arena.catalog())]
    arena_events = EventLog()
    log.info("[API] Arena started with seed %d", req.seed)
    return {"seed": req.seed, "creatures": len(arena.creatures), "drones": len(arena.drones)}

@app.post("/arena/step")
async def step_arena():
    """Play one arena turn."""
    if not arena:
        raise HTTPException(400, "Arena not started")
    if arena.done:
        raise HTTPException(400, "Arena match is over")
    evts = arena.play_turn(arena_engines)
    arena_events.append_many(evts)
    return {
        "turn": arena.turn,
        "done": arena.done,
        "scores": list(arena.scores),
        "events": [{"kind": e.kind, "turn": e.turn, "data": e.data} for e in evts],
    }

@app.get("/arena/state")
async def get_arena_state():
    """Get current arena snapshot."""
    if not arena:
        raise HTTPException(400, "Arena not started")
    return arena.to_dict()

@app.get("/arena/events")
async def get_arena_events(since: int = 0, limit: int = 500):
    """Get arena events since offset."""
    if not arena:
        raise HTTPException(400, "Arena not started")
    evts, next_offset = arena_events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "turn": e.turn, "data": e.data} for e in evts]
    )
