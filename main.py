"""Entry point: play on stdin/stdout, run a local arena match, or serve the API."""

import argparse
import logging
import sys

import uvicorn

from arena.sandbox import Arena
from runtime.protocol import TokenReader, read_catalog
from runtime.runner import TurnRunner
from scanner.engine import DecisionEngine

log = logging.getLogger("main")


def configure_logging(level: str = "INFO") -> None:
    """Send diagnostics to stderr; stdout belongs to the referee."""
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def play() -> int:
    reader = TokenReader(sys.stdin)
    try:
        catalog = read_catalog(reader)
    except EOFError:
        log.info("[Main] Feed closed before the creature catalog")
        return 0
    log.info("[Main] Catalog received: %d creatures", len(catalog))
    runner = TurnRunner(DecisionEngine(catalog), reader, sys.stdout)
    return runner.run()


def run_arena(seed: int, turns: int) -> tuple[int, int]:
    arena = Arena(seed, max_turns=turns)
    engines = [DecisionEngine(arena.catalog()), DecisionEngine(arena.catalog())]
    scores = arena.play(engines)
    log.info("[Main] Arena seed %d final score %d-%d", seed, *scores)
    return scores


def main():
    parser = argparse.ArgumentParser(description="Seabed scanner bot.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("play", help="Play against the referee on stdin/stdout (default)")

    arena_p = sub.add_parser("arena", help="Run a local match, bot against itself")
    arena_p.add_argument("--seed", type=int, default=42, help="Arena seed (default: 42)")
    arena_p.add_argument("--turns", type=int, default=200, help="Turn limit (default: 200)")

    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve_p.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if args.command == "arena":
        run_arena(args.seed, args.turns)
    elif args.command == "serve":
        log.info("[Main] Starting API at http://%s:%d", args.host, args.port)
        uvicorn.run("api.app:app", host=args.host, port=args.port, log_level="info")
    else:
        play()


if __name__ == "__main__":
    main()
