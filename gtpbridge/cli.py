"""
GTP Bridge CLI - Command-line interface.

Usage:
    gtpbridge serve [--host H] [--port P]     Run the HTTP server
    gtpbridge probe <config> <model>          Start a game, ask for one move, end
"""

import argparse
import atexit
import logging
import shlex
import sys

from . import __version__


def _timeout(value):
    seconds = float(value)
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"timeout must be non-negative: {value}")
    return seconds


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="GTP Bridge - HTTP control surface for a GTP engine",
        prog="gtpbridge",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--engine",
        help="Engine command prefix (default: $GTPBRIDGE_ENGINE or ./katago)",
    )
    parser.add_argument(
        "--timeout",
        type=_timeout,
        help="Seconds to wait for each engine response (default: no limit)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8080, help="Bind port")

    # Probe command
    probe_parser = subparsers.add_parser("probe", help="Check the engine answers genmove")
    probe_parser.add_argument("config", help="Path to engine config file")
    probe_parser.add_argument("model", help="Path to engine model file")
    probe_parser.add_argument("--boardsize", type=int, default=19, help="Board size")
    probe_parser.add_argument("--komi", type=float, default=7.5, help="Komi")
    probe_parser.add_argument("--color", default="b", help="Color to generate a move for")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "probe":
        cmd_probe(args)
    else:
        parser.print_help()
        sys.exit(1)


def _make_manager(args):
    from .api.app import ENGINE_COMMAND, RESPONSE_TIMEOUT
    from .session import SessionManager

    return SessionManager(
        engine_command=shlex.split(args.engine) if args.engine else ENGINE_COMMAND,
        response_timeout=args.timeout if args.timeout is not None else RESPONSE_TIMEOUT,
    )


def cmd_serve(args):
    """Run the HTTP server."""
    import uvicorn
    from .api import GameService, create_app

    manager = _make_manager(args)
    # Covers exits that skip the app lifespan
    atexit.register(manager.shutdown)

    app = create_app(GameService(session_manager=manager))
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def cmd_probe(args):
    """Start a game, generate one move, end the game."""
    from .engine.errors import GTPBridgeError

    manager = _make_manager(args)
    try:
        manager.start(args.boardsize, args.komi, args.config, args.model)
        print(f"Engine started: board {args.boardsize}, komi {args.komi:.1f}")
        move = manager.generate_move(args.color)
        print(f"Engine move for {args.color}: {move}")
    except GTPBridgeError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    finally:
        manager.end()


if __name__ == "__main__":
    main()
