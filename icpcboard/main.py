"""
Main entry point for the ICPC scoreboard.

`icpcboard run` replays a command stream against a fresh scoreboard and
prints the reports to stdout; `icpcboard serve` starts the JSON API.
"""

import argparse
import os
import sys
from datetime import datetime

from .api.server import run_api
from .cli.commands import CommandHandler
from .engine.scoreboard import Scoreboard
from .utils.config_manager import get_config
from .utils.logger_config import setup_logging, get_logger


def setup_logging_from_config(config, log_file=None):
    """Setup logging based on configuration"""
    log_config = config.get_section("logging")
    setup_logging(
        level=log_config.get("level", "INFO"),
        log_file=log_file,
        enable_colors=log_config.get("enable_colors", True)
    )


def default_log_file(config) -> str:
    """Timestamped log file inside the configured log directory"""
    log_dir = config.get("logging.directory", "logs/scoreboard")
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(log_dir, f"server_{config.get('server.port', 5000)}_{timestamp}.log")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='icpcboard - ICPC contest scoreboard')
    parser.add_argument('--config', default='config/scoreboard_config.json',
                        help='Path to configuration file')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Override log level')
    parser.add_argument('--log-file', help='Also write logs to this file')

    subparsers = parser.add_subparsers(dest='command')

    run_parser = subparsers.add_parser('run', help='Process a command stream')
    run_parser.add_argument('--input', help='Command file (default: stdin)')

    serve_parser = subparsers.add_parser('serve', help='Serve the JSON API')
    serve_parser.add_argument('--host', help='Host to bind the API server')
    serve_parser.add_argument('--port', type=int, help='Port to bind the API server')
    serve_parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    return parser


def run_commands(config, input_path=None, out=None) -> int:
    """Replay commands from a file or stdin; returns the number executed"""
    scoreboard = Scoreboard(
        penalty_per_rejection=config.get("contest.penalty_per_rejection", 20),
        max_problems=config.get("contest.max_problems", 26),
    )
    handler = CommandHandler(scoreboard, out=out or sys.stdout)
    if input_path:
        with open(input_path, 'r', encoding='utf-8') as f:
            return handler.run(f)
    return handler.run(sys.stdin)


def main(argv=None):
    """Main entry point for the icpcboard CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or 'run'

    config = get_config(args.config)
    if args.log_level:
        config.set("logging.level", args.log_level)
    if command == 'serve':
        if args.host:
            config.set("server.host", args.host)
        if args.port:
            config.set("server.port", args.port)
        if args.debug:
            config.set("logging.level", "DEBUG")

    log_file = args.log_file
    if command == 'serve' and log_file is None:
        log_file = default_log_file(config)
    setup_logging_from_config(config, log_file)
    logger = get_logger("main")
    logger.debug(f"Configuration loaded from: {config.config_path}")

    if command == 'run':
        try:
            run_commands(config, getattr(args, 'input', None))
        except OSError as e:
            logger.error(f"Cannot read commands: {e}")
            sys.exit(1)
        return

    host = config.get("server.host", "0.0.0.0")
    port = config.get("server.port", 5000)
    logger.info(f"Starting scoreboard API server on {host}:{port}")
    try:
        run_api(host=host, port=port, debug=args.debug, config=config)
    except KeyboardInterrupt:
        logger.info("Shutting down scoreboard API server...")
        sys.exit(0)


if __name__ == "__main__":
    main()
