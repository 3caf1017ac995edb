"""This module provides the entry point for running the server."""

import argparse
import asyncio
import os
import signal
import socket
import subprocess
import sys
from pathlib import Path
from typing import Any

from src.server.logger import LOG_FILE_PATH, setup_logging
from src.server.server import Server

CONFIG_PATH = Path(__file__).parent / "config.txt"


def get_local_ip() -> Any:
    """Return the local IP address of the server.

    Returns:
        str: The local IP address as a string.

    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.connect(("8.8.8.8", 80))
        return s.getsockname()[0]


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser shared by the entry points."""
    parser = argparse.ArgumentParser(description="Run the prefix index server.")
    parser.add_argument(
        "--ip",
        choices=["local", "public"],
        default="public",
        help="Connect to the server locally or over the internet",
    )
    parser.add_argument(
        "--mode",
        default="normal",
        choices=["normal", "daemon"],
        help="Run mode: 'normal' or 'daemon' (default: normal)",
    )
    parser.add_argument(
        "--config_path",
        type=str,
        default=str(CONFIG_PATH),
        help="Optional path to the config file.",
        required=False,
    )
    parser.add_argument(
        "--log_path",
        type=str,
        default=str(LOG_FILE_PATH),
        help="Optional path to the log file.",
        required=False,
    )
    return parser


def resolve_ip(choice: str) -> str:
    """Map the --ip choice to the address the server binds to."""
    if choice == "public":
        return "0.0.0.0"
    return get_local_ip()


async def serve(ip: str, config_path: Path) -> None:
    """Load the corpus and serve until SIGINT or SIGTERM arrives."""
    server_instance = Server(ip, config_path)

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(signum, server_instance.request_shutdown)

    await server_instance.start()


def main() -> None:
    """Run the server."""
    args = build_parser().parse_args()
    config_path = Path(args.config_path).resolve()
    log_path = Path(args.log_path).resolve()

    if args.mode == "daemon":
        # Run the server as a daemon using the current Python executable
        subprocess.run(
            [
                sys.executable,
                "-m",
                "src.server.daemon",
                "--ip",
                str(args.ip),
                "--config_path",
                str(config_path),
                "--log_path",
                str(log_path),
            ],
            check=False,
            env=os.environ.copy(),
            cwd=str(Path(__file__).parent),
        )
        return

    setup_logging(log_path)
    asyncio.run(serve(resolve_ip(args.ip), config_path))


if __name__ == "__main__":
    main()
