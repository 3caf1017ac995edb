"""Production-ready daemon for running the server as a Linux service."""

import argparse
import asyncio
import signal
import socket
from pathlib import Path
from typing import Any

import daemon
from daemon.pidfile import PIDLockFile

from .logger import LOG_FILE_PATH, setup_logging, stop_logging
from .server import Server

# Path to the PID file for the daemon process
PID_FILE = "/tmp/prefix_index_daemon.pid"
# Paths to log files for stdout and stderr
STDOUT_LOG = "/tmp/prefix_index_stdout.log"
STDERR_LOG = "/tmp/prefix_index_stderr.log"
# Working directory for the daemon process
WORKDIR = Path("/tmp/")
# File creation mask for the daemon process
UMASK = 0o027
# The configuration settings file of the server
CONFIG_PATH = Path(__file__).parent.parent.parent / "config.txt"


def get_local_ip() -> Any:
    """Get the local IP address of the server.

    Returns:
        str: The local IP address of the server as a string.

    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.connect(("8.8.8.8", 80))
        return s.getsockname()[0]


def parse_args(argv: Any = None) -> argparse.Namespace:
    """Parse the daemon's command line.

    Paths are made absolute here because the daemon changes its working
    directory to WORKDIR once it detaches.
    """
    parser = argparse.ArgumentParser(description="Run the server daemon.")
    parser.add_argument(
        "--ip",
        choices=["local", "public"],
        default="public",
        help="Connect to the server locally or over the internet",
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
    args = parser.parse_args(argv)
    args.config_path = Path(args.config_path).resolve()
    args.log_path = Path(args.log_path).resolve()
    return args


def install_signal_handlers(server_instance: Server) -> None:
    """Request a graceful shutdown on SIGTERM or SIGINT."""
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(signum, server_instance.request_shutdown)


async def main(args: argparse.Namespace) -> None:
    """Run the server until SIGTERM or SIGINT is received.

    Query logging follows the `log_details` configuration setting.
    """
    ip = get_local_ip() if args.ip == "local" else "0.0.0.0"

    server_instance = Server(ip, args.config_path)
    install_signal_handlers(server_instance)

    await server_instance.start()


def run(args: argparse.Namespace) -> None:
    """Detach from the terminal and serve inside the daemon context."""
    with (
        open(STDOUT_LOG, "a") as stdout,
        open(STDERR_LOG, "a") as stderr,
        daemon.DaemonContext(
            working_directory=str(WORKDIR),
            umask=UMASK,
            pidfile=PIDLockFile(PID_FILE),
            stdout=stdout,
            stderr=stderr,
            detach_process=True,
        ),
    ):
        print("[DAEMON] Detached, starting server.")
        setup_logging(args.log_path)
        try:
            asyncio.run(main(args))
        finally:
            stop_logging()


if __name__ == "__main__":
    run(parse_args())
