import asyncio
import logging
import socket
import sys
import time
import weakref
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .client_handler import clean_message, handle_request
from .config import load_config_file
from .corpus import load_corpus
from .logger import log, stop_logging

MAX_CHUNK_SIZE = 1024  # Maximum request line length
OVERSIZE_MESSAGE = "ERROR: Message exceeds maximum allowed size."


class Server:
    """Asyncio TCP server answering word and prefix queries from a trie.

    Every request is answered on the event loop thread, so inserts and
    lookups never run concurrently.
    """

    def __init__(self, ip: str, config_file_path: Path):
        self.ip = ip
        self.configuration_settings = load_config_file(config_file_path)
        self.trie = load_corpus(self.configuration_settings.corpus_path)
        self.is_running = True
        self.server_instance: Union[asyncio.Server, None] = None
        self.log_details: bool = False
        self._active_connections: weakref.WeakSet[asyncio.StreamWriter] = (
            weakref.WeakSet()
        )
        self._shutdown_requested = asyncio.Event()

    async def _discard_line(self, reader: asyncio.StreamReader) -> None:
        """Skip the rest of an oversize line, up to and including its
        newline or the end of the stream.
        """
        while True:
            try:
                await reader.readuntil(b"\n")
                return
            except asyncio.LimitOverrunError as e:
                await reader.readexactly(e.consumed)
            except asyncio.IncompleteReadError:
                return

    async def _read_request(
        self,
        reader: asyncio.StreamReader,
    ) -> Optional[bytes]:
        """Read one newline-terminated request from the client.

        Returns:
            bytes: The request line. Empty when the client disconnected;
            a last line without a newline is returned as is.
            None: If the line was longer than MAX_CHUNK_SIZE and has
            been skipped.

        """
        try:
            return await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            return e.partial
        except asyncio.LimitOverrunError:
            await self._discard_line(reader)
            return None

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle an individual client connection.

        Requests are newline-terminated lines; each one is answered with a
        single newline-terminated response line, in order.

        Args:
            reader (asyncio.StreamReader): The reader for the client
            connection.
            writer (asyncio.StreamWriter): The writer for the client
            connection.

        """
        peername = writer.get_extra_info("peername")
        client_address_str = (
            f"{peername[0]}:{peername[1]}" if peername else "UNKNOWN"
        )
        client_ip = peername[0] if peername else "N/A"
        print(f"[SERVER] Accepted connection from {client_address_str}")

        self._active_connections.add(writer)

        try:
            while self.is_running:
                start_time_total = time.perf_counter()

                data = await self._read_request(reader)
                if data == b"":
                    print(
                        f"[SERVER] Client {client_address_str} disconnected.",
                    )
                    break  # Client disconnected

                query_string = ""
                if data is None:
                    response_message_str = OVERSIZE_MESSAGE
                else:
                    try:
                        query_string = clean_message(data.decode("utf-8"))
                        response_message_str = handle_request(
                            self.trie,
                            query_string,
                            self.configuration_settings.allow_insert,
                        )
                    except Exception as e:
                        logging.exception(
                            f"Request from {client_address_str} failed",
                        )
                        response_message_str = f"ERROR: Request failed: {e}"

                writer.write((response_message_str + "\n").encode("utf-8"))
                await writer.drain()

                elapsed_ms = (time.perf_counter() - start_time_total) * 1000
                time_stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

                if self.log_details:
                    log(time_stamp, client_ip, query_string, elapsed_ms)

                print(
                    "[SERVER] Handled "
                    f"{client_address_str}: '{query_string}' -> "
                    f"'{response_message_str}' in "
                    f"{elapsed_ms:.2f} ms",
                )

        except ConnectionResetError:
            print(
                f"[SERVER] Client {client_address_str} forcefully "
                "disconnected.",
            )
        except Exception as e:
            print(
                f"[SERVER ERROR] Error handling client "
                f"{client_address_str}: {e}",
                file=sys.stderr,
            )
        finally:
            self._active_connections.discard(writer)

            try:
                writer.close()
                await writer.wait_closed()
            except Exception as e:
                print(
                    f"[SERVER] Error closing connection to "
                    f"{client_address_str}: {e}",
                )

            print(f"[SERVER] Connection with {client_address_str} closed.")

    def request_shutdown(self) -> None:
        """Ask a running start() call to stop serving and return."""
        self._shutdown_requested.set()

    async def start(self, log_details: Union[bool, None] = None) -> None:
        """Start the TCP server and serve until shutdown is requested
        or the task is cancelled.

        Args:
            log_details (bool | None): Whether to log every query.
            Defaults to the `log_details` configuration setting.

        """
        if log_details is None:
            log_details = self.configuration_settings.log_details
        self.log_details = log_details

        try:
            raw_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            raw_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

            server_address = (self.ip, self.configuration_settings.port)
            raw_socket.bind(server_address)
            print(f"[SERVER] Bound raw socket to {server_address}")

            self.server_instance = await asyncio.start_server(
                self._handle_client,
                sock=raw_socket,
                limit=MAX_CHUNK_SIZE,
            )

            addrs = ", ".join(
                str(sock.getsockname())
                for sock in self.server_instance.sockets
            )
            print(f"[SERVER] Server is serving on {addrs}.")
            print("[SERVER] Press Ctrl+C to shut down.")

            await self._shutdown_requested.wait()

        except asyncio.CancelledError:
            print("[SERVER] Asyncio server task cancelled.")
        except KeyboardInterrupt:
            print("\n[SERVER] Shutting down due to KeyboardInterrupt...")
        except Exception as e:
            print(
                "[SERVER ERROR] An unhandled error occurred in main server "
                f"loop: {e}",
                file=sys.stderr,
            )
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Gracefully stop the server and clean up resources.

        Active connections are closed before the listening socket so
        that waiting for the server to close cannot block on them.
        """
        print("[SERVER] Initiating graceful shutdown...")

        self.is_running = False

        for writer in list(self._active_connections):
            try:
                writer.close()
                await writer.wait_closed()
            except Exception as e:
                print(
                    f"[SERVER] Error closing connection during shutdown: {e}",
                )
        self._active_connections.clear()

        if self.server_instance:
            try:
                self.server_instance.close()
                await self.server_instance.wait_closed()
                print("[SERVER] Asyncio server socket closed.")

            except Exception as e:
                print(f"[SERVER] Error closing asyncio server: {e}")

            finally:
                self.server_instance = None

        try:
            stop_logging()
        except Exception as e:
            print(f"[SERVER] Error stopping logging: {e}")

        print("[SERVER] Server shutdown complete.")
