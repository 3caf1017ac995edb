"""Handles server connection and communication."""

import asyncio
import time
from typing import Optional


class Client:
    """Asynchronous client for the prefix index TCP server."""

    def __init__(self, ip: str, port: int):
        """Initialize a new asynchronous client instance.

        Args:
            ip (str): The IP address of the server to connect to.
            port (int): The port number of the server to connect to.

        """
        self.ip = ip
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def connect(self) -> None:
        """Establish the asynchronous connection to the server.

        This method must be called and awaited before sending any messages.

        Raises:
            ConnectionRefusedError: If the server actively
            refuses the connection.
            Exception: For other connection-related errors.

        """
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.ip,
                self.port,
            )
            peername = self.writer.get_extra_info("peername")
            print(f"Connected to server at {peername[0]}:{peername[1]}")

        except ConnectionRefusedError:
            print(
                f"Connection refused by the server at {self.ip}:{self.port}.",
            )
            raise

        except Exception as e:
            print(f"Error connecting to server at {self.ip}:{self.port}: {e}")
            raise

    async def send_message(self, message: str) -> Optional[str]:
        """Send one request line and read the server's response line.

        Args:
            message (str): The request, e.g. "SEARCH pizza".

        Returns:
            str: The response line without its trailing newline.
            None: If the client is not connected or the server
            closed the connection without answering.

        """
        if self.writer is None or self.reader is None:
            print("Client not connected. Call .connect() first.")
            return None

        try:
            start = time.perf_counter()

            self.writer.write((message + "\n").encode("utf-8"))
            await self.writer.drain()

            data = await self.reader.readline()
            if not data:
                print(
                    "Server closed the connection unexpectedly or sent "
                    "no data.",
                )
                return None

            response = data.decode("utf-8").rstrip("\n")

            elapsed_time = (time.perf_counter() - start) * 1000
            print(f"Time: {elapsed_time:.2f} ms")
            print("Response from server:", response)

            return response

        except (ConnectionResetError, BrokenPipeError) as e:
            print("Server closed the connection unexpectedly or sent no data.")
            raise e
        except OSError as e:
            print(f"OS Error during send: {e}")
            raise e

    async def search(self, word: str) -> bool:
        """Return True if `word` is stored on the server."""
        return await self.send_message(f"SEARCH {word}") == "WORD EXISTS"

    async def starts_with(self, prefix: str) -> bool:
        """Return True if any stored word starts with `prefix`."""
        return await self.send_message(f"PREFIX {prefix}") == "PREFIX EXISTS"

    async def insert(self, word: str) -> bool:
        """Ask the server to store `word`.

        Returns:
            bool: True if the server accepted the insert.

        """
        return await self.send_message(f"INSERT {word}") == "WORD INSERTED"

    async def close(self) -> None:
        """Close the asynchronous connection to the server."""
        print("Closing connection...")
        if self.writer and not self.writer.is_closing():
            try:
                self.writer.close()
                await self.writer.wait_closed()
                print("Connection closed.")
            except (ConnectionResetError, BrokenPipeError, OSError) as e:
                print(f"Error during close cleanup: {e}")
                raise
            finally:
                self.reader = None
                self.writer = None
        elif self.writer and self.writer.is_closing():
            try:
                await self.writer.wait_closed()
                print("Connection already closing, waited for it.")
            except (ConnectionResetError, BrokenPipeError, OSError) as e:
                print(f"Error during close cleanup (already closing): {e}")
                raise
        else:
            print("No active connection to close.")
        self.reader = None
        self.writer = None
