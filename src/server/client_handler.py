"""Handle a client's request against the prefix trie."""

import logging
from typing import NamedTuple

from src.custom_data_structures.Trie.Trie import PrefixTrie

SEARCH = "SEARCH"
PREFIX = "PREFIX"
INSERT = "INSERT"
COMMANDS = (SEARCH, PREFIX, INSERT)

WORD_EXISTS = "WORD EXISTS"
WORD_NOT_FOUND = "WORD NOT FOUND"
PREFIX_EXISTS = "PREFIX EXISTS"
PREFIX_NOT_FOUND = "PREFIX NOT FOUND"
WORD_INSERTED = "WORD INSERTED"
INSERTS_DISABLED = "ERROR: Inserts are disabled by configuration."


class InvalidRequestError(Exception):
    """Raised when a request line cannot be understood."""


class Request(NamedTuple):
    """A parsed request line."""

    command: str
    argument: str


def clean_message(message: str) -> str:
    """Remove the line terminator and NUL characters from a raw message.

    Leading and inner spaces are part of the argument and are kept.
    """
    return message.replace("\x00", "").rstrip("\r\n")


def parse_request(message: str) -> Request:
    """Split a request line into its command and argument.

    The command is case-insensitive. Everything after the first space is
    the argument, which may be empty.

    Args:
        message (str): The cleaned request line.

    Raises:
        InvalidRequestError: If the line is empty or the command
        is unknown.

    Returns:
        Request: The parsed request.

    """
    command, _, argument = message.partition(" ")
    command = command.upper()

    if not command:
        raise InvalidRequestError("Empty request.")
    if command not in COMMANDS:
        raise InvalidRequestError(
            f"Unknown command '{command}'. Expected one of "
            f"{', '.join(COMMANDS)}.",
        )
    return Request(command, argument)


def handle_request(trie: PrefixTrie, message: str, allow_insert: bool) -> str:
    """Answer one request line.

    Args:
        trie (PrefixTrie): The trie the queries run against.
        message (str): The raw request received from the client.
        allow_insert (bool): Whether INSERT requests may modify the trie.

    Returns:
        str: The response line, without a trailing newline. Malformed
        requests produce an "ERROR: ..." response instead of raising.

    """
    try:
        request = parse_request(clean_message(message))
    except InvalidRequestError as e:
        return f"ERROR: {e}"

    if request.command == SEARCH:
        return WORD_EXISTS if trie.search(request.argument) else WORD_NOT_FOUND

    if request.command == PREFIX:
        if trie.starts_with(request.argument):
            return PREFIX_EXISTS
        return PREFIX_NOT_FOUND

    if not allow_insert:
        return INSERTS_DISABLED

    trie.insert(request.argument)
    logging.info(f"Inserted entry '{request.argument}'")
    return WORD_INSERTED
