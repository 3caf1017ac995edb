"""Configuration parser for the prefix index server."""

from pathlib import Path
from typing import cast


class ConfigBoolParsingError(Exception):
    """Raised when the parsing of bool strings in
    the config file was not successful.
    """


class ConfigNotFoundError(Exception):
    """Raised when any of the required configuration settings
    is not provided.
    """


class ConfigValueError(Exception):
    """Raised when a configuration value is parsed but out of range."""


class ServerConfig:
    """A class to save server configuration settings."""

    def __init__(
        self,
        corpus_path: Path,
        port: int,
        allow_insert: bool,
        log_details: bool = False,
    ) -> None:
        """Initialize the server configuration.

        Args:
            corpus_path (Path): The path to the corpus file loaded into
            the trie at start-up.
            port (int): The port number the server will listen to.
            allow_insert (bool): Whether clients may add new entries.
            log_details (bool): Whether every query is written to the log.

        """
        self.corpus_path = corpus_path
        self.port = port
        self.allow_insert = allow_insert
        self.log_details = log_details

    def __repr__(self) -> str:
        """Return a string representation of the configuration object.

        Returns:
            str: A formatted string representing the configuration settings.

        """
        return f"""
                Server configuration settings:
                Corpus path: {self.corpus_path}
                Inserts allowed: {"YES" if self.allow_insert else "NO"}
                Query logging: {"YES" if self.log_details else "NO"}
                Used port number: {self.port}
            """


def parse_bool(key: str, val: str) -> bool:
    """Parse given values into boolean ones (True or False).

    Args:
        key (str): The key to parse the boolean for.
        val (str): The value to be parsed to boolean.

    Raises:
        ConfigBoolParsingError: If an error occured
        while parsing the value to boolean.

    Returns:
        bool: True or False depending on the output of the parser.

    """
    if val.strip().lower() in {"true", "1", "yes"}:
        return True
    if val.strip().lower() in {"false", "0", "no"}:
        return False

    raise ConfigBoolParsingError(
        f"Invalid boolean value for key '{key}' in the configuration file. "
        "Expected 'true', 'false', '1', '0', 'yes', or 'no' "
        "(case-insensitive).",
    )


def parse_port(val: str) -> int:
    """Parse a TCP port number.

    Raises:
        ValueError: If the value is not an integer.
        ConfigValueError: If the port is outside 0-65535.

    """
    port = int(val)
    if not 0 <= port <= 65535:
        raise ConfigValueError(
            f"Invalid port number {port}. Expected a value between 0 "
            "and 65535.",
        )
    return port


def load_config_file(config_file_path: Path) -> ServerConfig:
    """Load and parse the configuration file.

    A relative corpus path is resolved against the directory that
    holds the configuration file.

    Args:
        config_file_path (Path): Path to the config file.

    Raises:
        ConfigNotFoundError: If required settings are missing.
        FileNotFoundError: If the config file or the corpus file
        does not exist.

    Returns:
        ServerConfig: Parsed config object.

    """
    if not config_file_path.exists():
        raise FileNotFoundError(
            f"Missing required configuration file: '{config_file_path}'. "
            "Please ensure the file exists and the path is correct.",
        )

    corpus_path = port = allow_insert = None
    log_details = False

    with config_file_path.open("r", encoding="utf-8") as file:
        for line in file:
            line = line.strip()

            # Skip blank lines and comments
            if not line or line.startswith("#"):
                continue

            key, sep, value = line.partition("=")
            if sep != "=":
                continue

            key = key.strip().lower()
            value = value.strip()

            if key == "corpuspath":
                corpus_path = Path(value)
            elif key == "port":
                port = parse_port(value)
            elif key == "allow_insert":
                allow_insert = parse_bool("allow_insert", value)
            elif key == "log_details":
                log_details = parse_bool("log_details", value)

    required = {
        "corpus_path": corpus_path,
        "port": port,
        "allow_insert": allow_insert,
    }

    for key, val in required.items():
        if val is None:
            raise ConfigNotFoundError(
                f"Missing required configuration: '{key}'. "
                "Please ensure the config file includes a valid line for "
                f"'{'corpuspath' if key == 'corpus_path' else key}'.",
            )

    corpus_path = cast("Path", corpus_path)
    if not corpus_path.is_absolute():
        corpus_path = config_file_path.parent / corpus_path

    if not corpus_path.exists():
        raise FileNotFoundError(
            f"The required file {corpus_path} doesn't exist.",
        )

    return ServerConfig(
        corpus_path,
        cast("int", port),
        cast("bool", allow_insert),
        log_details,
    )
