"""Load the corpus file the server answers queries from."""

import logging
from pathlib import Path

from src.custom_data_structures.Trie.Trie import PrefixTrie


def load_corpus(corpus_path: Path) -> PrefixTrie:
    """Insert every entry of a corpus file into a new trie.

    Each line is one entry. The line terminator is removed but other
    whitespace is kept, so "best pizza" is stored as typed. Blank lines
    are skipped.

    Args:
        corpus_path (Path): The path of the UTF-8 corpus file.

    Raises:
        FileNotFoundError: If the file specified by `corpus_path`
        does not exist.

    Returns:
        PrefixTrie: The trie holding every entry of the corpus.

    """
    trie = PrefixTrie()
    count = 0
    try:
        with corpus_path.open("r", encoding="utf-8") as file:
            for line in file:
                entry = line.rstrip("\r\n")
                if not entry:
                    continue
                trie.insert(entry)
                count += 1

    except FileNotFoundError as e:
        raise FileNotFoundError(f"File not found: {corpus_path}") from e

    logging.info(f"Loaded {count} entries from '{corpus_path}'")
    return trie
