"""This module represents the implementation of a case-insensitive prefix
trie used for fast word and prefix existence checks.
"""

from typing import Optional


def normalize(text: str) -> str:
    """Case-fold a string into the form used for edge keys.

    Args:
        text (str): The raw word or prefix.

    Returns:
        str: The lowercase form of `text`.

    """
    return text.lower()


class TrieNode:
    """Represent a node in the trie structure."""

    __slots__ = ("children", "is_terminal")

    def __init__(self) -> None:
        """Initialize an empty Trie node.

        Attributes:
            children (dict): A dictionary mapping characters to
            their corresponding child TrieNode instances.
            is_terminal (bool): Indicates whether this
            node marks the end of an inserted word.

        """
        self.children: dict[str, TrieNode] = {}
        self.is_terminal = False


class PrefixTrie:
    """Represents the prefix trie data structure.

    Every operation lowercases its input first, so "Food", "food" and
    "FOOD" are the same entry.
    """

    def __init__(self) -> None:
        """Initialize the root node of the Trie."""
        self.root = TrieNode()

    def insert(self, word: str) -> None:
        """Insert a new word into the trie.

        Args:
            word (str): The word to be inserted. May be empty, in which
            case the root itself is marked as terminal.

        """
        node = self.root
        for char in normalize(word):
            # If the character is not already a child, add a new TrieNode
            if char not in node.children:
                node.children[char] = TrieNode()
            node = node.children[char]
        node.is_terminal = True

    def search(self, word: str) -> bool:
        """Check for the existence of a given word in the trie.

        Args:
            word (str): The word to search for.

        Returns:
            bool: True if the exact `word` was inserted as a complete
            word, False otherwise.

        """
        node = self._walk(word)
        return node is not None and node.is_terminal

    def starts_with(self, prefix: str) -> bool:
        """Check whether any path of the trie spells `prefix`.

        The empty prefix always matches, even on an empty trie.

        Args:
            prefix (str): The prefix to look for.

        Returns:
            bool: True if the walk along `prefix` succeeds, whether or not
            a word ends exactly there.

        """
        return self._walk(prefix) is not None

    def _walk(self, text: str) -> Optional[TrieNode]:
        """Follow `text` from the root without creating any edge.

        Returns:
            TrieNode | None: The landing node, or None on a missing edge.

        """
        node = self.root
        for char in normalize(text):
            child = node.children.get(char)
            if child is None:
                return None
            node = child
        return node
