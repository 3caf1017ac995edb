import pytest

from src.custom_data_structures.Trie.Trie import PrefixTrie, TrieNode, normalize

WORDS = ["food", "foot", "pizza", "best pizza", "burger", "a"]


@pytest.fixture
def trie():
    t = PrefixTrie()
    for word in WORDS:
        t.insert(word)
    return t


def count_nodes(node):
    return 1 + sum(count_nodes(child) for child in node.children.values())


def test_new_node_is_empty():
    node = TrieNode()
    assert node.children == {}
    assert node.is_terminal is False


def test_normalize_lowercases():
    assert normalize("Best PIZZA") == "best pizza"


@pytest.mark.parametrize("word", WORDS)
def test_inserted_words_are_found(trie, word):
    assert trie.search(word) is True


@pytest.mark.parametrize("word", ["fo", "foo", "pizz", "burgers", "b", "xyz"])
def test_missing_words_are_not_found(trie, word):
    assert trie.search(word) is False


def test_empty_trie():
    t = PrefixTrie()
    assert t.search("food") is False
    assert t.starts_with("food") is False
    assert t.search("") is False
    # Walking zero edges always succeeds
    assert t.starts_with("") is True


def test_empty_string_insert():
    t = PrefixTrie()
    t.insert("")
    assert t.search("") is True
    assert t.root.is_terminal is True
    assert t.root.children == {}


def test_root_not_terminal_after_word_inserts(trie):
    assert trie.root.is_terminal is False
    assert trie.search("") is False


@pytest.mark.parametrize("query", ["food", "Food", "FOOD", "fOoD"])
def test_case_insensitive_search(query):
    t = PrefixTrie()
    t.insert("Food")
    assert t.search(query) is True


def test_case_insensitive_prefix():
    t = PrefixTrie()
    t.insert("pizza")
    assert t.starts_with("PIZ") is True


def test_edges_are_stored_lowercase():
    t = PrefixTrie()
    t.insert("Food")
    assert list(t.root.children) == ["f"]


def test_prefix_containment():
    t = PrefixTrie()
    t.insert("food")
    assert t.starts_with("foo") is True
    assert t.starts_with("food") is True
    assert t.starts_with("foodx") is False
    assert t.starts_with("pizza") is False


def test_insert_is_idempotent():
    once = PrefixTrie()
    once.insert("food")
    twice = PrefixTrie()
    twice.insert("food")
    twice.insert("food")

    assert count_nodes(once.root) == count_nodes(twice.root) == 5
    for query in ["", "f", "foo", "food", "foods"]:
        assert once.search(query) == twice.search(query)
        assert once.starts_with(query) == twice.starts_with(query)


def test_shared_prefix_branching():
    t = PrefixTrie()
    t.insert("food")
    t.insert("foot")

    assert t.starts_with("foo") is True
    assert t.search("foo") is False
    assert t.search("food") is True
    assert t.search("foot") is True

    # "foo" path is shared, divergence happens after it
    node = t.root
    for char in "foo":
        assert len(node.children) == 1
        node = node.children[char]
    assert set(node.children) == {"d", "t"}
    assert count_nodes(t.root) == 6


def test_spaces_are_literal_characters():
    t = PrefixTrie()
    t.insert("pizza")
    t.insert("best pizza")

    assert t.search("pizza") is True
    assert t.search("Pizza") is True
    assert t.starts_with("pizz") is True
    assert t.search("pizz") is False
    assert t.search("best pizza") is True
    assert t.search("bestpizza") is False
    assert t.starts_with("best ") is True


def test_prefix_word_and_longer_word():
    t = PrefixTrie()
    t.insert("foo")
    t.insert("food")
    assert t.search("foo") is True
    assert t.search("food") is True
    assert t.search("fo") is False


@pytest.mark.parametrize("query", ["zzz", "foodie", "fox", "best pizzas"])
def test_lookups_do_not_create_nodes(trie, query):
    before = count_nodes(trie.root)
    trie.search(query)
    trie.starts_with(query)
    assert count_nodes(trie.root) == before


def test_terminal_only_where_words_end():
    t = PrefixTrie()
    t.insert("ab")
    a = t.root.children["a"]
    b = a.children["b"]
    assert a.is_terminal is False
    assert b.is_terminal is True
    assert b.children == {}
