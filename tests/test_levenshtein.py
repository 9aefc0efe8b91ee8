from itertools import product

from personal_crm.services.levenshtein import distance

WORDS = ["", "a", "john", "jhon", "jon", "smith", "smyth", "kitten", "sitting"]


def test_known_distances() -> None:
    assert distance("kitten", "sitting") == 3
    assert distance("john", "jhon") == 2
    assert distance("smith", "smyth") == 1
    assert distance("flaw", "lawn") == 2


def test_identity_and_empty_string() -> None:
    for word in WORDS:
        assert distance(word, word) == 0
        assert distance(word, "") == len(word)
        assert distance("", word) == len(word)


def test_symmetry_and_triangle_inequality() -> None:
    for a, b in product(WORDS, repeat=2):
        assert distance(a, b) == distance(b, a)
    for a, b, c in product(WORDS, repeat=3):
        assert distance(a, c) <= distance(a, b) + distance(b, c)
