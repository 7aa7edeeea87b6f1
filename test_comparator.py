"""
Tests for text normalization and n-gram similarity scoring.
"""

import pytest

from antiplag.plagiarism.comparator import (
    SimilarityConfig,
    TextComparator,
    create_ngrams,
    normalize_text,
)


@pytest.fixture
def comparator():
    return TextComparator()


def test_normalize_keeps_lowercased_letters_and_digits():
    assert normalize_text("Hello, World! 123") == "helloworld123"
    assert normalize_text(b"The Quick\nBrown\tFox.") == "thequickbrownfox"


def test_normalize_empty_and_symbol_only_input():
    assert normalize_text("") == ""
    assert normalize_text(b"") == ""
    assert normalize_text("  ...,;!?  \n") == ""


def test_normalize_non_ascii_letters():
    assert normalize_text("Привет, Мир!") == "приветмир"
    assert normalize_text("Ärger über Öl") == "ärgerüberöl"


def test_normalize_invalid_utf8_is_dropped():
    assert normalize_text(b"ab\xff\xfecd") == "abcd"


def test_create_ngrams():
    assert create_ngrams("abcd") == {"abc", "bcd"}
    assert create_ngrams("aaaa") == {"aaa"}
    assert create_ngrams("ab") == set()
    assert create_ngrams("abcd", 2) == {"ab", "bc", "cd"}


@pytest.mark.parametrize("text", [
    "the quick brown fox",
    "a",
    "ab",
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
    b"bytes content 42",
])
def test_identical_texts_score_100(comparator, text):
    assert comparator.compare(text, text) == 100.0


def test_two_empty_texts_are_identical(comparator):
    assert comparator.compare("", "") == 100.0
    assert comparator.compare("!!!", "  ,, ") == 100.0


def test_one_empty_text_scores_0(comparator):
    assert comparator.compare("some text", "") == 0.0
    assert comparator.compare("", "some text") == 0.0
    assert comparator.compare("ab", "...") == 0.0


def test_disjoint_ngrams_score_0(comparator):
    assert comparator.compare("abc", "xyz") == 0.0
    assert comparator.compare("aaaa", "bbbb") == 0.0


def test_short_texts_without_ngrams(comparator):
    assert comparator.compare("ab", "abcd") == 0.0
    assert comparator.compare("ab", "ba") == 0.0


def test_case_and_punctuation_are_ignored(comparator):
    assert comparator.compare("The Quick Brown Fox!", "the-quick-brown-fox") == 100.0


def test_partial_overlap_is_jaccard(comparator):
    # {abc, bcd} vs {bcd, cde}: 1 shared of 3 distinct
    assert comparator.compare("abcd", "bcde") == pytest.approx(100.0 / 3)


@pytest.mark.parametrize("a,b", [
    ("the quick brown fox", "the quick brown dog"),
    ("completely unique content zzz", "totally different text yyy"),
    ("abcd", "bcde"),
    ("ab", ""),
])
def test_similarity_is_symmetric(comparator, a, b):
    assert comparator.compare(a, b) == comparator.compare(b, a)


def test_score_is_bounded(comparator):
    score = comparator.compare("the quick brown fox jumps", "a quick brown fox sleeps")
    assert 0.0 < score < 100.0


def test_ngram_size_is_configurable():
    bigrams = TextComparator(SimilarityConfig(ngram_size=2))
    # {ab, bc} vs {bc, cd}
    assert bigrams.compare("abc", "bcd") == pytest.approx(100.0 / 3)
    assert TextComparator().compare("abc", "bcd") == 0.0


def test_similarity_config_validation():
    with pytest.raises(ValueError):
        SimilarityConfig(ngram_size=0)
    with pytest.raises(ValueError):
        SimilarityConfig(plagiarism_threshold=100.5)


def test_normalize_drops_marks_produced_by_lowercasing():
    # "İ".lower() is "i" followed by a combining dot above
    assert normalize_text("İstanbul") == "istanbul"
    assert all(ch.isalpha() or ch.isdecimal() for ch in normalize_text("İIıi ǅ Σ"))
