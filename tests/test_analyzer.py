import math

import pytest
from pydantic import ValidationError

from keyspace.analyzers.passphrase import DEFAULT_GUESSES_PER_SECOND, PassphraseAnalyzer
from keyspace.core.models import (
    BUILTIN_POOLS,
    LOWERCASE_LETTERS,
    NUMBERS,
    SPACE,
    UPPERCASE_LETTERS,
    CharacterPool,
)


def test_lowercase_scenario():
    result = PassphraseAnalyzer({LOWERCASE_LETTERS}).analyze("abc")
    assert result is not None
    assert result.passphrase == "abc"
    assert result.passphrase_length == 3
    assert result.effective_pool_size == 26
    assert result.bits_of_entropy_per_character == pytest.approx(4.70044, abs=1e-5)
    assert result.bits_of_entropy == pytest.approx(14.10132, abs=1e-4)
    assert result.search_space_size == 12
    assert result.guesses_per_second == DEFAULT_GUESSES_PER_SECOND
    assert result.time_taken == pytest.approx(1.2e-10)
    assert result.entropy_defined


def test_uppercase_and_numbers_scenario():
    result = PassphraseAnalyzer({UPPERCASE_LETTERS, NUMBERS}).analyze("A1")
    assert set(result.pools_used) == {UPPERCASE_LETTERS, NUMBERS}
    assert result.effective_pool_size == 36
    assert result.bits_of_entropy_per_character == pytest.approx(5.16993, abs=1e-5)
    assert result.bits_of_entropy == pytest.approx(10.33985, abs=1e-5)
    assert result.search_space_size == 2
    assert result.time_taken == pytest.approx(2e-11)


def test_uncovered_passphrase_has_undefined_entropy():
    result = PassphraseAnalyzer({NUMBERS}).analyze("abc")
    assert result is not None
    assert result.effective_pool_size == 0
    assert result.pools_used == ()
    assert result.bits_of_entropy_per_character is None
    assert result.bits_of_entropy is None
    assert not result.entropy_defined
    # Search space is length-driven and still defined
    assert result.search_space_size == 12


def test_empty_configuration():
    analyzer = PassphraseAnalyzer(set())
    result = analyzer.analyze("abc")
    assert result.total_allowed_characters == ""
    assert result.total_allowed_characters_count == 0
    assert result.effective_pool_size == 0
    assert not result.entropy_defined


@pytest.mark.parametrize(
    "pools",
    [set(), {NUMBERS}, set(BUILTIN_POOLS), {CharacterPool.custom("xyz")}],
)
def test_empty_passphrase_returns_none(pools):
    assert PassphraseAnalyzer(pools).analyze("") is None


def test_equivalent_pools_collapse():
    single = PassphraseAnalyzer({NUMBERS}).analyze("2024")
    doubled_analyzer = PassphraseAnalyzer([NUMBERS, CharacterPool.custom("0123456789")])
    doubled = doubled_analyzer.analyze("2024")
    assert len(doubled_analyzer.pools) == 1
    assert doubled.effective_pool_size == single.effective_pool_size == 10
    assert doubled.bits_of_entropy == pytest.approx(single.bits_of_entropy)
    assert doubled.total_allowed_characters_count == 10


def test_overlapping_pools_are_concatenated_not_merged():
    overlap = CharacterPool.custom("abc1")
    analyzer = PassphraseAnalyzer([LOWERCASE_LETTERS, overlap])
    result = analyzer.analyze("a")
    assert result.total_allowed_characters_count == 30
    assert result.total_allowed_characters.count("a") == 2
    assert result.effective_pool_size == 30


def test_only_covered_pools_count():
    analyzer = PassphraseAnalyzer(BUILTIN_POOLS)
    result = analyzer.analyze("correct horse")
    assert set(result.pools_used) == {LOWERCASE_LETTERS, SPACE}
    assert result.effective_pool_size == 27
    assert result.total_allowed_characters_count == 26 + 26 + 10 + 32 + 1


def test_entropy_is_length_times_bits_per_character():
    analyzer = PassphraseAnalyzer(BUILTIN_POOLS)
    for passphrase in ("Tr0ub4dor&3", "correct horse battery staple", "Z"):
        result = analyzer.analyze(passphrase)
        assert result.bits_of_entropy == pytest.approx(
            len(passphrase) * math.log2(result.effective_pool_size)
        )


def test_length_counts_characters_not_bytes():
    result = PassphraseAnalyzer([CharacterPool.custom("äöü")]).analyze("äöü")
    assert result.passphrase_length == 3
    assert result.effective_pool_size == 3


@pytest.mark.parametrize(
    "length, expected",
    [(0, 0), (1, 0), (2, 2), (3, 12), (4, 4 + 16 + 64), (5, 5 + 25 + 125 + 625)],
)
def test_search_space_size(length, expected):
    assert PassphraseAnalyzer.search_space_size(length) == expected


def test_search_space_matches_summation_for_long_passphrases():
    n = 40
    assert PassphraseAnalyzer.search_space_size(n) == sum(n ** i for i in range(1, n))


def test_single_character_passphrase():
    result = PassphraseAnalyzer({LOWERCASE_LETTERS}).analyze("q")
    assert result.search_space_size == 0
    assert result.time_taken == 0.0


def test_time_taken_at_retargets_without_mutation():
    result = PassphraseAnalyzer({LOWERCASE_LETTERS}, guesses_per_second=1e3).analyze("abcd")
    assert result.time_taken == pytest.approx(84 / 1e3)
    for rate in (1.0, 1e6, 2.5e12):
        assert result.time_taken_at(rate) == pytest.approx(result.search_space_size / rate)
    assert result.time_taken == pytest.approx(84 / 1e3)
    assert result.guesses_per_second == 1e3


@pytest.mark.parametrize("rate", [0, -5.0])
def test_time_taken_at_rejects_non_positive_rates(rate):
    result = PassphraseAnalyzer({LOWERCASE_LETTERS}).analyze("abc")
    with pytest.raises(ValueError):
        result.time_taken_at(rate)


@pytest.mark.parametrize("rate", [0, -1.0, float("nan")])
def test_constructor_rejects_bad_rates(rate):
    with pytest.raises(ValueError):
        PassphraseAnalyzer({NUMBERS}, guesses_per_second=rate)


def test_result_is_immutable():
    result = PassphraseAnalyzer({LOWERCASE_LETTERS}).analyze("abc")
    with pytest.raises(ValidationError):
        result.passphrase = "xyz"


def test_results_are_independent_of_analyzer():
    analyzer = PassphraseAnalyzer({LOWERCASE_LETTERS})
    first = analyzer.analyze("abc")
    second = analyzer.analyze("abc")
    assert first == second
    assert first is not second


def test_analyze_many_preserves_order():
    analyzer = PassphraseAnalyzer(BUILTIN_POOLS)
    inputs = ["a", "", "abc", "A1!", "x" * 12]
    results = analyzer.analyze_many(inputs, max_workers=3)
    assert len(results) == len(inputs)
    assert results[1] is None
    for text, result in zip(inputs, results):
        if text:
            assert result == analyzer.analyze(text)


def test_analyze_many_empty_input():
    assert PassphraseAnalyzer({NUMBERS}).analyze_many([]) == []


def test_describe_mentions_fields():
    text = PassphraseAnalyzer({NUMBERS}).analyze("abc").describe()
    assert "passphrase_length: 3" in text
    assert "bits_of_entropy: undefined" in text
    assert "search_space_size: 12" in text
