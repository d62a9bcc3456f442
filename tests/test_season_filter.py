from season_filter import (
    default_selection,
    normalize_temporada,
    resolve_season_pairs,
    season_options,
    select_year,
    sort_season_keys_desc,
    year_options,
)

OPTIONS = [
    {"ano": "2024", "temporada": "T1"},
    {"ano": "2024", "temporada": "T2"},
    {"ano": "2025", "temporada": "T1"},
    {"ano": "2024", "temporada": "T1"},
]


def test_wildcard_season_resolves_every_season_of_the_year() -> None:
    assert resolve_season_pairs(OPTIONS, "2024", "ALL") == [("2024", "T1"), ("2024", "T2")]


def test_wildcard_year_resolves_that_season_in_every_year() -> None:
    assert resolve_season_pairs(OPTIONS, "ALL", "T1") == [("2024", "T1"), ("2025", "T1")]


def test_double_wildcard_resolves_every_distinct_pair_in_api_order() -> None:
    assert resolve_season_pairs(OPTIONS, "ALL", "ALL") == [("2024", "T1"), ("2024", "T2"), ("2025", "T1")]


def test_concrete_pair_resolves_to_itself() -> None:
    assert resolve_season_pairs(OPTIONS, "2025", "T1") == [("2025", "T1")]


def test_wildcard_without_matches_resolves_to_nothing() -> None:
    assert resolve_season_pairs(OPTIONS, "2023", "ALL") == []
    assert resolve_season_pairs([], "ALL", "ALL") == []


def test_options_are_sorted_and_prefixed_with_all() -> None:
    assert year_options(OPTIONS) == ["ALL", "2024", "2025"]
    assert year_options(OPTIONS, allow_all=False) == ["2024", "2025"]
    assert season_options(OPTIONS, "2024") == ["ALL", "T1", "T2"]
    assert season_options(OPTIONS, "2025") == ["ALL", "T1"]
    assert season_options(OPTIONS, "ALL") == ["ALL", "T1", "T2"]


def test_selecting_a_year_resets_the_season() -> None:
    assert select_year("2025") == ("2025", "ALL")


def test_default_selection_is_the_most_recent_pair() -> None:
    assert default_selection(OPTIONS) == ("2025", "T1")
    assert default_selection([]) == ("ALL", "ALL")


def test_normalize_temporada() -> None:
    assert normalize_temporada(1) == "T1"
    assert normalize_temporada("2") == "T2"
    assert normalize_temporada(" t3 ") == "T3"
    assert normalize_temporada("T4") == "T4"
    assert normalize_temporada("Extra") == "Extra"
    assert normalize_temporada(None) == ""


def test_sort_season_keys_desc_compares_numbers_not_text() -> None:
    pairs = [("2024", "T2"), ("2024", "T10"), ("2025", "T1"), ("2023", "T3")]
    assert sort_season_keys_desc(pairs) == [("2025", "T1"), ("2024", "T10"), ("2024", "T2"), ("2023", "T3")]
