"""Year/season selection: available options, wildcard resolution and defaults."""

import re
from typing import Any, Dict, List, Sequence, Tuple

from aggregate import ALL

SeasonPair = Tuple[str, str]


def normalize_temporada(value: Any) -> str:
    """
    Normalize a season label to the API's "T<n>" form.
    Handles: 1, "1", "t1", " T1 " → "T1". Other labels are returned stripped.
    """
    label = str(value if value is not None else '').strip()
    if not label:
        return label
    if re.fullmatch(r'\d+', label):
        return f"T{label}"
    if re.fullmatch(r'[tT]\d+', label):
        return f"T{label[1:]}"
    return label


def season_number(temporada: Any) -> int:
    """First number in a season label ("T3" → 3); 0 when there is none."""
    match = re.search(r'(\d+)', str(temporada or ''))
    return int(match.group(1)) if match else 0


def _pairs(options: Sequence[Dict[str, Any]]) -> List[SeasonPair]:
    return [(str(o.get('ano')), str(o.get('temporada'))) for o in options]


def year_options(options: Sequence[Dict[str, Any]], allow_all: bool = True) -> List[str]:
    years = sorted({ano for ano, _ in _pairs(options)})
    return [ALL] + years if allow_all else years


def season_options(options: Sequence[Dict[str, Any]], ano: str, allow_all: bool = True) -> List[str]:
    """Season labels offered for ``ano`` (every label when ano is ALL), sorted."""
    seasons = sorted({t for a, t in _pairs(options) if ano == ALL or a == ano})
    return [ALL] + seasons if allow_all else seasons


def select_year(ano: str) -> SeasonPair:
    """Changing the year resets the season to ALL so no invalid pair is ever requested."""
    return ano, ALL


def default_selection(options: Sequence[Dict[str, Any]]) -> SeasonPair:
    """Most recent pair: highest year, then highest season label."""
    pairs = _pairs(options)
    if not pairs:
        return ALL, ALL
    return max(pairs)


def resolve_season_pairs(options: Sequence[Dict[str, Any]], ano: str, temporada: str) -> List[SeasonPair]:
    """
    Resolve a possibly wildcard (ano, temporada) filter into concrete pairs.

    Args:
        options: Available {ano, temporada} records from the API
        ano: Year or ALL
        temporada: Season label or ALL

    Returns:
        Distinct pairs to fetch and sum, in the order the API listed them
    """
    if ano != ALL and temporada != ALL:
        return [(ano, temporada)]

    resolved: List[SeasonPair] = []
    for pair in _pairs(options):
        a, t = pair
        if ano != ALL and a != ano:
            continue
        if temporada != ALL and t != temporada:
            continue
        if pair not in resolved:
            resolved.append(pair)
    return resolved


def sort_season_keys_desc(pairs: Sequence[SeasonPair]) -> List[SeasonPair]:
    """Newest first: by numeric year, then by season number."""
    def key(pair):
        ano, temporada = pair
        try:
            year = int(ano)
        except ValueError:
            year = 0
        return year, season_number(temporada)
    return sorted(pairs, key=key, reverse=True)
