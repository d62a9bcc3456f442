"""
Ranking aggregation and derived statistics.

Ranking rows are plain dicts keyed by the API's field names
(``id_jogador``, ``nome``, ``pontos``, ``p1`` .. ``p9``, ...). Nothing here
mutates its input; every function returns new rows or values.
"""

import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from config import MIN_PARTICIPATIONS

PLACEMENT_FIELDS = [f"p{i}" for i in range(1, 10)]

# Numeric fields summed when merging rankings; also the tie predicate for display ranks
SUMMED_FIELDS = (
    ['pontos'] + PLACEMENT_FIELDS
    + ['serie_b', 'fora_mesa_final', 'podios', 'melhor_mao',
       'rebuy_total', 'addon_total', 'participacoes']
)

# Sort keys, each descending; the final tie-break is name ascending
SORT_FIELDS = ['pontos'] + PLACEMENT_FIELDS + ['podios', 'participacoes']

ALL = 'ALL'


def num(value: Any) -> float:
    """Coerce an API value to a number; missing or invalid values count as 0."""
    if value is None or value == '':
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        # NaN comes back from DataFrame columns with missing cells
        return 0 if value != value else value
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    if parsed != parsed:
        return 0
    return int(parsed) if parsed.is_integer() else parsed


def sum_by(items: Iterable[Any], f: Callable[[Any], Any]) -> float:
    return sum(num(f(x)) for x in items)


def name_key(nome: Any) -> Tuple[str, str]:
    """Collation key for player names: accents and case ignored, raw text breaks exact ties."""
    text = str(nome or '')
    folded = ''.join(c for c in unicodedata.normalize('NFKD', text) if not unicodedata.combining(c))
    return folded.casefold(), text


def _sort_key(row: Dict[str, Any]) -> Tuple:
    return tuple(-num(row.get(k)) for k in SORT_FIELDS) + name_key(row.get('nome'))


def sort_ranking_rows(rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort by points desc, then p1..p9, podiums, participations desc, then name asc."""
    return sorted(rows, key=_sort_key)


def aggregate_rankings(rankings: Sequence[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Merge several season rankings into one ranking keyed by player id.

    Args:
        rankings: One list of ranking rows per season being summed

    Returns:
        New merged rows, sorted with sort_ranking_rows
    """
    merged: Dict[str, Dict[str, Any]] = {}

    for rows in rankings:
        for row in rows:
            key = row.get('id_jogador')
            current = merged.get(key)
            if current is None:
                current = dict(row)
                for field in SUMMED_FIELDS:
                    current[field] = num(row.get(field))
                merged[key] = current
                continue

            for field in SUMMED_FIELDS:
                current[field] = current[field] + num(row.get(field))
            # latest non-empty name and eliminated flag win
            current['nome'] = row.get('nome') or current.get('nome')
            current['eliminado'] = row.get('eliminado') or current.get('eliminado')

    return sort_ranking_rows(list(merged.values()))


def is_tie_row(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    return all(num(a.get(k)) == num(b.get(k)) for k in SUMMED_FIELDS)


def compute_display_ranks(rows: Sequence[Dict[str, Any]]) -> List[int]:
    """
    Assign the displayed position of each row in an already sorted ranking.

    A row tied with the row right before it repeats that row's rank; any
    other row is ranked by its 1-based index, so a tie for first place
    produces 1, 1, 3.
    """
    ranks: List[int] = []
    for i, row in enumerate(rows):
        if i > 0 and is_tie_row(row, rows[i - 1]):
            ranks.append(ranks[i - 1])
        else:
            ranks.append(i + 1)
    return ranks


def filter_rodadas(rodadas: Sequence[Dict[str, Any]], ano: str, temporada: str) -> List[Dict[str, Any]]:
    """Keep the rounds that belong to the (ano, temporada) selection; ALL matches anything."""
    return [
        r for r in rodadas
        if (ano == ALL or str(r.get('ano')) == ano)
        and (temporada == ALL or str(r.get('temporada')) == temporada)
    ]


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------

def safe_div(a: Any, b: Any) -> float:
    b = num(b)
    if not b:
        return 0
    return num(a) / b


def win_rate(row: Dict[str, Any]) -> float:
    return safe_div(row.get('p1'), row.get('participacoes'))


def podium_rate(row: Dict[str, Any]) -> float:
    return safe_div(row.get('podios'), row.get('participacoes'))


def efficiency_approx(pontos: Any, participacoes: Any) -> float:
    """Points per participation."""
    return safe_div(pontos, participacoes)


def efficiency_exact(pontos: Any, participacoes: Any, rebuys: Any) -> float:
    """Points per buy-in, counting each rebuy as an extra entry. Add-ons are not counted."""
    return safe_div(pontos, num(participacoes) + num(rebuys))


def best_campaign(resumo: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Find the season with the highest approximate efficiency.

    Args:
        resumo: Season summaries with ano, temporada, pontos and participacoes

    Returns:
        Dict with ano, temporada and eff, or None when no summary qualifies.
        The first season seen wins ties.
    """
    best = None
    for s in resumo:
        ano = str(s.get('ano') or '').strip()
        temporada = str(s.get('temporada') or '').strip()
        if not ano or not temporada:
            continue
        eff = efficiency_approx(s.get('pontos'), s.get('participacoes'))
        if best is None or eff > best['eff']:
            best = {'ano': ano, 'temporada': temporada, 'eff': eff}
    return best


def eligible_rows(rows: Sequence[Dict[str, Any]], min_participations: int = MIN_PARTICIPATIONS,
                  hidden_ids: Iterable[str] = ()) -> List[Dict[str, Any]]:
    hidden = set(hidden_ids)
    return [
        r for r in rows
        if num(r.get('participacoes')) >= min_participations and r.get('id_jogador') not in hidden
    ]


def superlative(rows: Sequence[Dict[str, Any]], metric: Callable[[Dict[str, Any]], float],
                min_participations: int = MIN_PARTICIPATIONS) -> Tuple[List[Dict[str, Any]], float]:
    """
    Find every eligible player holding the maximum of ``metric``.

    Values are rounded to 6 decimals before comparing so that ratios which
    differ only by floating point noise count as ties.

    Returns:
        Tuple of (winners in input order, maximum value); ([], 0) when nobody is eligible
    """
    candidates = eligible_rows(rows, min_participations)
    if not candidates:
        return [], 0

    scored = [(r, round(metric(r), 6)) for r in candidates]
    best = max(v for _, v in scored)
    winners = [r for r, v in scored if v == best]
    return winners, best


SUPERLATIVES: List[Tuple[str, str, Callable[[Dict[str, Any]], float]]] = [
    ('mais_rebuys', 'Mais rebuy/add-on', lambda r: num(r.get('rebuy_total')) + num(r.get('addon_total'))),
    ('mais_participacoes', 'Mais participações', lambda r: num(r.get('participacoes'))),
    ('mais_podios', 'Mais pódios', lambda r: num(r.get('podios'))),
    ('mais_titulos', 'Mais títulos (P1)', lambda r: num(r.get('p1'))),
    ('mais_melhor_mao', 'Mais melhor-mão', lambda r: num(r.get('melhor_mao'))),
    ('melhor_taxa_vitoria', 'Maior taxa de vitória', win_rate),
    ('melhor_taxa_podio', 'Maior taxa de pódio', podium_rate),
    ('melhor_aproveitamento', 'Melhor aproveitamento (pontos/part.)',
     lambda r: efficiency_approx(r.get('pontos'), r.get('participacoes'))),
]


def compute_superlatives(rows: Sequence[Dict[str, Any]],
                         min_participations: int = MIN_PARTICIPATIONS) -> Dict[str, Dict[str, Any]]:
    """Evaluate every overall-view superlative: {key: {label, winners, value}}."""
    stats = {}
    for key, label, metric in SUPERLATIVES:
        winners, value = superlative(rows, metric, min_participations)
        stats[key] = {'label': label, 'winners': winners, 'value': value}
    return stats


# ---------------------------------------------------------------------------
# Formatting (pt-BR)
# ---------------------------------------------------------------------------

def format_money_brl(value: Any) -> str:
    v = num(value)
    text = f"{abs(v):,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    return f"-R$ {text}" if v < 0 else f"R$ {text}"


def format_pct(value: Any) -> str:
    pct = round(num(value) * 100, 1)
    if float(pct).is_integer():
        return f"{int(pct)}%"
    return f"{pct:.1f}%".replace('.', ',')


def format_date_br(value: Any) -> str:
    if value is None or str(value).strip() == '':
        return '—'
    parsed = pd.to_datetime(str(value), errors='coerce')
    if pd.isna(parsed):
        return str(value)
    return parsed.strftime('%d/%m/%Y')


def rows_to_frame(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Ranking rows as a DataFrame with display ranks in a 'pos' column."""
    columns = ['id_jogador', 'nome'] + SUMMED_FIELDS + ['eliminado']
    df = pd.DataFrame(list(rows), columns=columns)
    if len(df) == 0:
        df.insert(0, 'pos', pd.Series(dtype='int64'))
        return df
    for field in SUMMED_FIELDS:
        df[field] = df[field].apply(num)
    df['eliminado'] = [bool(r.get('eliminado')) for r in rows]
    df.insert(0, 'pos', compute_display_ranks(rows))
    return df
