"""
Player profile derivations.

The profile is built from the all-time player payload (``ano=ALL``,
``temporada=ALL``), whose season breakdown has no rebuy/add-on detail, plus
per-season payloads for the most recent seasons, which carry round-by-round
history.
"""

import pathlib
from typing import Any, Dict, List, Optional, Sequence

from aggregate import (
    best_campaign, compute_display_ranks, efficiency_approx, efficiency_exact,
    num, safe_div, sum_by,
)
from season_filter import SeasonPair, normalize_temporada, sort_season_keys_desc

EVOLUTION_SEASONS = 8
ROUND_CHART_SEASONS = 2


def season_summaries(all_data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not all_data:
        return []
    return list(all_data.get('resumo_por_temporada') or [])


def summary_pairs(resumo: Sequence[Dict[str, Any]]) -> List[SeasonPair]:
    """Distinct (ano, temporada) pairs present in the season summaries, in order."""
    pairs: List[SeasonPair] = []
    for s in resumo:
        ano = str(s.get('ano') or '').strip()
        temporada = str(s.get('temporada') or '').strip()
        if ano and temporada and (ano, temporada) not in pairs:
            pairs.append((ano, temporada))
    return pairs


def latest_seasons(resumo: Sequence[Dict[str, Any]], count: int) -> List[SeasonPair]:
    return sort_season_keys_desc(summary_pairs(resumo))[:count]


def _sum_optional(resumo: Sequence[Dict[str, Any]], field: str) -> float:
    # Older API deployments omit some totals from the season breakdown
    if not any(s.get(field) is not None for s in resumo):
        return 0
    return sum_by(resumo, lambda s: s.get(field))


def overall_position(ranking_geral: Sequence[Dict[str, Any]], id_jogador: str) -> Dict[str, Any]:
    """
    Player's displayed position and points in the overall ranking.

    Returns:
        {'pos': int or None, 'pontos': number}; pos is None when the player is not ranked
    """
    ranks = compute_display_ranks(ranking_geral)
    for idx, row in enumerate(ranking_geral):
        if row.get('id_jogador') == id_jogador:
            return {'pos': ranks[idx], 'pontos': num(row.get('pontos'))}
    return {'pos': None, 'pontos': 0}


def profile_kpis(all_data: Optional[Dict[str, Any]], geral_pontos: Any = 0) -> Dict[str, Any]:
    """Headline numbers of the profile page from the all-time payload."""
    all_data = all_data or {}
    resumo = season_summaries(all_data)
    jogador = all_data.get('jogador') or {}
    total_geral = all_data.get('total_geral') or {}

    participacoes = jogador.get('participacoes')
    if participacoes is None:
        participacoes = total_geral.get('participacoes')
    participacoes = num(participacoes)
    vitorias = _sum_optional(resumo, 'p1')
    podios = _sum_optional(resumo, 'podios')
    total_pago = num(total_geral.get('total_pagar'))
    total_recebido = num(total_geral.get('total_receber'))
    saldo = total_geral.get('saldo')

    return {
        'participacoes': participacoes,
        'vitorias': vitorias,
        'taxa_vitoria': safe_div(vitorias, participacoes),
        'podios': podios,
        'taxa_podio': safe_div(podios, participacoes),
        'melhores_maos': _sum_optional(resumo, 'melhor_mao'),
        'total_rebuys': _sum_optional(resumo, 'rebuy_total'),
        'aproveitamento': safe_div(geral_pontos, participacoes),
        'eficiencia_geral': efficiency_approx(total_geral.get('pontos'), total_geral.get('participacoes')),
        'melhor_campanha': best_campaign(resumo),
        'joga_desde': jogador.get('joga_desde'),
        'total_pago': total_pago,
        'total_recebido': total_recebido,
        'saldo': num(saldo) if saldo is not None else total_recebido - total_pago,
    }


def evolution_rows(resumo: Sequence[Dict[str, Any]], limit: int = EVOLUTION_SEASONS) -> List[Dict[str, Any]]:
    """
    Last ``limit`` seasons in chronological order with efficiency and final position.

    Each row: {'key': '2024-T1', 'ano', 'temporada', 'eficiencia', 'pos'};
    pos is None when the season has no final position.
    """
    by_key = {}
    for s in resumo:
        by_key[(str(s.get('ano') or '').strip(), str(s.get('temporada') or '').strip())] = s

    rows = []
    for ano, temporada in reversed(latest_seasons(resumo, limit)):
        s = by_key[(ano, temporada)]
        posicao = s.get('posicao')
        rows.append({
            'key': f"{ano}-{temporada}",
            'ano': ano,
            'temporada': temporada,
            'eficiencia': efficiency_approx(s.get('pontos'), s.get('participacoes')),
            'pos': int(num(posicao)) if posicao not in (None, '') else None,
        })
    return rows


def _round_number(entry: Dict[str, Any]) -> str:
    rodada = str(entry.get('rodada') or entry.get('id_rodada') or '')
    if '-' in rodada:
        rodada = rodada.split('-')[-1]
    return rodada.zfill(2)


def _round_points(entry: Dict[str, Any]) -> float:
    for field in ('pontos_acumulados', 'pontos_rodada', 'pontos'):
        if entry.get(field) is not None:
            return num(entry.get(field))
    return 0


def round_chart(historico: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Round-by-round series of one season.

    Returns:
        {'points': [{'rodada', 'pontos', 'posicao', 'label'}], 'last_pos': int or None}
    """
    hist = sorted(historico, key=lambda x: str(x.get('id_rodada') or ''))
    points = []
    for entry in hist:
        pontos = _round_points(entry)
        posicao = str(entry.get('posicao_ranking') or '').strip()
        points.append({
            'rodada': _round_number(entry),
            'pontos': pontos,
            'posicao': posicao or None,
            'label': f"{pontos:g}pts - {posicao + 'º' if posicao else '—'}",
        })

    last_pos = None
    if hist:
        raw = str(hist[-1].get('posicao_ranking') or '').strip()
        try:
            last_pos = int(float(raw)) if raw else None
        except ValueError:
            last_pos = None
    return {'points': points, 'last_pos': last_pos}


def season_efficiency(historico: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Exact efficiency of one season from its round history (rebuys count as entries)."""
    played = [h for h in historico if h.get('participou', True)]
    pontos = sum_by(played, lambda h: h.get('pontos'))
    rebuys = sum_by(played, lambda h: h.get('rebuy'))
    return {
        'participacoes': len(played),
        'pontos': pontos,
        'rebuys': rebuys,
        'addons': sum_by(played, lambda h: h.get('addon')),
        'eficiencia': efficiency_exact(pontos, len(played), rebuys),
    }


def season_title(ano: str, temporada: str) -> str:
    return f"Temporada {ano}-{normalize_temporada(temporada)}"


def photo_path(id_jogador: str, photos_dir: pathlib.Path) -> Optional[pathlib.Path]:
    """Player photo, falling back to default.png; None when neither exists."""
    names = [f"{id_jogador}.png"] if id_jogador else []
    for name in names + ['default.png']:
        candidate = photos_dir / name
        if candidate.is_file():
            return candidate
    return None
