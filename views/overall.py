"""Overall Page - All-time ranking, podium and superlatives for regular players."""

import streamlit as st

from aggregate import compute_superlatives, eligible_rows, format_pct
from api_client import ApiError
from config import MIN_PARTICIPATIONS, get_hidden_players
from views.components import RankingCapabilities, render_error, render_ranking_table

# How each superlative value is written under the winners' names
VALUE_FORMATS = {
    'mais_rebuys': lambda v: f"{v:g} ações",
    'mais_participacoes': lambda v: f"{v:g} participações",
    'mais_podios': lambda v: f"{v:g} pódios",
    'mais_titulos': lambda v: f"{v:g} títulos",
    'mais_melhor_mao': lambda v: f"{v:g} vezes",
    'melhor_taxa_vitoria': format_pct,
    'melhor_taxa_podio': format_pct,
    'melhor_aproveitamento': lambda v: f"{v:.2f}",
}


def render():
    """Render the Overall page."""
    st.title("🌟 Ranking Geral")

    from data_cache import get_cache_key, get_cached_ranking_geral, show_cache_freshness

    cache_key = get_cache_key()
    show_cache_freshness()

    rows = []
    with st.spinner("Carregando…"):
        try:
            rows = get_cached_ranking_geral(cache_key)
        except ApiError as e:
            render_error(str(e))

    eligible = eligible_rows(rows, MIN_PARTICIPATIONS, hidden_ids=get_hidden_players())

    st.subheader("Pódio geral (Top 5)")
    render_ranking_table(
        eligible,
        key="overall",
        capabilities=RankingCapabilities(mobile_details=True, podium_showcase=True),
        title="Ranking geral",
    )
    st.caption(f"*Somente jogadores com **{MIN_PARTICIPATIONS}+** participações entram no ranking geral e nas estatísticas.")

    st.divider()
    st.subheader("🏅 Destaques")

    stats = compute_superlatives(eligible, MIN_PARTICIPATIONS)
    keys = list(stats.keys())
    for start in range(0, len(keys), 4):
        cols = st.columns(4)
        for col, key in zip(cols, keys[start:start + 4]):
            stat = stats[key]
            with col:
                with st.container(border=True):
                    st.caption(stat['label'])
                    names = ", ".join(r.get('nome') or r.get('id_jogador') for r in stat['winners'])
                    st.markdown(f"**{names or '-'}**")
                    st.caption(VALUE_FORMATS[key](stat['value']))
