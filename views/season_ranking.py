"""Season Ranking Page - Ranking for a year/season selection, summing seasons on ALL."""

import streamlit as st

from aggregate import ALL, filter_rodadas, format_money_brl, sum_by
from api_client import ApiError
from season_filter import default_selection
from views.components import RankingCapabilities, render_error, render_ranking_table, render_season_filter


def render():
    """Render the Season Ranking page."""
    st.title("🏆 Ranking da Temporada")

    from data_cache import get_cache_key, get_cached_home_bootstrap, get_cached_ranking, show_cache_freshness

    cache_key = get_cache_key()
    show_cache_freshness()

    options, rodadas = [], []
    try:
        options, rodadas = get_cached_home_bootstrap(cache_key)
    except ApiError as e:
        render_error(str(e))

    # Default to the most recent season on first visit
    if options and 'season_filter' not in st.session_state:
        st.session_state.season_filter = default_selection(options)

    if options:
        with st.expander("Filtrar por temporada", expanded=False):
            ano, temporada = render_season_filter(options)
    else:
        ano, temporada = ALL, ALL
        st.info("Nenhuma temporada disponível.")

    rows = []
    if options:
        with st.spinner("Carregando…"):
            try:
                rows = get_cached_ranking(cache_key, ano, temporada)
            except ApiError as e:
                render_error(str(e))

    rodadas_filtradas = filter_rodadas(rodadas, ano, temporada)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Jogadores (no ranking)", len(rows))
        st.caption("Considera o filtro selecionado")
    with col2:
        st.metric("Rodadas", len(rodadas_filtradas))
        st.caption("Rodadas registradas no período")
    with col3:
        st.metric("Distribuído em premiações", format_money_brl(sum_by(rodadas_filtradas, lambda r: r.get('prizepool'))))
        st.caption("Soma do prizepool da temporada")

    st.divider()
    render_ranking_table(
        rows,
        key="season_ranking",
        capabilities=RankingCapabilities(mobile_details=True),
        link_ano=ano,
        link_temporada=temporada,
    )
