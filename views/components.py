"""Widgets shared by the ranking pages."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import streamlit as st

from aggregate import ALL, format_pct, num, podium_rate, rows_to_frame, win_rate
from data_cache import open_player, player_url
from season_filter import season_options, select_year, year_options

MEDALS = ["🥇", "🥈", "🥉"]

COLUMN_LABELS = {
    'pos': 'Pos',
    'jogador': 'Jogador',
    'pontos': 'Pontos',
    'p1': 'P1', 'p2': 'P2', 'p3': 'P3', 'p4': 'P4', 'p5': 'P5',
    'p6': 'P6', 'p7': 'P7', 'p8': 'P8', 'p9': 'P9',
    'serie_b': 'CSB',
    'fora_mesa_final': 'P10+',
    'podios': 'Pódios',
    'melhor_mao': 'Melhor Mão',
    'rebuy_total': 'Rebuy',
    'addon_total': 'Add-on',
    'participacoes': 'Part.',
}


@dataclass(frozen=True)
class RankingCapabilities:
    """Optional pieces of the ranking view; every page uses the same table."""
    mobile_details: bool = False
    carousel: bool = False
    podium_showcase: bool = False


def render_season_filter(options: Sequence[Dict[str, Any]], state_key: str = "season_filter"):
    """
    Year and season selectboxes. Changing the year resets the season to ALL.

    The selection lives in st.session_state[state_key] as an (ano, temporada) tuple.
    """
    ano, temporada = st.session_state[state_key]

    years = year_options(options)
    if ano not in years:
        ano = ALL
    seasons = season_options(options, ano)
    if temporada not in seasons:
        temporada = ALL

    col1, col2 = st.columns(2)
    with col1:
        new_ano = st.selectbox("Ano", years, index=years.index(ano),
                               format_func=lambda y: "Todos" if y == ALL else y)
    if new_ano != ano:
        st.session_state[state_key] = select_year(new_ano)
        st.rerun()
    with col2:
        new_temporada = st.selectbox("Temporada", seasons, index=seasons.index(temporada),
                                     format_func=lambda s: "Todas" if s == ALL else s)

    st.caption("Dica: selecione **Temporada = Todas** para somar as temporadas do ano (ou de todos os anos).")
    st.session_state[state_key] = (ano, new_temporada)
    return ano, new_temporada


def _player_label(row: Dict[str, Any]) -> str:
    return f"{row.get('id_jogador')} {row.get('nome') or ''}".strip()


def render_podium_showcase(rows: Sequence[Dict[str, Any]], size: int = 5):
    """Top ``size`` players laid out as podium steps."""
    top = list(rows[:size])
    if not top:
        return
    cols = st.columns(len(top))
    for i, (col, row) in enumerate(zip(cols, top)):
        with col:
            medal = MEDALS[i] if i < len(MEDALS) else f"{i + 1}º"
            st.markdown(f"### {medal}")
            st.markdown(f"**{row.get('nome')}**")
            st.caption(f"{num(row.get('pontos')):g} pts • {num(row.get('participacoes')):g} part.")


def render_carousel(rows: Sequence[Dict[str, Any]], key: str, page_size: int = 3):
    """Player cards paged with previous/next buttons."""
    if not rows:
        return
    state_key = f"{key}_carousel_index"
    pages = (len(rows) + page_size - 1) // page_size
    index = min(st.session_state.get(state_key, 0), pages - 1)

    start = index * page_size
    cols = st.columns(page_size)
    for col, row in zip(cols, rows[start:start + page_size]):
        with col:
            with st.container(border=True):
                st.markdown(f"**{row.get('nome')}**")
                st.metric("Pontos", f"{num(row.get('pontos')):g}")
                st.caption(f"{num(row.get('p1')):g} vitórias • {num(row.get('podios')):g} pódios")

    if pages > 1:
        prev_col, dots_col, next_col = st.columns([1, 4, 1])
        with prev_col:
            if st.button("‹", key=f"{key}_prev", disabled=index == 0):
                st.session_state[state_key] = index - 1
                st.rerun()
        with dots_col:
            st.caption(" ".join("●" if i == index else "○" for i in range(pages)))
        with next_col:
            if st.button("›", key=f"{key}_next", disabled=index >= pages - 1):
                st.session_state[state_key] = index + 1
                st.rerun()


def _render_player_details(rows: Sequence[Dict[str, Any]], ranks: List[int], key: str,
                           ano: Optional[str], temporada: Optional[str]):
    labels = [_player_label(r) for r in rows]
    selected = st.selectbox("Detalhes do jogador", labels, index=None,
                            placeholder="Escolha um jogador", key=f"{key}_details")
    if selected is None:
        return
    idx = labels.index(selected)
    row = rows[idx]
    with st.container(border=True):
        st.markdown(f"**{ranks[idx]}º – {row.get('nome')}**")
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Pontos", f"{num(row.get('pontos')):g}")
        with col2:
            st.metric("Participações", f"{num(row.get('participacoes')):g}")
        with col3:
            st.metric("Taxa de vitória", format_pct(win_rate(row)))
        with col4:
            st.metric("Taxa de pódio", format_pct(podium_rate(row)))
        placements = " • ".join(f"P{i}: {num(row.get(f'p{i}')):g}" for i in range(1, 10))
        st.caption(placements)
        if st.button("Ver perfil", key=f"{key}_open_profile"):
            open_player(row.get('id_jogador'), ano, temporada)


def render_ranking_table(rows: Sequence[Dict[str, Any]], key: str,
                         capabilities: RankingCapabilities = RankingCapabilities(),
                         link_ano: Optional[str] = None, link_temporada: Optional[str] = None,
                         title: str = "Ranking"):
    """
    Ranking table with display ranks, top-3 highlighting and eliminated players flagged.

    Args:
        rows: Sorted ranking rows
        key: Widget key prefix, unique per page
        capabilities: Which optional pieces to show around the table
        link_ano, link_temporada: Filter carried into the player profile links
    """
    if capabilities.podium_showcase:
        render_podium_showcase(rows)
    if capabilities.carousel:
        render_carousel(rows, key)

    st.subheader(title)
    if len(rows) == 0:
        st.info("Nenhum jogador no ranking para o filtro selecionado.")
        return

    df = rows_to_frame(rows)
    df['perfil'] = [player_url(r.get('id_jogador'), link_ano, link_temporada) for r in rows]
    df['jogador'] = [
        ("❌ " if r.get('eliminado') else "") + _player_label(r) for r in rows
    ]
    display_df = df[['pos', 'jogador', 'perfil'] + [c for c in COLUMN_LABELS if c not in ('pos', 'jogador')]]
    display_df = display_df.rename(columns=COLUMN_LABELS)

    def highlight_top3(row):
        if row['Pos'] == 1:
            return ['background-color: gold'] * len(row)
        elif row['Pos'] == 2:
            return ['background-color: silver'] * len(row)
        elif row['Pos'] == 3:
            return ['background-color: #CD7F32'] * len(row)  # bronze
        else:
            return [''] * len(row)

    st.dataframe(
        display_df.style.apply(highlight_top3, axis=1),
        width="stretch",
        hide_index=True,
        column_config={
            "perfil": st.column_config.LinkColumn("Perfil", display_text="Ver"),
        },
    )
    st.caption("Pódios (para o ranking) = **1º ao 5º**. Premiação em dinheiro pode variar por rodada (5 / 7 / 9). "
               "❌ = eliminado.")

    if capabilities.mobile_details:
        _render_player_details(rows, df['pos'].tolist(), key, link_ano, link_temporada)


def render_error(message: str):
    st.error(f"**Erro:** {message}")

