"""Player Profile Page - A player's all-time numbers, season evolution and recent rounds."""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from aggregate import format_date_br, format_money_brl, format_pct
from api_client import ApiError
from config import get_photos_dir
from player_profile import (
    ROUND_CHART_SEASONS, evolution_rows, latest_seasons, overall_position, photo_path,
    profile_kpis, round_chart, season_efficiency, season_summaries, season_title,
)
from views.components import render_error

EFFICIENCY_COLOR = "#f84501"
POSITION_COLOR = "#409fc2"

# Financial totals are returned by the API but not published on the profile
SHOW_FINANCIALS = False


def _evolution_figure(rows):
    labels = [r['key'] for r in rows]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=labels,
        y=[r['eficiencia'] for r in rows],
        mode='lines+markers+text',
        name='Eficiência (pontos/participações)',
        text=[f"{r['eficiencia']:.2f}" for r in rows],
        textposition='bottom center',
        line=dict(color=EFFICIENCY_COLOR, width=3),
        marker=dict(size=9),
    ))
    ranked = [r for r in rows if r['pos'] is not None]
    fig.add_trace(go.Scatter(
        x=[r['key'] for r in ranked],
        y=[r['pos'] for r in ranked],
        mode='lines+markers+text',
        name='Posição final',
        text=[f"{r['pos']}º" for r in ranked],
        textposition='top center',
        line=dict(color=POSITION_COLOR, width=3),
        marker=dict(size=9),
        yaxis='y2',
    ))
    fig.update_layout(
        height=320,
        hovermode='x unified',
        xaxis=dict(type='category'),
        yaxis=dict(title='Eficiência', rangemode='tozero'),
        # 1st place at the top
        yaxis2=dict(title='Posição', overlaying='y', side='right', autorange='reversed'),
        legend=dict(orientation='h', y=-0.2),
        margin=dict(t=20),
    )
    return fig


def _round_figure(chart, title):
    points = chart['points']
    fig = go.Figure(go.Scatter(
        x=[p['rodada'] for p in points],
        y=[p['pontos'] for p in points],
        mode='lines+markers+text',
        text=[p['label'] for p in points],
        textposition='top center',
        line=dict(color=EFFICIENCY_COLOR, width=3),
        marker=dict(size=8),
        name=title,
    ))
    fig.update_layout(
        height=280,
        xaxis=dict(title='Rodada', type='category'),
        yaxis=dict(title='Pontos acumulados', rangemode='tozero'),
        margin=dict(t=20),
        showlegend=False,
    )
    return fig


def render(id_jogador, ano=None, temporada=None):
    """Render the Player Profile page."""
    from data_cache import (
        close_player, get_cache_key, get_cached_historicos, get_cached_jogador, get_cached_ranking_geral,
        show_cache_freshness,
    )

    if st.button("← Voltar", key="player_back"):
        close_player(st.session_state.get("return_page", "temporada"))

    if not id_jogador:
        st.warning("⚠️ Nenhum jogador selecionado.")
        return

    cache_key = get_cache_key()
    show_cache_freshness()

    # ALL/ALL returns the all-time summary with a season-level breakdown
    try:
        with st.spinner("Carregando…"):
            all_data = get_cached_jogador(cache_key, "ALL", "ALL", id_jogador)
    except ApiError as e:
        render_error(str(e))
        return

    if not all_data or not all_data.get('jogador'):
        st.info(all_data.get('message') if all_data and all_data.get('message') else "Jogador não encontrado.")
        return

    try:
        geral = overall_position(get_cached_ranking_geral(cache_key), id_jogador)
    except ApiError:
        geral = {'pos': None, 'pontos': 0}

    jogador = all_data['jogador']
    nome = jogador.get('nome') or id_jogador
    resumo = season_summaries(all_data)
    kpis = profile_kpis(all_data, geral['pontos'])

    # Header
    col_info, col_photo = st.columns([4, 1])
    with col_info:
        st.title(nome)
        if ano or temporada:
            st.caption(f"Filtro de origem: {ano or 'ALL'} / {temporada or 'ALL'}")
        best = kpis['melhor_campanha']
        c1, c2, c3 = st.columns(3)
        with c1:
            st.markdown(f"**Joga desde:** {format_date_br(kpis['joga_desde'])}")
        with c2:
            st.markdown(f"**Participações:** {kpis['participacoes']:g}")
        with c3:
            st.markdown(f"**Melhor campanha:** {best['ano'] + '-' + best['temporada'] if best else '—'}")
    with col_photo:
        photo = photo_path(id_jogador, get_photos_dir())
        if photo is not None:
            st.image(str(photo), width=132)

    # Performance
    st.divider()
    cols = st.columns(6)
    with cols[0]:
        st.metric("Ranking geral", f"{geral['pos']}º" if geral['pos'] is not None else "—")
        st.caption("Posição no ranking geral")
    with cols[1]:
        st.metric("Aproveitamento", f"{kpis['aproveitamento']:.2f}")
        st.caption("Pontos (geral) ÷ participações")
    with cols[2]:
        st.metric("Taxa de vitória", format_pct(kpis['taxa_vitoria']))
        st.caption(f"{kpis['vitorias']:g} vitórias")
    with cols[3]:
        st.metric("Pódios (1º–5º)", f"{kpis['podios']:g}", delta=format_pct(kpis['taxa_podio']), delta_color="off")
        st.caption(f"Em {kpis['participacoes']:g} participações")
    with cols[4]:
        st.metric("Melhores mãos", f"{kpis['melhores_maos']:g}")
        st.caption("Total histórico")
    with cols[5]:
        st.metric("Rebuys (total)", f"{kpis['total_rebuys']:g}")
        st.caption("Somando todas as temporadas")

    if SHOW_FINANCIALS:
        f1, f2, f3 = st.columns(3)
        with f1:
            st.metric("Total pago", format_money_brl(kpis['total_pago']))
        with f2:
            st.metric("Total recebido", format_money_brl(kpis['total_recebido']))
        with f3:
            st.metric("Saldo total", format_money_brl(kpis['saldo']))

    # Season evolution
    st.divider()
    st.subheader("📈 Evolução nas últimas temporadas")
    st.caption(f"**Eficiência geral:** {kpis['eficiencia_geral']:.2f}")
    chart_rows = evolution_rows(resumo)
    if not chart_rows:
        st.info("Sem dados suficientes para o gráfico.")
    else:
        st.plotly_chart(_evolution_figure(chart_rows), width="stretch")

    # Round by round for the most recent seasons
    st.divider()
    st.subheader("🎯 Rodada a Rodada")
    st.caption("Eixo X: número da rodada. Linha: pontos acumulados. Rótulo: <pontos acumulados>pts - <posição no ranking>.")
    recent = latest_seasons(resumo, ROUND_CHART_SEASONS)
    try:
        with st.spinner("Carregando rodadas…"):
            histories = get_cached_historicos(cache_key, tuple(recent), id_jogador)
    except ApiError:
        histories = {}

    efficiency_rows = []
    for i, pair in enumerate(recent):
        season_ano, season_temporada = pair
        title = season_title(season_ano, season_temporada)
        chart = round_chart(histories.get(pair, []))
        last_pos = f"{chart['last_pos']}º" if chart['last_pos'] else "—"

        with st.container(border=True):
            head, status = st.columns([3, 1])
            with head:
                st.markdown(f"**{title}**")
            with status:
                st.markdown(f"**{'Colocação atual' if i == 0 else 'Colocação final'}: {last_pos}**")
            if not chart['points']:
                st.caption("Sem dados nesta temporada.")
            else:
                st.plotly_chart(_round_figure(chart, title), width="stretch")

        if histories.get(pair):
            eff = season_efficiency(histories[pair])
            efficiency_rows.append({
                'Temporada': title,
                'Participações': eff['participacoes'],
                'Pontos': eff['pontos'],
                'Rebuys': eff['rebuys'],
                'Add-ons': eff['addons'],
                'Eficiência': round(eff['eficiencia'], 2),
            })

    if efficiency_rows:
        st.caption("Eficiência = pontos ÷ (participações + rebuys); add-ons não entram na conta.")
        st.dataframe(pd.DataFrame(efficiency_rows), hide_index=True, width="stretch")

    st.caption("Se quiser remover ou substituir sua foto, entre em contato.")
