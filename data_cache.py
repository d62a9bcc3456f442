"""Cached API fetchers and cache/navigation helpers shared by every page."""

import datetime
from urllib.parse import urlencode

import streamlit as st

from api_service import LeagueApiService

CACHE_TTL_SECONDS = 300


@st.cache_resource
def get_service():
    return LeagueApiService()


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def get_cached_home_bootstrap(cache_key):
    """Cache season options and rounds, fetched together."""
    return get_service().get_home_bootstrap()


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def get_cached_ranking(cache_key, ano, temporada):
    """
    Cache the ranking for a year/season filter.

    Wildcard filters are resolved against the cached season list and the
    per-season rankings are summed.
    """
    options, _ = get_cached_home_bootstrap(cache_key)
    return get_service().get_ranking_filtrado(options, ano, temporada)


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def get_cached_ranking_geral(cache_key):
    return get_service().get_ranking_geral()


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def get_cached_jogador(cache_key, ano, temporada, id_jogador):
    return get_service().get_jogador(ano, temporada, id_jogador)


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def get_cached_historicos(cache_key, pairs, id_jogador):
    """Cache round histories; ``pairs`` is a tuple so it can be hashed."""
    return get_service().get_historicos(list(pairs), id_jogador)


def get_cache_key():
    return st.session_state.get('data_cache_key', 0)


def get_cache_timestamp():
    """Get the time the cached data was last refreshed."""
    now = datetime.datetime.now()
    last_update = st.session_state.get('last_cache_update')
    # Expired entries are fetched again on this run
    if last_update is None or (now - last_update).total_seconds() >= CACHE_TTL_SECONDS:
        st.session_state.last_cache_update = now
    return st.session_state.last_cache_update


def freshness_caption(age_seconds):
    """Caption for data fetched ``age_seconds`` ago; never older than the cache TTL."""
    age_seconds = min(age_seconds, CACHE_TTL_SECONDS)
    if age_seconds < 60:
        return "🟢 Dados atualizados agora"
    return f"🟢 Dados em cache (atualizados há {int(age_seconds / 60)} min)"


def show_cache_freshness():
    """Display cache freshness indicator with a manual refresh button."""
    last_update = get_cache_timestamp()
    time_diff = datetime.datetime.now() - last_update

    col1, col2 = st.columns([4, 1])
    with col1:
        st.caption(freshness_caption(time_diff.total_seconds()))
    with col2:
        if st.button("🔄 Atualizar dados", key="refresh_data"):
            invalidate_data_cache()
            st.rerun()


def invalidate_data_cache():
    """Increment cache key so every cached fetch is repeated."""
    st.session_state.data_cache_key = get_cache_key() + 1
    st.session_state.last_cache_update = datetime.datetime.now()


def route_params(page, **values):
    """Query parameters of a route; empty values are left out."""
    params = {"page": page}
    params.update({k: str(v) for k, v in values.items() if v})
    return params


def player_url(id_jogador, ano=None, temporada=None):
    return "?" + urlencode(route_params("jogador", id=id_jogador, ano=ano, temporada=temporada))


def _navigate(params):
    st.query_params.clear()
    for k, v in params.items():
        st.query_params[k] = v
    st.rerun()


def open_player(id_jogador, ano=None, temporada=None):
    """Navigate to a player's profile, keeping the current filter in the URL."""
    _navigate(route_params("jogador", id=id_jogador, ano=ano, temporada=temporada))


def close_player(page="temporada"):
    """Leave the profile for the page the sidebar points at."""
    _navigate(route_params(page))
