import streamlit as st

from config import ConfigurationError, require_api_base

st.set_page_config(page_title="Poker Uplife", page_icon="♠", layout="wide", initial_sidebar_state="expanded")

PAGE_SLUGS = {
    "🏆 Temporada": "temporada",
    "🌟 Geral": "geral",
}
SLUG_TO_PAGE = {v: k for k, v in PAGE_SLUGS.items()}


def initialize_state():
    if 'data_cache_key' not in st.session_state:
        st.session_state.data_cache_key = 0


def main():
    initialize_state()

    try:
        require_api_base()
    except ConfigurationError as e:
        st.error(f"❌ {e}")
        st.stop()

    url_page = st.query_params.get("page", "temporada")

    with st.sidebar:
        st.markdown("## ♠ Poker Uplife")
        st.caption("Ranking • PIX • Estatísticas")

        page_options = list(PAGE_SLUGS.keys())
        default_page = SLUG_TO_PAGE.get(url_page, page_options[0])
        page = st.radio("Ir para", page_options, index=page_options.index(default_page),
                        label_visibility="collapsed", key="page_selector")

    # The profile page has no sidebar entry: stay on it until another page is picked
    new_slug = PAGE_SLUGS[page]
    previous_page = st.session_state.get("last_page", page)
    if url_page == "jogador":
        navigate = previous_page != page
    else:
        navigate = url_page != new_slug
    if navigate:
        st.query_params.clear()
        st.query_params["page"] = new_slug
        url_page = new_slug
    st.session_state.last_page = page
    st.session_state.return_page = new_slug

    if url_page == "jogador":
        from views import player
        player.render(
            st.query_params.get("id", ""),
            ano=st.query_params.get("ano"),
            temporada=st.query_params.get("temporada"),
        )
    elif url_page == "geral":
        from views import overall
        overall.render()
    else:
        from views import season_ranking
        season_ranking.render()


if __name__ == "__main__":
    main()
