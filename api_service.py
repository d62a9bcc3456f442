from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from aggregate import ALL, aggregate_rankings, sort_ranking_rows
from api_client import api_get
from season_filter import SeasonPair, normalize_temporada, resolve_season_pairs

MAX_PARALLEL_FETCHES = 8


def unwrap_data(payload: Any, default: Any = None) -> Any:
    """
    Strip the optional {"data": ...} envelope from an API response.

    Returns ``default`` when the response (or its data) is empty.
    """
    if isinstance(payload, dict) and 'data' in payload:
        payload = payload['data']
    if payload is None:
        return default
    return payload


def _as_list(payload: Any) -> List[Dict[str, Any]]:
    data = unwrap_data(payload, [])
    return data if isinstance(data, list) else []


class LeagueApiService:
    def __init__(self, getter: Callable[[Dict[str, Any]], Any] = api_get):
        self._get = getter

    def get_anos_temporadas(self) -> List[Dict[str, Any]]:
        """Every {ano, temporada} pair the league has data for."""
        return _as_list(self._get({'action': 'anos_temporadas'}))

    def get_rodadas(self) -> List[Dict[str, Any]]:
        return _as_list(self._get({'action': 'rodadas'}))

    def get_ranking_temporada(self, ano: str, temporada: str) -> List[Dict[str, Any]]:
        rows = _as_list(self._get({'action': 'ranking', 'ano': ano, 'temporada': temporada}))
        return sort_ranking_rows(rows)

    def get_ranking_geral(self) -> List[Dict[str, Any]]:
        return sort_ranking_rows(_as_list(self._get({'action': 'ranking_geral'})))

    def get_jogador(self, ano: str, temporada: str, id_jogador: str) -> Optional[Dict[str, Any]]:
        """
        Player detail for one season, or the all-time summary when temporada is ALL.

        Returns:
            The unwrapped payload, or None when the API returned nothing
        """
        payload = self._get({
            'action': 'jogador',
            'ano': ano,
            'temporada': temporada,
            'id_jogador': id_jogador,
        })
        data = unwrap_data(payload)
        return data if isinstance(data, dict) else None

    def get_home_bootstrap(self) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Fetch the season list and the round list concurrently."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            options = executor.submit(self.get_anos_temporadas)
            rodadas = executor.submit(self.get_rodadas)
            return options.result(), rodadas.result()

    def get_rankings_for_pairs(self, pairs: Sequence[SeasonPair]) -> List[List[Dict[str, Any]]]:
        """
        Fetch the ranking of every (ano, temporada) pair concurrently.

        Results come back in the same order as ``pairs``. The first failure
        is raised once every request has finished.
        """
        if not pairs:
            return []
        with ThreadPoolExecutor(max_workers=min(MAX_PARALLEL_FETCHES, len(pairs))) as executor:
            return list(executor.map(lambda p: self.get_ranking_temporada(*p), pairs))

    def get_ranking_filtrado(self, options: Sequence[Dict[str, Any]], ano: str,
                             temporada: str) -> List[Dict[str, Any]]:
        """
        Ranking for a year/season filter where either side may be ALL.

        A single concrete pair is returned as the API sorted it; wildcard
        selections are fetched per season and merged.
        """
        if ano != ALL and temporada != ALL:
            return self.get_ranking_temporada(ano, temporada)
        pairs = resolve_season_pairs(options, ano, temporada)
        rows = aggregate_rankings(self.get_rankings_for_pairs(pairs))
        print(f"✅ Summed {len(pairs)} season rankings for {ano}/{temporada} ({len(rows)} players)")
        return rows

    def get_historicos(self, pairs: Sequence[SeasonPair], id_jogador: str) -> Dict[SeasonPair, List[Dict[str, Any]]]:
        """
        Round history of a player for several seasons, fetched concurrently.

        Every round record is tagged with the ano/temporada it was requested for.
        """
        def fetch(pair):
            ano, temporada = pair
            payload = self.get_jogador(ano, normalize_temporada(temporada), id_jogador) or {}
            return [dict(h, ano=ano, temporada=temporada) for h in payload.get('historico') or []]

        if not pairs:
            return {}
        with ThreadPoolExecutor(max_workers=min(MAX_PARALLEL_FETCHES, len(pairs))) as executor:
            return dict(zip(pairs, executor.map(fetch, pairs)))
