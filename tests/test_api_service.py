import threading

import pytest

from api_client import HttpError
from api_service import LeagueApiService, unwrap_data

OPTIONS = [
    {"ano": "2024", "temporada": "T1"},
    {"ano": "2024", "temporada": "T2"},
    {"ano": "2025", "temporada": "T1"},
]

RANKINGS = {
    ("2024", "T1"): [
        {"id_jogador": "J001", "nome": "Ana", "pontos": 50, "p1": 1, "participacoes": 5},
    ],
    ("2024", "T2"): [
        {"id_jogador": "J001", "nome": "Ana", "pontos": 30, "p1": 0, "participacoes": 4},
        {"id_jogador": "J002", "nome": "Bia", "pontos": 80, "p1": 2, "participacoes": 6},
    ],
    ("2025", "T1"): [
        {"id_jogador": "J003", "nome": "Caio", "pontos": 10, "participacoes": 1},
    ],
}


class FakeApi:
    """Answers API actions from in-memory fixtures and records every request."""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, params):
        with self._lock:
            self.calls.append(dict(params))
        action = params["action"]
        if action == "anos_temporadas":
            return {"data": OPTIONS}
        if action == "rodadas":
            return [{"id_rodada": "2024-T1-01", "ano": "2024", "temporada": "T1", "prizepool": 300}]
        if action == "ranking":
            return {"data": RANKINGS.get((params["ano"], params["temporada"]), [])}
        if action == "ranking_geral":
            return {"data": [
                {"id_jogador": "J002", "nome": "Bia", "pontos": 10},
                {"id_jogador": "J001", "nome": "Ana", "pontos": 20},
            ]}
        if action == "jogador":
            if params["id_jogador"] == "J404":
                return {"data": None}
            return {"data": {
                "jogador": {"id_jogador": params["id_jogador"], "nome": "Ana"},
                "historico": [{"id_rodada": f"{params['ano']}-{params['temporada']}-01", "pontos": 7}],
            }}
        raise AssertionError(f"unexpected action {action}")

    def actions(self, name):
        return [c for c in self.calls if c["action"] == name]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def service(api: FakeApi) -> LeagueApiService:
    return LeagueApiService(getter=api)


def test_unwrap_data_accepts_enveloped_and_bare_payloads() -> None:
    assert unwrap_data({"data": [1]}) == [1]
    assert unwrap_data([1]) == [1]
    assert unwrap_data({"data": None}, default=[]) == []
    assert unwrap_data(None, default={}) == {}


def test_bare_and_enveloped_lists(service: LeagueApiService) -> None:
    assert service.get_anos_temporadas() == OPTIONS
    assert service.get_rodadas()[0]["prizepool"] == 300


def test_overall_ranking_is_sorted(service: LeagueApiService) -> None:
    assert [r["id_jogador"] for r in service.get_ranking_geral()] == ["J001", "J002"]


def test_home_bootstrap_fetches_options_and_rounds(service: LeagueApiService, api: FakeApi) -> None:
    options, rodadas = service.get_home_bootstrap()

    assert options == OPTIONS
    assert len(rodadas) == 1
    assert len(api.calls) == 2


def test_concrete_filter_requests_a_single_season(service: LeagueApiService, api: FakeApi) -> None:
    rows = service.get_ranking_filtrado(OPTIONS, "2024", "T2")

    assert [r["id_jogador"] for r in rows] == ["J002", "J001"]
    assert api.actions("ranking") == [{"action": "ranking", "ano": "2024", "temporada": "T2"}]


def test_year_filter_sums_every_season_of_the_year(service: LeagueApiService, api: FakeApi) -> None:
    rows = service.get_ranking_filtrado(OPTIONS, "2024", "ALL")

    assert [r["id_jogador"] for r in rows] == ["J002", "J001"]
    ana = rows[1]
    assert (ana["pontos"], ana["p1"], ana["participacoes"]) == (80, 1, 9)
    requested = sorted((c["ano"], c["temporada"]) for c in api.actions("ranking"))
    assert requested == [("2024", "T1"), ("2024", "T2")]


def test_all_filter_sums_every_season(service: LeagueApiService, api: FakeApi) -> None:
    rows = service.get_ranking_filtrado(OPTIONS, "ALL", "ALL")

    assert [r["id_jogador"] for r in rows] == ["J002", "J001", "J003"]
    assert len(api.actions("ranking")) == 3


def test_filter_with_no_matching_season_is_empty(service: LeagueApiService, api: FakeApi) -> None:
    assert service.get_ranking_filtrado(OPTIONS, "2023", "ALL") == []
    assert api.actions("ranking") == []


def test_rankings_for_pairs_keep_input_order(service: LeagueApiService) -> None:
    pairs = [("2025", "T1"), ("2024", "T1")]
    results = service.get_rankings_for_pairs(pairs)
    assert [rows[0]["id_jogador"] for rows in results] == ["J003", "J001"]


def test_failed_season_fetch_fails_the_aggregate() -> None:
    def getter(params):
        if params["action"] == "ranking" and params["temporada"] == "T2":
            raise HttpError(500)
        return {"data": RANKINGS.get((params.get("ano"), params.get("temporada")), [])}

    service = LeagueApiService(getter=getter)

    with pytest.raises(HttpError):
        service.get_ranking_filtrado(OPTIONS, "2024", "ALL")


def test_get_jogador_returns_none_when_missing(service: LeagueApiService) -> None:
    assert service.get_jogador("ALL", "ALL", "J404") is None
    assert service.get_jogador("ALL", "ALL", "J001")["jogador"]["nome"] == "Ana"


def test_historicos_are_tagged_with_the_requested_season(service: LeagueApiService, api: FakeApi) -> None:
    histories = service.get_historicos([("2025", "1"), ("2024", "T2")], "J001")

    assert set(histories) == {("2025", "1"), ("2024", "T2")}
    entry = histories[("2025", "1")][0]
    assert (entry["ano"], entry["temporada"]) == ("2025", "1")
    # season labels are normalized on the wire
    assert {c["temporada"] for c in api.actions("jogador")} == {"T1", "T2"}


def test_historicos_of_unknown_player_are_empty(service: LeagueApiService) -> None:
    assert service.get_historicos([("2024", "T1")], "J404") == {("2024", "T1"): []}
    assert service.get_historicos([], "J001") == {}
