import pathlib

import pytest

import config
from config import ConfigurationError, get_hidden_players, get_photos_dir, get_timeout, require_api_base


def test_hidden_players_are_parsed_from_a_comma_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POKER_HIDDEN_PLAYERS", " J001, ,J007 ,,J010,")
    assert get_hidden_players() == ["J001", "J007", "J010"]


def test_no_hidden_players_by_default() -> None:
    assert get_hidden_players() == []


def test_api_base_is_stripped_of_trailing_slash() -> None:
    assert require_api_base() == "https://api.example.com/exec"


def test_blank_api_base_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POKER_API_BASE", "   ")
    with pytest.raises(ConfigurationError, match="POKER_API_BASE"):
        require_api_base()


def test_api_base_falls_back_to_streamlit_secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POKER_API_BASE")
    monkeypatch.setattr(config, "_secret", lambda name: {"POKER_API_BASE": "https://secret.example/exec/"}.get(name))
    assert require_api_base() == "https://secret.example/exec"


def test_invalid_timeout_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POKER_API_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        get_timeout()


def test_photos_dir_can_be_overridden(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
    assert get_photos_dir() == config.DEFAULT_PHOTOS_DIR
    monkeypatch.setenv("POKER_PLAYER_PHOTOS", str(tmp_path))
    assert get_photos_dir() == tmp_path
