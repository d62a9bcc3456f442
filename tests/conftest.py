import pytest

import config

API_BASE = "https://api.example.com/exec"


@pytest.fixture(autouse=True)
def api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Settings come from the environment only, never from a local secrets.toml
    monkeypatch.setattr(config, "_secret", lambda name: None)
    monkeypatch.setenv("POKER_API_BASE", API_BASE + "/")
    monkeypatch.delenv("POKER_API_TIMEOUT", raising=False)
    monkeypatch.delenv("POKER_HIDDEN_PLAYERS", raising=False)
    monkeypatch.delenv("POKER_PLAYER_PHOTOS", raising=False)
