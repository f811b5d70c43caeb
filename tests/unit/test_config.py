import pytest

from sfconnect import config
from sfconnect.config import SFConfig


def test_default_values():
    cfg = SFConfig()

    assert cfg.auth_endpoint == "https://login.salesforce.com/services/oauth2/token"
    assert cfg.rest_api_path == "/services/data/v60.0/sobjects"
    assert cfg.query_path == "/services/data/v60.0/query?q="
    assert cfg.max_reattempts == 1
    assert cfg.timeout == 30.0
    assert cfg.client_id is None


def test_from_env(monkeypatch):
    env = {
        "SF_AUTH_ENDPOINT": "https://test.salesforce.com/services/oauth2/token",
        "SF_CLIENT_ID": "cid",
        "SF_CLIENT_SECRET": "csecret",
        "SF_USERNAME": "svc@example.com",
        "SF_PASSWORD": "pw",
        "SF_SECURITY_TOKEN": "TOK",
        "SF_REST_API_PATH": "/services/data/v59.0/sobjects",
        "SF_QUERY_PATH": "/services/data/v59.0/query?q=",
        "SF_RECONNECT_ATTEMPTS": "3",
        "SF_TIMEOUT": "12.5",
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)

    cfg = SFConfig.from_env(load_dotenv=False)

    assert cfg.auth_endpoint == "https://test.salesforce.com/services/oauth2/token"
    assert cfg.client_id == "cid"
    assert cfg.client_secret == "csecret"
    assert cfg.username == "svc@example.com"
    assert cfg.password == "pw"
    assert cfg.security_token == "TOK"
    assert cfg.rest_api_path == "/services/data/v59.0/sobjects"
    assert cfg.query_path == "/services/data/v59.0/query?q="
    assert cfg.max_reattempts == 3
    assert cfg.timeout == 12.5
    assert cfg.missing() == []


def test_from_env_missing_is_tolerated():
    cfg = SFConfig.from_env(load_dotenv=False)

    assert cfg.client_id is None
    assert cfg.max_reattempts == 1
    assert cfg.missing() == [
        "SF_CLIENT_ID",
        "SF_CLIENT_SECRET",
        "SF_USERNAME",
        "SF_PASSWORD",
    ]


def test_from_env_loads_dotenv(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "load_env_files", lambda **kw: calls.append(kw))

    SFConfig.from_env()

    assert calls == [{"quiet": True}]


def test_bad_reattempt_count(monkeypatch):
    monkeypatch.setenv("SF_RECONNECT_ATTEMPTS", "lots")
    with pytest.raises(ValueError, match="SF_RECONNECT_ATTEMPTS"):
        SFConfig.from_env(load_dotenv=False)


def test_negative_reattempt_count_clamped(monkeypatch):
    monkeypatch.setenv("SF_RECONNECT_ATTEMPTS", "-4")
    assert SFConfig.from_env(load_dotenv=False).max_reattempts == 0


@pytest.mark.parametrize("raw", ["none", "0"])
def test_timeout_can_be_disabled(monkeypatch, raw):
    monkeypatch.setenv("SF_TIMEOUT", raw)
    assert SFConfig.from_env(load_dotenv=False).timeout is None
