import json
from unittest.mock import MagicMock

import pytest

from sfconnect.api import SalesforceAPI
from sfconnect.config import SFConfig
from sfconnect.session import SessionManager

INSTANCE_URL = "https://example.my.salesforce.com"

SF_ENV_VARS = [
    "SF_AUTH_ENDPOINT",
    "SF_CLIENT_ID",
    "SF_CLIENT_SECRET",
    "SF_USERNAME",
    "SF_PASSWORD",
    "SF_SECURITY_TOKEN",
    "SF_REST_API_PATH",
    "SF_QUERY_PATH",
    "SF_RECONNECT_ATTEMPTS",
    "SF_TIMEOUT",
]


def make_response(status_code=200, body=None, text=None):
    """Stand-in for requests.Response: status_code, text and json()."""
    if text is None:
        text = "" if body is None else json.dumps(body)
    r = MagicMock()
    r.status_code = status_code
    r.text = text
    r.json.side_effect = lambda: json.loads(text)
    return r


def token_response(token="00DTOKEN-1", instance_url=INSTANCE_URL):
    return make_response(body={"access_token": token, "instance_url": instance_url})


def expired_response():
    return make_response(
        401,
        [{"message": "Session expired or invalid", "errorCode": "INVALID_SESSION_ID"}],
    )


@pytest.fixture(autouse=True)
def clean_sf_env(monkeypatch):
    """Keep the developer's real SF_* settings out of every test."""
    for var in SF_ENV_VARS:
        # set-then-delete so values a test loads from a .env file are undone too
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def cfg():
    return SFConfig(
        auth_endpoint="https://login.salesforce.com/services/oauth2/token",
        client_id="cid",
        client_secret="csecret",
        username="svc@example.com",
        password="pw",
        security_token="TOK",
        max_reattempts=2,
    )


@pytest.fixture
def http():
    """Mocked requests.Session; tokens come from post(), API calls from request()."""
    h = MagicMock()
    h.post.return_value = token_response()
    return h


@pytest.fixture
def sessions(cfg, http):
    return SessionManager(cfg, http=http)


@pytest.fixture
def api(cfg, sessions):
    return SalesforceAPI(cfg, sessions=sessions)
