from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from .env_loader import load_env_files

__author__ = "Kevin Steptoe"
__copyright__ = "Kevin Steptoe"
__license__ = "MIT"

DEFAULT_AUTH_ENDPOINT = "https://login.salesforce.com/services/oauth2/token"
DEFAULT_REST_API_PATH = "/services/data/v60.0/sobjects"
DEFAULT_QUERY_PATH = "/services/data/v60.0/query?q="
DEFAULT_MAX_REATTEMPTS = 1
DEFAULT_TIMEOUT = 30.0


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    return max(value, 0)


def _timeout_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    if raw.strip().lower() in ("none", "off", "0"):
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Configuration for the Salesforce password-grant connection."""

    # Full token endpoint URL (not the instance URL)
    auth_endpoint: str = DEFAULT_AUTH_ENDPOINT

    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    # Service account; Salesforce expects the security token glued to the password
    username: Optional[str] = None
    password: Optional[str] = None
    security_token: str = ""

    # Path prefixes appended to the instance URL
    rest_api_path: str = DEFAULT_REST_API_PATH
    query_path: str = DEFAULT_QUERY_PATH

    # How many times one call may reauthenticate after INVALID_SESSION_ID
    max_reattempts: int = DEFAULT_MAX_REATTEMPTS

    timeout: Optional[float] = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, *, load_dotenv: bool = True) -> SFConfig:
        """Load configuration from environment variables (and .env if present)."""
        if load_dotenv:
            load_env_files(quiet=True)
        return cls(
            auth_endpoint=os.getenv("SF_AUTH_ENDPOINT") or DEFAULT_AUTH_ENDPOINT,
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            username=os.getenv("SF_USERNAME"),
            password=os.getenv("SF_PASSWORD"),
            security_token=os.getenv("SF_SECURITY_TOKEN", ""),
            rest_api_path=os.getenv("SF_REST_API_PATH") or DEFAULT_REST_API_PATH,
            query_path=os.getenv("SF_QUERY_PATH") or DEFAULT_QUERY_PATH,
            max_reattempts=_int_env("SF_RECONNECT_ATTEMPTS", DEFAULT_MAX_REATTEMPTS),
            timeout=_timeout_env("SF_TIMEOUT", DEFAULT_TIMEOUT),
        )

    def missing(self) -> List[str]:
        """Names of required env vars that have no value."""
        return [
            k
            for k, v in {
                "SF_AUTH_ENDPOINT": self.auth_endpoint,
                "SF_CLIENT_ID": self.client_id,
                "SF_CLIENT_SECRET": self.client_secret,
                "SF_USERNAME": self.username,
                "SF_PASSWORD": self.password,
            }.items()
            if not v
        ]
