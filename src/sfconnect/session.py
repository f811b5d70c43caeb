"""
Session lifecycle for the Salesforce password-grant connection.

A session is established lazily on first use and kept until Salesforce
reports INVALID_SESSION_ID, at which point the caller invalidates it and the
next ``ensure_connected`` logs in again.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .config import SFConfig
from .exceptions import (
    AuthError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Snapshot of one successful authentication."""

    instance_url: str
    access_token: str
    generation: int

    @property
    def token_preview(self) -> str:
        t = self.access_token
        return f"{t[:10]}...{t[-6:]}" if len(t) > 16 else "***"


class SessionManager:
    """Owns the connection state shared by every call of one client."""

    def __init__(self, cfg: SFConfig, http: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.http = http or requests.Session()
        self.instance_url: str = ""
        self.access_token: str = ""
        self.connected: bool = False
        self.generation: int = 0
        self._lock = threading.Lock()

    # --------------------------- Public methods -----------------------

    def ensure_connected(self) -> Session:
        """Return the current session, authenticating first if there is none."""
        with self._lock:
            if not self.connected:
                self._authenticate()
            return Session(self.instance_url, self.access_token, self.generation)

    def invalidate(self, session: Optional[Session] = None) -> None:
        """Mark the session expired.

        With *session*, only disconnect if that session is still the current
        one; a caller holding a stale snapshot must not drop a fresh login.
        The cached URL and token are left in place until the next login.
        """
        with self._lock:
            if session is not None and session.generation != self.generation:
                _logger.debug(
                    "Ignoring invalidate for stale session generation %d (current %d)",
                    session.generation,
                    self.generation,
                )
                return
            if self.connected:
                _logger.info("Salesforce session %d marked expired", self.generation)
            self.connected = False

    # --------------------------- Internal helpers --------------------

    def _authenticate(self) -> None:
        """Perform the OAuth2 password grant and store the new session."""
        missing = self.cfg.missing()
        if missing:
            raise MissingCredentialsError(missing)

        data = {
            "grant_type": "password",
            "client_id": self.cfg.client_id,
            "client_secret": self.cfg.client_secret,
            "username": self.cfg.username,
            "password": f"{self.cfg.password}{self.cfg.security_token or ''}",
        }

        _logger.debug("Requesting access token from %s", self.cfg.auth_endpoint)
        try:
            r = self.http.post(self.cfg.auth_endpoint, data=data, timeout=self.cfg.timeout)
        except requests.RequestException as e:
            _logger.error("Token request to %s failed: %s", self.cfg.auth_endpoint, e)
            raise TransportError(f"Token request failed: {e}") from e

        payload = self._parse_token_response(r)

        if payload.get("error"):
            _logger.error(
                "Salesforce login rejected (%s): %s",
                payload["error"],
                payload.get("error_description"),
            )
            raise AuthError(str(payload["error"]), payload.get("error_description"))

        instance_url = payload.get("instance_url")
        access_token = payload.get("access_token")
        if not instance_url or not access_token:
            raise MalformedResponseError(
                "Token response is missing instance_url or access_token", r.text
            )

        self.instance_url = str(instance_url).rstrip("/")
        self.access_token = str(access_token)
        self.generation += 1
        self.connected = True
        _logger.info(
            "Connected to Salesforce instance=%s (session %d)",
            self.instance_url,
            self.generation,
        )

    @staticmethod
    def _parse_token_response(r: requests.Response) -> Dict[str, Any]:
        try:
            payload = r.json()
        except ValueError:
            raise MalformedResponseError(
                f"Token endpoint returned non-JSON body (HTTP {r.status_code})", r.text
            ) from None
        if not isinstance(payload, dict):
            raise MalformedResponseError("Token endpoint returned unexpected JSON", r.text)
        return payload
