from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence
from urllib.parse import quote

import requests

from .config import SFConfig
from .envelope import ApiErrorEnvelope, Success, Unrecognized, decode
from .exceptions import (
    ApplicationError,
    MalformedResponseError,
    SessionExpiredError,
    TransportError,
)
from .session import Session, SessionManager
from .soql import substitute

__author__ = "Kevin Steptoe"
__copyright__ = "Kevin Steptoe"
__license__ = "MIT"

_logger = logging.getLogger(__name__)


@dataclass
class RestActionRequest:
    """One resource-oriented REST call: method + sObject type (+ id, body)."""

    method: str
    resource_type: str
    resource_id: Optional[str] = None
    body: Optional[Any] = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if not self.resource_type:
            raise ValueError("resource_type is required")

    @property
    def path(self) -> str:
        p = "/" + self.resource_type
        if self.resource_id:
            p += "/" + self.resource_id
        return p


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceAPI:
    """Salesforce REST/SOQL client that logs in again when the session expires."""

    def __init__(
        self,
        cfg: Optional[SFConfig] = None,
        sessions: Optional[SessionManager] = None,
    ) -> None:
        self.cfg = cfg or SFConfig.from_env()
        self.sessions = sessions or SessionManager(self.cfg)
        self.http = self.sessions.http

    # --------------------------- Public methods -----------------------

    def connect(self) -> Session:
        """Log in now instead of on the first call."""
        return self.sessions.ensure_connected()

    def rest_action(self, request: Optional[RestActionRequest] = None, **kwargs: Any) -> Any:
        """Run one REST action against ``{rest_api_path}/{type}[/{id}]``.

        Returns the decoded JSON body, or ``True`` when Salesforce answers
        with an empty body (PATCH/DELETE give 204 No Content).
        """
        req = request or RestActionRequest(**kwargs)
        payload = self._call(
            req.method,
            self.cfg.rest_api_path + req.path,
            body=req.body,
        )
        return True if payload is None else payload

    def create(self, resource_type: str, body: Dict[str, Any]) -> Any:
        return self.rest_action(RestActionRequest("POST", resource_type, body=body))

    def retrieve(self, resource_type: str, resource_id: str) -> Any:
        return self.rest_action(RestActionRequest("GET", resource_type, resource_id))

    def update(self, resource_type: str, resource_id: str, body: Dict[str, Any]) -> Any:
        return self.rest_action(RestActionRequest("PATCH", resource_type, resource_id, body))

    def delete(self, resource_type: str, resource_id: str) -> Any:
        return self.rest_action(RestActionRequest("DELETE", resource_type, resource_id))

    def query(self, soql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Run a SOQL query with ``$1``, ``$2``... replaced by escaped *params*."""
        return self.execute_query(substitute(soql, params))

    def execute_query(self, soql: str) -> List[Dict[str, Any]]:
        """Run a ready-made SOQL string and return its ``records``."""
        return self._records(self._query_page(soql))

    def query_all_iter(
        self, soql: str, params: Optional[Sequence[Any]] = None
    ) -> Iterator[Dict[str, Any]]:
        """Yield records across pages via nextRecordsUrl."""
        res = self._query_page(substitute(soql, params))
        yield from self._records(res)
        next_url = res.get("nextRecordsUrl")
        while next_url:
            res = self._call("GET", next_url)
            if not isinstance(res, dict):
                raise MalformedResponseError("Query page is not a JSON object")
            yield from self._records(res)
            next_url = res.get("nextRecordsUrl")

    # --------------------------- Internal helpers --------------------

    def _query_page(self, soql: str) -> Dict[str, Any]:
        _logger.debug("SOQL: %s", soql)
        res = self._call("GET", self.cfg.query_path + quote(soql, safe=""))
        if not isinstance(res, dict):
            raise MalformedResponseError("Query response is not a JSON object")
        return res

    @staticmethod
    def _records(res: Dict[str, Any]) -> List[Dict[str, Any]]:
        return list(res.get("records") or [])

    def _call(self, method: str, path: str, *, body: Optional[Any] = None) -> Any:
        """Send one logical request, logging in again on INVALID_SESSION_ID.

        *path* is relative to the instance URL, which is re-read on every
        attempt since a new login can return a different one.
        """
        max_reattempts = max(self.cfg.max_reattempts, 0)
        reattempts = 0
        while True:
            session = self.sessions.ensure_connected()
            response = self._send(method, session.instance_url + path, session, body)
            outcome = decode(response)

            if isinstance(outcome, (Success, Unrecognized)) and outcome.status_code >= 400:
                _logger.error("HTTP %s error for %s %s", outcome.status_code, method, path)
                raise ApplicationError(
                    [{"errorCode": f"HTTP_{outcome.status_code}", "message": response.text}],
                    status_code=outcome.status_code,
                )

            if isinstance(outcome, Success):
                if reattempts:
                    _logger.info("%s %s succeeded after %d reattempt(s)", method, path, reattempts)
                return outcome.payload

            if isinstance(outcome, Unrecognized):
                raise MalformedResponseError(
                    f"Expected JSON from {method} {path} (HTTP {outcome.status_code})",
                    outcome.text,
                )

            if not outcome.expired:
                _logger.error("Salesforce rejected %s %s: %s", method, path, outcome.code)
                raise ApplicationError(outcome.errors, status_code=outcome.status_code)

            self.sessions.invalidate(session)
            if reattempts < max_reattempts:
                reattempts += 1
                _logger.warning(
                    "Session expired on %s %s; reattempt %d/%d",
                    method,
                    path,
                    reattempts,
                    max_reattempts,
                )
                continue

            raise self._exhausted(outcome, reattempts)

    @staticmethod
    def _exhausted(outcome: ApiErrorEnvelope, reattempts: int) -> SessionExpiredError:
        errors = [dict(e) for e in outcome.errors]
        errors[0]["errorDescription"] = (
            f"Got back INVALID_SESSION_ID from Salesforce. "
            f"{reattempts} attempt(s) tried to get new key."
        )
        _logger.error(errors[0]["errorDescription"])
        return SessionExpiredError(errors, attempts=reattempts, status_code=outcome.status_code)

    def _send(
        self,
        method: str,
        url: str,
        session: Session,
        body: Optional[Any] = None,
    ) -> requests.Response:
        """Dispatch one HTTP request; the body, if any, goes as JSON."""
        headers: Dict[str, str] = {"Authorization": f"Bearer {session.access_token}"}
        kwargs: Dict[str, Any] = {}
        if body:
            kwargs["json"] = body

        _logger.debug("%s %s", method, url)
        try:
            return self.http.request(
                method,
                url,
                headers=headers,
                timeout=self.cfg.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            _logger.error("Request error for %s %s: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e
