"""Decode Salesforce responses into success / error-envelope / unrecognised."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import requests

INVALID_SESSION_ID = "INVALID_SESSION_ID"


@dataclass(frozen=True)
class Success:
    payload: Any
    status_code: int = 200


@dataclass(frozen=True)
class ApiErrorEnvelope:
    code: str
    description: str
    errors: List[Dict[str, Any]] = field(default_factory=list)
    status_code: int = 400

    @property
    def expired(self) -> bool:
        return self.code == INVALID_SESSION_ID


@dataclass(frozen=True)
class Unrecognized:
    text: str
    status_code: int = 200


Outcome = Union[Success, ApiErrorEnvelope, Unrecognized]


def _error_objects(payload: Any) -> Optional[List[Dict[str, Any]]]:
    # Salesforce normally sends a list of error objects; accept a bare object too.
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, dict) and "errorCode" in first:
            return payload
    elif isinstance(payload, dict) and "errorCode" in payload:
        return [payload]
    return None


def decode(response: requests.Response) -> Outcome:
    """Classify a REST/query response before anyone branches on it."""
    status = response.status_code
    text = response.text or ""
    if not text.strip():
        return Success(None, status_code=status)

    try:
        payload = json.loads(text)
    except ValueError:
        return Unrecognized(text, status_code=status)

    errors = _error_objects(payload)
    if errors is not None:
        first = errors[0]
        return ApiErrorEnvelope(
            code=str(first.get("errorCode")),
            description=str(first.get("errorDescription") or first.get("message") or ""),
            errors=errors,
            status_code=status,
        )
    return Success(payload, status_code=status)
