from __future__ import annotations

from typing import Any, Dict, List, Optional


class SalesforceError(RuntimeError):
    """Base class for every error raised by sfconnect."""


class MissingCredentialsError(SalesforceError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class TransportError(SalesforceError):
    """Network or I/O failure talking to Salesforce (never retried)."""


class MalformedResponseError(SalesforceError):
    """A response body was not the JSON we expected."""

    def __init__(self, message: str, body: Optional[str] = None):
        self.body = body
        super().__init__(message)


class AuthError(SalesforceError):
    """The token endpoint answered with an ``error`` field."""

    def __init__(self, code: str, description: Optional[str] = None):
        self.code = code
        self.description = description
        msg = f"Authentication failed: {code}"
        if description:
            msg += f" ({description})"
        super().__init__(msg)


class ApplicationError(SalesforceError):
    """Salesforce rejected the request (validation, required fields, ...).

    ``errors`` is the error envelope exactly as Salesforce returned it.
    """

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        status_code: Optional[int] = None,
    ):
        self.errors = errors
        self.status_code = status_code
        first = errors[0] if errors else {}
        self.code: str = str(first.get("errorCode", "UNKNOWN_ERROR"))
        detail = first.get("errorDescription") or first.get("message") or ""
        super().__init__(f"{self.code}: {detail}" if detail else self.code)


class SessionExpiredError(ApplicationError):
    """Session kept expiring after all reattempts were used."""

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        attempts: int,
        status_code: Optional[int] = None,
    ):
        self.attempts = attempts
        super().__init__(errors, status_code=status_code)
