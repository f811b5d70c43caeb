from importlib.metadata import PackageNotFoundError, version  # pragma: no cover

try:
    dist_name = "sfconnect"
    __version__ = version(dist_name)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
finally:
    del version, PackageNotFoundError

from .api import RestActionRequest, SalesforceAPI  # noqa: E402
from .config import SFConfig  # noqa: E402
from .exceptions import (  # noqa: E402
    ApplicationError,
    AuthError,
    MalformedResponseError,
    MissingCredentialsError,
    SalesforceError,
    SessionExpiredError,
    TransportError,
)
from .session import Session, SessionManager  # noqa: E402
from .soql import substitute  # noqa: E402

__all__ = [
    "ApplicationError",
    "AuthError",
    "MalformedResponseError",
    "MissingCredentialsError",
    "RestActionRequest",
    "SalesforceAPI",
    "SalesforceError",
    "SFConfig",
    "Session",
    "SessionExpiredError",
    "SessionManager",
    "TransportError",
    "substitute",
]
