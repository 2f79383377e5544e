# authentication gate - injected authenticator + ownership check

from statistics_ingest.auth.authenticator import (
    Authenticator,
    AuthenticatorUnavailable,
    HttpAuthenticator,
    StaticAuthenticator,
)
from statistics_ingest.auth.gate import Access, check_access

__all__ = [
    "Access",
    "Authenticator",
    "AuthenticatorUnavailable",
    "HttpAuthenticator",
    "StaticAuthenticator",
    "check_access",
]
