"""
Credential validation collaborators.

An authenticator answers one question per call: is this identity/secret pair
valid. It knows nothing about series ownership and keeps no cache.
"""

from abc import ABC, abstractmethod
from typing import Dict

import requests

from statistics_ingest.utils.logger import logger


class AuthenticatorUnavailable(Exception):
    """The authentication service could not give an answer."""

    pass


class Authenticator(ABC):

    @abstractmethod
    def validate(self, identity: str, secret: str) -> bool:
        pass


class HttpAuthenticator(Authenticator):
    """
    Delegates to the external authentication service.

    POST {"username": ..., "password": ...} -> {"authenticated": true|false}
    """

    def __init__(self, url: str, timeout: float = 5.0) -> None:
        self.url = url
        self.timeout = timeout

    def validate(self, identity: str, secret: str) -> bool:
        try:
            with requests.Session() as session:
                response = session.post(
                    self.url,
                    json={"username": identity, "password": secret},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Authentication service failed for {identity}: {e}")
            raise AuthenticatorUnavailable(str(e)) from e

        authenticated = isinstance(body, dict) and body.get("authenticated") is True
        if not authenticated:
            logger.warning(f"Authentication rejected for {identity}")
        return authenticated


class StaticAuthenticator(Authenticator):
    """Fixed identity -> secret table. For local runs and tests."""

    def __init__(self, users: Dict[str, str]) -> None:
        self._users = dict(users)

    def validate(self, identity: str, secret: str) -> bool:
        return identity in self._users and self._users[identity] == secret
