from enum import Enum
from typing import Optional

from fastapi.security import HTTPBasicCredentials

from statistics_ingest.auth.authenticator import Authenticator
from statistics_ingest.utils.logger import logger


class Access(str, Enum):
    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"


def check_access(
    authenticator: Authenticator,
    credentials: Optional[HTTPBasicCredentials],
    owner: str,
) -> Access:
    """
    Decide whether the caller may write to series owned by `owner`.

    Credentials are validated on every call. Only a valid identity equal to
    the owner is authorized.
    """
    if credentials is None:
        return Access.UNAUTHORIZED

    if not authenticator.validate(credentials.username, credentials.password):
        return Access.UNAUTHORIZED

    if credentials.username != owner:
        logger.warning(
            f"Identity {credentials.username} denied write access to series of {owner}"
        )
        return Access.FORBIDDEN

    return Access.AUTHORIZED
