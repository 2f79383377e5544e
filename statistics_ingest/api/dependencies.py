from fastapi import Request
from fastapi.security import HTTPBasic

from statistics_ingest.auth import Authenticator
from statistics_ingest.storage.repository import SeriesRepository

# missing Authorization header -> None, the gate answers 401 itself
basic_auth = HTTPBasic(auto_error=False)


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_repository(request: Request) -> SeriesRepository:
    return request.app.state.repository


async def raw_body(request: Request) -> bytes:
    # read unparsed so the body is only decoded after the caller is authorized
    return await request.body()
