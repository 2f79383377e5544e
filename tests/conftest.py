from urllib.parse import urlsplit

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from statistics_client import IngestClient
from statistics_ingest.api.main import create_app
from statistics_ingest.auth import StaticAuthenticator
from statistics_ingest.db.init_db import init_database
from statistics_ingest.storage.repository import SeriesRepository

USERS = {"aUser": "aPassword", "anotherUser": "anotherPassword"}


class CountingAuthenticator(StaticAuthenticator):
    def __init__(self, users):
        super().__init__(users)
        self.calls = []

    def validate(self, identity, secret):
        self.calls.append((identity, secret))
        return super().validate(identity, secret)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine):
    return SeriesRepository(engine)


@pytest.fixture
def authenticator():
    return CountingAuthenticator(USERS)


@pytest.fixture
def app(engine, authenticator):
    return create_app(engine=engine, authenticator=authenticator)


@pytest.fixture
def api(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def bridge(api, monkeypatch):
    """Route every requests.Session.request through the in-process TestClient."""
    sent = []

    def request(session, method, url, data=None, headers=None, timeout=None, **kwargs):
        sent.append({"method": method, "url": url, "data": data, "headers": headers, "timeout": timeout})
        parts = urlsplit(url)
        target = parts.path + ("?" + parts.query if parts.query else "")
        answer = api.request(method, target, content=data, headers=headers)

        response = requests.Response()
        response.status_code = answer.status_code
        response.reason = answer.reason_phrase
        response.headers.update(answer.headers)
        response.url = url
        response._content = answer.content
        response._content_consumed = True
        return response

    monkeypatch.setattr(requests.Session, "request", request)
    return sent


@pytest.fixture
def client(bridge):
    return IngestClient(
        "http://ingest.test",
        owner="aUser",
        username="aUser",
        password="aPassword",
    )
