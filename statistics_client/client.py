import base64
from typing import List, Optional, Tuple
from urllib.parse import quote, urlsplit

import requests
from loguru import logger as _logger
from pydantic import ValidationError
from requests.models import PreparedRequest

from statistics_client.errors import (
    ConnectFailed,
    DataPointAlreadyExists,
    Failed,
    MalformedUrl,
    NotFound,
    Unauthorized,
)
from statistics_model import (
    MeasurementDistance,
    TimeSeriesDefinition,
    TimeSeriesPoint,
    dump_point,
    dump_points,
    parse_point,
)

JSON_CONTENT_TYPE = "application/json"

logger = _logger.bind(component="client")


def basic_auth_header(identity: str, secret: str) -> str:
    token = base64.b64encode(f"{identity}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _checked_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise MalformedUrl(f"Not an http(s) URL: {url!r}")
    try:
        parts.port  # raises ValueError for a non-numeric port
        PreparedRequest().prepare_url(url, None)
    except (ValueError, requests.RequestException) as e:
        raise MalformedUrl(f"Invalid URL {url!r}: {e}") from e
    return url


class IngestClient:
    """
    Client for the ingest service.

    Holds connection settings only. Each call opens its own session, sends a
    single request and closes it again, so one instance can be shared
    between threads. Nothing is retried: re-sending points that were already
    accepted raises DataPointAlreadyExists.
    """

    def __init__(
        self,
        base_url: str,
        owner: str,
        username: str,
        password: str,
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
    ) -> None:
        self.base_url = _checked_url(base_url.rstrip("/"))
        self.owner = owner
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def series(self, name: str, distance: MeasurementDistance) -> TimeSeriesDefinition:
        """Definition of a series owned by this client's owner."""
        return TimeSeriesDefinition(name=name, distance=distance, owner=self.owner)

    def ingest(self, definition: TimeSeriesDefinition, point: TimeSeriesPoint) -> None:
        status, reason, _ = self._send("POST", self._series_url(definition), dump_point(point))
        self._check(status, reason)

    def ingest_bulk(
        self, definition: TimeSeriesDefinition, points: List[TimeSeriesPoint]
    ) -> None:
        url = self._series_url(definition) + "?bulk=true"
        status, reason, _ = self._send("POST", url, dump_points(points))
        self._check(status, reason)

    def last(self, definition: TimeSeriesDefinition) -> Optional[TimeSeriesPoint]:
        """Latest point of the series, or None when the series is empty."""
        status, reason, content = self._send("GET", self._series_url(definition) + "/last")
        if status == 204:
            return None
        self._check(status, reason)
        try:
            return parse_point(content)
        except ValidationError as e:
            raise Failed(f"Failed to read last point: {e}", status) from e

    def _series_url(self, definition: TimeSeriesDefinition) -> str:
        return _checked_url(
            "/".join(
                [
                    self.base_url,
                    quote(definition.owner, safe=""),
                    quote(definition.name, safe=""),
                    definition.distance.value,
                ]
            )
        )

    def _send(
        self, method: str, url: str, body: Optional[bytes] = None
    ) -> Tuple[int, str, bytes]:
        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
            "Authorization": basic_auth_header(self.username, self.password),
        }
        logger.debug(f"{method} {url}")
        try:
            with requests.Session() as session:
                with session.request(
                    method,
                    url,
                    data=body,
                    headers=headers,
                    timeout=(self.connect_timeout, self.read_timeout),
                ) as response:
                    return response.status_code, response.reason, response.content
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ConnectFailed(e) from e

    @staticmethod
    def _check(status: int, reason: str) -> None:
        if status in (200, 201):
            return
        if status == 409:
            raise DataPointAlreadyExists()
        if status in (401, 403):
            raise Unauthorized(
                f"Failed to authorize with ingest service ({status})", status
            )
        if status == 404:
            raise NotFound(f"URL not found ({status})", status)
        raise Failed(f"Ingest failed ({status} {reason})", status)
