import json
from http import HTTPStatus
from typing import Callable, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.security import HTTPBasicCredentials
from pydantic import ValidationError

from statistics_ingest.api.dependencies import (
    basic_auth,
    get_authenticator,
    get_repository,
    raw_body,
)
from statistics_ingest.auth import Access, Authenticator, check_access
from statistics_ingest.storage.repository import DataPointConflict, SeriesRepository
from statistics_ingest.utils.logger import logger
from statistics_model import (
    MeasurementDistance,
    TimeSeriesDefinition,
    TimeSeriesPoint,
    parse_point,
    parse_points,
)

router = APIRouter(tags=["Ingest"])

T = TypeVar("T")


def require_owner(
    authenticator: Authenticator,
    credentials: Optional[HTTPBasicCredentials],
    owner: str,
) -> None:
    access = check_access(authenticator, credentials, owner)
    if access is Access.UNAUTHORIZED:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Valid credentials required",
            headers={"WWW-Authenticate": "Basic"},
        )
    if access is Access.FORBIDDEN:
        raise HTTPException(
            status_code=HTTPStatus.FORBIDDEN,
            detail=f"Not allowed to ingest into series owned by {owner}",
        )


def _parse_body(parser: Callable[[bytes], T], body: bytes) -> T:
    try:
        return parser(body)
    except ValidationError as e:
        logger.warning(f"Rejected malformed ingest body: {e.error_count()} error(s)")
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=json.loads(e.json(include_url=False)),
        )


@router.post(
    "/{owner}/{series_name}/{distance}",
    status_code=HTTPStatus.CREATED,
    responses={
        200: {"description": "Bulk ingest stored every point"},
        400: {"description": "Malformed point(s)"},
        401: {"description": "Missing or invalid credentials"},
        403: {"description": "Caller is not the owner of the series"},
        409: {"description": "A point with the same timestamp already exists"},
    },
)
def ingest(
    owner: str,
    series_name: str,
    distance: MeasurementDistance,
    bulk: bool = Query(False, description="Body is a JSON array of points"),
    body: bytes = Depends(raw_body),
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    authenticator: Authenticator = Depends(get_authenticator),
    repository: SeriesRepository = Depends(get_repository),
):
    """
    Single ingest answers 201, bulk ingest (`?bulk=true`) answers 200.

    A bulk request is stored all or nothing: one conflicting point rejects
    the whole batch with 409.
    """
    require_owner(authenticator, credentials, owner)

    definition = TimeSeriesDefinition(name=series_name, distance=distance, owner=owner)

    if bulk:
        points = _parse_body(parse_points, body)
        # DataPointConflict is answered with 409 by the app's exception handler
        repository.insert_all_if_absent(definition, points)
        return Response(status_code=HTTPStatus.OK)

    point = _parse_body(parse_point, body)
    if not repository.insert_if_absent(definition, point):
        raise DataPointConflict(definition, [point.timestamp])
    return Response(status_code=HTTPStatus.CREATED)


@router.get(
    "/{owner}/{series_name}/{distance}/last",
    response_model=TimeSeriesPoint,
    responses={204: {"description": "Series is empty or unknown"}},
)
def last(
    owner: str,
    series_name: str,
    distance: MeasurementDistance,
    repository: SeriesRepository = Depends(get_repository),
):
    definition = TimeSeriesDefinition(name=series_name, distance=distance, owner=owner)
    point = repository.latest(definition)
    if point is None:
        return Response(status_code=HTTPStatus.NO_CONTENT)
    return point
