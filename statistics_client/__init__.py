# ingest client - talks to the ingest service over HTTP

from statistics_client.client import IngestClient, basic_auth_header
from statistics_client.errors import (
    ConnectFailed,
    DataPointAlreadyExists,
    Failed,
    IngestError,
    MalformedUrl,
    NotFound,
    Unauthorized,
)

__all__ = [
    "IngestClient",
    "basic_auth_header",
    "ConnectFailed",
    "DataPointAlreadyExists",
    "Failed",
    "IngestError",
    "MalformedUrl",
    "NotFound",
    "Unauthorized",
]
