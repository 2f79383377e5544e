from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url

from statistics_ingest.config.settings import settings


def build_engine(url: str | URL, **kwargs) -> Engine:
    # sqlite pools reject the sizing arguments
    if make_url(url).get_backend_name() == "sqlite":
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        **kwargs,
    )


engine = build_engine(settings.database_url)
