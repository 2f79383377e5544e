from sqlalchemy.engine import Engine

from statistics_ingest.db.models import Base
from statistics_ingest.utils.logger import logger

def init_database(engine: Engine | None = None):
    if engine is None:
        from statistics_ingest.db.connection import engine
    logger.info("Creating database tables if not exist...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready.")

if __name__ == "__main__":
    init_database()
