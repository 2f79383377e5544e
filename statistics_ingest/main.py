import uvicorn

from statistics_ingest.api.main import create_app
from statistics_ingest.config.settings import settings
from statistics_ingest.utils.logger import logger

app = create_app()


def main():
    logger.info(f"Starting ingest API on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
