from dotenv import load_dotenv
import os
from sqlalchemy.engine import URL


load_dotenv()

class Settings:
    DB_HOST = os.getenv("POSTGRES_HOST")
    DB_PORT = int(os.getenv("POSTGRES_PORT", 5432))
    DB_NAME = os.getenv("POSTGRES_DB")
    DB_USER = os.getenv("POSTGRES_USER")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD")

    # Full SQLAlchemy URL, wins over the POSTGRES_* settings (e.g. sqlite:///ingest.db)
    DATABASE_URL = os.getenv("DATABASE_URL")

    AUTHENTICATION_URL = os.getenv(
        "AUTHENTICATION_URL", "http://authenticate:8080/authentications"
    )
    AUTHENTICATION_TIMEOUT = float(os.getenv("AUTHENTICATION_TIMEOUT", 5))
    # "user:secret,user2:secret2": switches to the in-memory authenticator
    STATIC_USERS = os.getenv("STATIC_USERS", "")

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 8080))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")

    @property
    def database_url(self) -> str | URL:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            drivername="postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    @property
    def static_users(self) -> dict[str, str]:
        users = {}
        for entry in self.STATIC_USERS.split(","):
            entry = entry.strip()
            if not entry:
                continue
            identity, sep, secret = entry.partition(":")
            if not sep or not identity:
                raise ValueError(f"Invalid STATIC_USERS entry: {entry!r}")
            users[identity] = secret
        return users

settings = Settings()
