import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.PROJECT_NAME = "PR Review Sync"
        self.PROJECT_VERSION = "1.0.0"

        # Database
        self.POSTGRES_USER = os.getenv("POSTGRES_USER")
        self.POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
        self.POSTGRES_DB = os.getenv("POSTGRES_DB")
        self.POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
        self.POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

        self.DATABASE_URL = os.getenv("DATABASE_URL") or (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
        self.DATABASE_ECHO = _as_bool(os.getenv("DATABASE_ECHO"))

        # GitHub webhooks
        self.GITHUB_WEBHOOK_SECRET = self._load_secret(
            os.getenv("GITHUB_WEBHOOK_SECRET")
        )

        # Operator tokens
        self.JWT_SECRET_KEY = self._load_secret(os.getenv("JWT_SECRET_KEY"))
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()

    @staticmethod
    def _load_secret(value: str | None) -> str | None:
        """Return the contents of *value* if it is a path to a file.

        Secrets may be given either inline in the environment or as a path to
        a mounted file.  When a readable file exists at *value* its stripped
        contents are returned, otherwise the raw value is used as is.
        """
        if value and os.path.isfile(value):
            try:
                with open(value, "r", encoding="utf-8") as fh:
                    return fh.read().strip()
            except OSError:
                pass
        return value


settings = Settings()
