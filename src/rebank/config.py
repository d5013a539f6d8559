import os
from dataclasses import dataclass

from dotenv import load_dotenv
from psycopg.conninfo import make_conninfo

# Load the appropriate .env file on module import
env = os.environ.get("REBANK_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


def build_database_url(environ=None) -> str:
    """
    Compose a libpq connection string from the DB_* variables.

    DATABASE_URL takes precedence when set.
    """
    environ = os.environ if environ is None else environ
    if environ.get("DATABASE_URL"):
        return environ["DATABASE_URL"]

    return make_conninfo(
        host=environ.get("DB_HOST", "localhost"),
        port=environ.get("DB_PORT", "5432"),
        user=environ.get("DB_USER", "postgres"),
        password=environ.get("DB_PASSWORD", ""),
        dbname=environ.get("DB_NAME", "rebank"),
        sslmode=environ.get("DB_SSLMODE", "disable"),
    )


@dataclass
class Config:
    environment: str
    database_url: str
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=env,
            database_url=build_database_url(),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


config = Config.from_env()
