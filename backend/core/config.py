import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return "postgresql+asyncpg://{}:{}@{}/{}".format(
        os.getenv("DB_USER", "user"),
        os.getenv("DB_PASSWORD", "password"),
        os.getenv("DB_HOST", "localhost"),
        os.getenv("DB_NAME", "stationdb"),
    )


class Settings:
    database_url: str = _database_url()
    database_echo: bool = _flag("DATABASE_ECHO")
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "10"))  # seconds

    # Single shared password, stored as an argon2 hash
    login_password_hash: str = os.getenv("LOGIN_PASSWORD", "")
    session_secret: str = os.getenv("SESSION_SECRET", "change-me")
    session_cookie: str = "station_session"
    session_max_age: int = 60 * 60 * 24 * 7
    allow_unsecure_cookie: bool = _flag("ALLOW_UNSECURE_COOKIE")

    host: str = os.getenv("HOST", "0.0.0.0:8000")
    log_plain: bool = os.getenv("LOG_PLAIN") is not None
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def masked_database_url(self) -> str:
        scheme, sep, rest = self.database_url.partition("://")
        if not sep or "@" not in rest:
            return self.database_url
        return f"{scheme}://xxx:xxx@{rest.rsplit('@', 1)[1]}"

    @property
    def bind_host(self) -> str:
        return self.host.rsplit(":", 1)[0] if ":" in self.host else self.host

    @property
    def bind_port(self) -> int:
        if ":" not in self.host:
            return 8000
        return int(self.host.rsplit(":", 1)[1])


settings = Settings()
