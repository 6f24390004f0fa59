from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """
    App configuration.

    Values come from the environment first, then `config.env` / `.env` in the
    repository root or the current directory.
    """

    model_config = SettingsConfigDict(
        env_file=(
            str(_PROJECT_ROOT / "config.env"),
            str(_PROJECT_ROOT / ".env"),
            "config.env",
            ".env",
        ),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_user: str = Field(default="marketplace", validation_alias="DB_USER")
    db_password: str = Field(default="marketplace", validation_alias="DB_PASSWORD")
    db_name: str = Field(default="marketplace", validation_alias="DB_NAME")
    # Full SQLAlchemy URL, wins over the DB_* parts when set
    database_url_override: str | None = Field(default=None, validation_alias="DATABASE_URL")

    secret_key: str = Field(default="CHANGE_THIS_IN_PRODUCTION", validation_alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", validation_alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    cors_origins: str = Field(
        default="http://localhost:4200",
        validation_alias="CORS_ORIGINS"
    )

    # Empty string disables order event publishing
    redis_url: str = Field(default="", validation_alias="REDIS_URL")

    order_isolation_level: str = Field(default="REPEATABLE READ", validation_alias="ORDER_ISOLATION_LEVEL")
    tx_max_attempts: int = Field(default=3, validation_alias="TX_MAX_ATTEMPTS")
    tx_retry_backoff: float = Field(default=0.05, validation_alias="TX_RETRY_BACKOFF")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        # psycopg (v3) driver
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def cors_origins_list(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_origins.split(",")
            if origin.strip()
        ]


settings = Settings()
