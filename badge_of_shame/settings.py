from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application Configuration
    LOGGING_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    ENVIRONMENT: Literal["LOCAL", "PROD", "TEST"] = "LOCAL"

    # Upstream APIs
    TRAVIS_API_URL: str = "https://api.travis-ci.org"
    GITHUB_API_URL: str = "https://api.github.com"
    USER_AGENT: str = "Badge Of Shame v1.0"
    GITHUB_TOKEN: Optional[str] = None
    HTTP_TIMEOUT_SECONDS: float = 10

    # Badge cache: "memory" is per process, "database" is shared between workers
    CACHE_BACKEND: Literal["memory", "database"] = "memory"

    # Database Configuration (only used by the database cache backend)
    POSTGRES_DB: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[str] = None
    DATABASE_POOL_SIZE: int = 10
    DATABASE_POOL_SIZE_OVERFLOW: int = 20

    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+asyncpg://"
            f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
