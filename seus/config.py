from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    ENVIRONMENT: str = "development"

    DOMAIN: str = "localhost"
    HTTP_PORT: int = 8080
    HTTPS_PORT: int = 8443
    SSL_CERTFILE: Optional[str] = None
    SSL_KEYFILE: Optional[str] = None

    CODE_LENGTH: int = 6
    MAX_GENERATION_ATTEMPTS: int = 10
    STORE_TIMEOUT_SECONDS: float = 10.0
    DB_POOL_SIZE: int = 5
    CREATE_TABLES: bool = True

    # Resolve cache is disabled when unset
    REDIS_URL: Optional[str] = None
    CACHE_TTL_SECONDS: int = 86400

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"
