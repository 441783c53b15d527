from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"

    # Token signing key (Env Var - Required to start app). Never log it.
    JWT_SECRET: SecretStr
    # Unset keeps tokens valid forever, as issued-at is otherwise informational
    TOKEN_TTL_SECONDS: Optional[int] = None

    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./shortlink.db"

    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 86400

    CODE_MAX_ATTEMPTS: int = 32
    BCRYPT_ROUNDS: int = 10
    RESOLVE_STATUS_CODE: int = 301

    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
