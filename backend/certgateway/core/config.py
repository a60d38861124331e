from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "https://capacitacionsn.cruzrojamexicana.org.mx",
    "https://capacitacion.cruzrojamexicana.org.mx",
]

# MySQL codes meaning "this physical connection is unusable" (see core.pool.classify)
DEFAULT_TRANSIENT_ERROR_CODES = [2002, 2003, 2006, 2013, 2055, 4031]


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


def parse_int_list(v: Any) -> list[int] | str:
    if isinstance(v, int):
        return [v]
    if isinstance(v, str) and not v.startswith("["):
        return [int(i) for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "certgateway"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: str | None = None
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 5000
    API_KEY: str = "supersecreto"

    CORS_ALLOWED_ORIGINS: Annotated[
        list[str] | str, BeforeValidator(parse_cors)
    ] = DEFAULT_CORS_ORIGINS

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = ""

    DB_POOL_SIZE: int = 10
    DB_CONNECT_TIMEOUT: int = 10
    # Bounds a query on a half-dead socket; a timeout surfaces as error 2013.
    DB_READ_TIMEOUT: float = 30
    DB_WRITE_TIMEOUT: float = 30
    DB_SESSION_TIMEOUT: int = 28800  # 8 hours
    DB_TCP_KEEPALIVE: bool = True
    DB_KEEPALIVE_INTERVAL_SECONDS: float = 240  # 0 disables the probe
    DB_POOL_CLOSE_TIMEOUT: float = 5

    DB_TRANSIENT_ERROR_CODES: Annotated[
        list[int] | str, BeforeValidator(parse_int_list)
    ] = DEFAULT_TRANSIENT_ERROR_CODES

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.CORS_ALLOWED_ORIGINS]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def transient_error_codes(self) -> frozenset[int]:
        return frozenset(int(c) for c in self.DB_TRANSIENT_ERROR_CODES)


settings = Settings()  # type: ignore
