"""
Application settings.

Sources, highest priority first: init kwargs, process environment, local
``.env`` file (see ``app.core.env_file``). A value set in the environment is
never replaced by the file, even when empty.
"""

from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from app.core.env_file import read_env_file

CONNECTION_STRING_VAR = "DATABASE_URL"


class ConfigurationError(RuntimeError):
    """Fatal startup misconfiguration; the service must not serve traffic."""


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class EnvOverrideFileSettingsSource(PydanticBaseSettingsSource):
    """Lowest-priority layer: values from the local override file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._values = read_env_file()

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is None:
                continue
            if self.field_is_complex(field):
                # Same as the environment layer: JSON first, plain string
                # (e.g. comma-separated origins) when it is not JSON.
                try:
                    value = self.decode_complex_value(field_name, field, value)
                except ValueError:
                    pass
            data[key] = value
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    PROJECT_NAME: str = "db-health-service"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Postgres connection string (URI form). Required; see require_connection_string().
    DATABASE_URL: str | None = None
    DB_CONNECT_TIMEOUT: int = 10  # seconds, passed to the driver

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            EnvOverrideFileSettingsSource(settings_cls),
        )


def require_connection_string(settings: Settings) -> str:
    """Return DATABASE_URL or raise ConfigurationError when it is missing or blank."""
    url = settings.DATABASE_URL
    if url is None or not url.strip():
        raise ConfigurationError(
            f"{CONNECTION_STRING_VAR} must be set. For Supabase, copy the connection "
            "string from your Supabase Dashboard → Settings → Database → "
            "Connection String (URI format)."
        )
    return url


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
