"""Application settings loaded from environment variables."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _is_truthy(value: str | None) -> bool:
    return bool(value and value.strip().lower() in TRUTHY_VALUES)


class Settings(BaseSettings):
    """Runtime configuration for the Rubric Score backend."""

    model_config = SettingsConfigDict(env_prefix="RUBRICSCORE_", extra="ignore")

    app_name: str = "Rubric Score API"

    # Model invocation
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("RUBRICSCORE_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    structure_model: str = Field(
        default="",
        validation_alias=AliasChoices("RUBRICSCORE_STRUCTURE_MODEL", "STRUCTURE_MODEL"),
    )
    evaluation_model: str = Field(
        default="",
        validation_alias=AliasChoices("RUBRICSCORE_EVALUATION_MODEL", "EVALUATION_MODEL"),
    )
    openai_timeout_seconds: float = 60.0
    openai_mock: bool = Field(
        default=False,
        validation_alias=AliasChoices("RUBRICSCORE_OPENAI_MOCK", "OPENAI_MOCK"),
    )

    max_upload_mb: int = 5

    # CORS configuration
    cors_allow_origins: str = Field(
        default="*",
        validation_alias=AliasChoices("RUBRICSCORE_CORS_ALLOW_ORIGINS", "CORS_ALLOW_ORIGINS"),
    )

    @field_validator("openai_mock", mode="before")
    @classmethod
    def _parse_mock_flag(cls, value: object) -> bool:
        if isinstance(value, bool):
            return value
        return _is_truthy(str(value) if value is not None else None)

    @field_validator("openai_api_key", "structure_model", "evaluation_model", mode="after")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key.strip())

    @property
    def cors_origin_list(self) -> list[str]:
        if self.cors_allow_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


settings = Settings()
