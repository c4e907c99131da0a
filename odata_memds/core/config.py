from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Package scanned for classes decorated with @entity_set
    entity_package: str = Field(default="odata_memds.sample", alias="ENTITY_PACKAGE")

    api_prefix: str = Field(default="/odata", alias="API_PREFIX")

    # Populate the sample model on startup (only meaningful for odata_memds.sample)
    seed_sample_data: bool = Field(default=True, alias="SEED_SAMPLE_DATA")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("api_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, v: str | None) -> str:
        """Strip trailing slashes; an empty prefix mounts the service at the root."""
        if not v:
            return ""
        v = v.rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str | None) -> str:
        if not v:
            return "INFO"
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
