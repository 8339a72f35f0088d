"""Runtime configuration for MC Builder."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mc_builder.adapters import parse_hostport


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="MC_BUILDER_", env_file=".env", extra="ignore", populate_by_name=True)

    app_name: str = "mc-builder"
    log_level: str = "INFO"
    rcon_hostport: str = Field(
        default="127.0.0.1:25575",
        validation_alias=AliasChoices("MC_BUILDER_RCON_HOSTPORT", "RCON_HOSTPORT"),
        description="host:port of the Minecraft server RCON listener.",
    )
    rcon_password: str = Field(
        default="",
        validation_alias=AliasChoices("MC_BUILDER_RCON_PASSWORD", "RCON_PASSWORD"),
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("MC_BUILDER_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str | None = None
    openai_timeout_seconds: float = 60.0
    command_timeout_seconds: float = 5.0
    request_timeout_seconds: float = 120.0
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    @property
    def rcon_host(self) -> str:
        return parse_hostport(self.rcon_hostport)[0]

    @property
    def rcon_port(self) -> int:
        return parse_hostport(self.rcon_hostport)[1]


settings = Settings()
