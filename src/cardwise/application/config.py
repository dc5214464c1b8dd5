from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cardwise.domain.constants import (
    INITIAL_DIFFICULTY,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    WEEKLY_WINDOW_DAYS,
)

DEFAULT_DATA_FILE = "study.yaml"


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/cardwise/config.toml",
        Path.home() / ".cardwise.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for cardwise.
    Supports loading from:
    1. Environment variables (CARDWISE_*)
    2. Config file (~/.config/cardwise/config.toml or ~/.cardwise.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDWISE_",
        extra="ignore",
    )

    # Paths
    data_file: Path | None = None
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/cardwise/logs")

    # Storage
    backend: Literal["auto", "yaml", "json"] = "auto"

    # Scheduling
    initial_difficulty: float = INITIAL_DIFFICULTY

    # Analytics
    weekly_window_days: int = Field(default=WEEKLY_WINDOW_DAYS, ge=1)

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins; CLI overrides beat env, env beats the file
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_file", mode="before")
    @classmethod
    def resolve_data_file(cls, v: Any) -> Path | None:
        if v is None or v == "":
            return None
        return Path(v).expanduser().resolve()

    @field_validator("initial_difficulty")
    @classmethod
    def clamp_initial_difficulty(cls, v: float) -> float:
        return min(max(MIN_DIFFICULTY, v), MAX_DIFFICULTY)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. TOML config file (if exists)
    3. Environment variables (CARDWISE_*)
    4. cli_overrides (passed from Typer or the HTTP API); None values are ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.data_file is None:
        config.data_file = Path.cwd() / DEFAULT_DATA_FILE

    return config
