"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from polygen.core.config.loader import ConfigLoader

# Searched in order by Settings.load()
DEFAULT_CONFIG_PATHS = [
    Path("polygen.local.yaml"),
    Path("polygen.yaml"),
    Path.home() / ".polygen" / "config.yaml",
]


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="POLYGEN_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class GeneratorSettings(BaseSettings):
    """Defaults for generation runs, overridable from the environment.

    These stand in for the build tool's user properties: values here are
    applied only where the build configuration leaves a field unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="POLYGEN_GENERATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    skip: bool = Field(
        default=False,
        description="Skip generation entirely",
    )
    encoding: str | None = Field(
        default=None,
        description="Source encoding passed to the engine",
    )
    compiler_source_level: str | None = Field(
        default=None,
        description="Java compiler source level",
    )
    compiler_target_level: str | None = Field(
        default=None,
        description="Java compiler target level",
    )
    fail_on_validation_error: bool = Field(
        default=True,
        description="Fail the build when the engine reports validation errors",
    )
    auto_fill_resource_map: bool = Field(
        default=False,
        description="Register the project, its modules and ancestors in the resource map",
    )
    temp_dir_name: str = Field(
        default="polygen-temp",
        min_length=1,
        description="Temp directory name under the project build directory",
    )
    engine_logger: str | None = Field(
        default=None,
        description="Logger namespace of the engine to route through polygen logging",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="POLYGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        return cls(
            logging=LoggingSettings(**loader.get_section("logging")),
            generator=GeneratorSettings(**loader.get_section("generator")),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: Environment variables > .env > polygen.yaml > defaults

        Returns:
            Settings instance.
        """
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                return cls.from_yaml(default_path)

        # Environment variables and .env are automatically loaded by pydantic-settings
        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
