"""
Configuration settings for the media gallery.

This module provides a settings class for the gallery service, with support for
loading configuration from TOML files and environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class Settings(BaseSettings):
    """Main settings class for the media gallery.

    This class handles loading configuration from TOML files and environment variables,
    with support for custom settings sources.
    """

    model_config = SettingsConfigDict(
        toml_file=["settings.toml", "settings.custom.toml"],
        env_prefix="MEDIAGALLERY_",
        extra="ignore",
    )

    # Server settings
    port: int = 3000
    host: str = "0.0.0.0"
    root_url: str = "/"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Media settings
    media_root: str = str(Path.home() / "Pictures")
    thumbnail_dir_name: str = ".thumbnails"
    placeholder_image: str | None = None
    tag_file: str | None = None  # JSON mapping filename -> [tags]

    # Cache settings
    cache_ttl_seconds: float = 300.0
    background_refresh: bool = False
    refresh_interval_seconds: float = 240.0

    # Listing settings
    default_page_size: int = 20
    max_page_size: int = 1000

    # Streaming settings
    stream_chunk_size: int = 64 * 1024

    # Logging settings
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str | None = None  # If None, will use ./logs
    log_rotation: str = "20 MB"
    log_retention: str = "1 week"
    log_format: str | None = None  # Use default if None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources for settings.

        Priority order: explicit init arguments, environment variables, then TOML config files
        """
        return init_settings, env_settings, TomlConfigSettingsSource(settings_cls)

    @property
    def media_root_path(self) -> Path:
        """Resolved media directory."""
        return Path(self.media_root).expanduser()

    @property
    def tag_file_path(self) -> Path | None:
        """Path to the optional precomputed tag file."""
        if self.tag_file:
            return Path(self.tag_file).expanduser()
        return None

    @property
    def placeholder_image_path(self) -> Path | None:
        """Image served for videos without a pre-generated poster."""
        if self.placeholder_image:
            return Path(self.placeholder_image).expanduser()
        return None

    @property
    def thumbnail_dir(self) -> Path:
        """Directory holding pre-generated thumbnails and video posters."""
        return self.media_root_path / self.thumbnail_dir_name

    def get_log_dir(self) -> Path:
        """Get the log directory path.

        Returns:
            Path to the log directory. Uses log_dir if specified,
            otherwise a logs directory in the current working directory.
        """
        if self.log_dir:
            return Path(self.log_dir)
        return Path.cwd() / "logs"


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance, with caching.

    Returns:
        Cached Settings instance
    """
    return Settings()


# Create a global settings instance for easy imports
settings = get_settings()
