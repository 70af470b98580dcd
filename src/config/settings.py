"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ZETA_ prefix (e.g., ZETA_REPOSITORY=user/repo).

Settings are also loaded from a .env file and from the project settings
file Zeta.toml in the current directory.
"""

from typing import Optional, Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables and Zeta.toml.

    Precedence: constructor arguments > ZETA_* environment > .env > Zeta.toml

    Examples:
        ZETA_REPOSITORY=octocat/articles
        ZETA_DEFAULT_BRANCH=main
        ZETA_MAX_DEPTH=16
    """

    model_config = SettingsConfigDict(
        env_prefix="ZETA_",
        env_file=".env",
        env_file_encoding="utf-8",
        toml_file="Zeta.toml",
        case_sensitive=False,
        extra="ignore",
    )

    # Image resolution
    repository: str = Field(
        default="",
        description="GitHub repository (User/Repo) hosting the images directory",
    )

    default_branch: Optional[str] = Field(
        default=None,
        description="Branch used for image URLs; looked up with git when unset",
    )

    image_prefix: str = Field(
        default="/images",
        description="Local image path prefix rewritten to a remote URL for Qiita",
    )

    raw_content_host: str = Field(
        default="https://raw.githubusercontent.com",
        description="Host serving raw repository files",
    )

    # Compilation configuration
    inline_footnote_prefix: str = Field(
        default="zeta",
        description="Prefix of the synthetic identifiers given to Qiita inline footnotes",
    )

    max_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum nesting of blocks and macros before a document is rejected",
    )

    # Output configuration
    qiita_dir: str = Field(
        default="public",
        description="Output directory (relative to outputdir) for Qiita articles",
    )

    zenn_dir: str = Field(
        default="articles",
        description="Output directory (relative to outputdir) for Zenn articles",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def inlineFootnote_name(self, index: int) -> str:
        """
        Generate the identifier of the index-th inline footnote.

        Args:
            index: One-based footnote counter

        Returns:
            Footnote identifier (e.g., "zeta.inline.1")

        Example:
            >>> settings = AppSettings()
            >>> settings.inlineFootnote_name(2)
            'zeta.inline.2'
        """
        return f"{self.inline_footnote_prefix}.inline.{index}"


# Singleton instance - import this in your code
appsettings = AppSettings()
