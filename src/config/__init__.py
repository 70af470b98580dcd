"""
Configuration package for zeta

Provides application settings via environment variables and Zeta.toml using pydantic-settings.
"""

from .settings import appsettings, AppSettings

__all__ = ["appsettings", "AppSettings"]
