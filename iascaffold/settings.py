"""Environment-driven settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.parsers import parse_file_mode


class ScaffoldSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="IASCAFFOLD_", case_sensitive=False)

    template_directory: Path = Path("templates")
    catalog_path: Path = Path("templates/templates.yml")
    file_mode: int = 0o644

    @field_validator("file_mode", mode="before")
    @classmethod
    def _parse_file_mode(cls, value: Any) -> Any:
        """Read string modes as octal, e.g. ``IASCAFFOLD_FILE_MODE=0640``."""
        return parse_file_mode(value)


@lru_cache(maxsize=1)
def get_settings() -> ScaffoldSettings:
    return ScaffoldSettings()
