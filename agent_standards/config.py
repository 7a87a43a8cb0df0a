from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized settings for profile discovery and resolution.

    Every field can be overridden from the environment with the
    ``AGENT_STANDARDS_`` prefix, e.g. ``AGENT_STANDARDS_PROFILES_ROOT``.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENT_STANDARDS_", env_file=".env", case_sensitive=False
    )

    app_name: str = "Agent Standards"
    profiles_root: Path = Field(Path("profiles"))
    standards_dir: str = "standards"
    config_filename: str = "profile-config.yml"
    document_suffix: str = ".md"
    encoding: str = "utf-8"
    default_profile: str = "default"
    max_inheritance_depth: int = Field(32, ge=1)
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @field_validator("document_suffix")
    @classmethod
    def ensure_dot(cls, v: str) -> str:
        if not v.startswith("."):
            return f".{v}"
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
