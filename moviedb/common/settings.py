# moviedb/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class StorageConfig(BaseModel):
    backend: Literal["memory", "file", "sqlalchemy"] = "file"
    data_root: Path = Path(".moviedb")

    # one stored value per collection under these keys
    person_key: str = "person"
    movie_key: str = "movies"

    # Optional single URL for the sqlalchemy backend (if unset, a SQLite file under data_root)
    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url", "url"),
    )
    echo: bool = False

    # Byte budget for the memory backend; 0 disables the check
    memory_quota_bytes: int = Field(0, ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        if self.url:
            return self.url
        return f"sqlite:///{self.data_root / 'moviedb.sqlite3'}"


class ValidationConfig(BaseModel):
    # release date is optional unless this is set
    release_date_required: bool = False
    allow_self_agent: bool = False

    @field_validator("release_date_required", "allow_self_agent", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "moviedb"
    app_env: str = "development"  # development|test|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    storage: StorageConfig = StorageConfig()
    validation: ValidationConfig = ValidationConfig()

    model_config = SettingsConfigDict(
        env_prefix="MOVIEDB_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from moviedb.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()
