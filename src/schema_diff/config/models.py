"""Pydantic models for catalog profiles and comparison settings."""

from typing import Literal

from pydantic import BaseModel, Field

from schema_diff.schema.models import (
    DEFAULT_OBJECT_TYPES,
    DEFAULT_PATTERN,
    ColumnStrategy,
    CompareOptions,
    DiffMode,
)

Provider = Literal["oracle", "postgres"]


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Catalog connection profile from db.toml.

    ``provider`` is inferred from the URL scheme when omitted.
    """

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: Provider | None = None


class CompareSettings(BaseModel):
    """``[compare]`` table of db.toml.

    Example:
        >>> settings = CompareSettings(mode="text")
        >>> settings.to_options().mode
        'text'
    """

    object_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_OBJECT_TYPES), min_length=1
    )
    pattern: str = DEFAULT_PATTERN
    mode: DiffMode = "statement"
    column_strategy: ColumnStrategy = "on_demand"
    max_concurrency: int = Field(default=8, ge=1)
    timeout: float = Field(default=60, gt=0)

    def to_options(self) -> CompareOptions:
        """Engine options for these settings (everything except ``timeout``)."""
        return CompareOptions(
            object_types=self.object_types,
            pattern=self.pattern,
            mode=self.mode,
            column_strategy=self.column_strategy,
            max_concurrency=self.max_concurrency,
        )


class DiffConfig(BaseModel):
    """Complete configuration from db.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    compare: CompareSettings = Field(default_factory=CompareSettings)
