"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
SortField = Literal["published", "date", "title", "duration", "integrity"]


class IndexConfig(BaseModel):
    """Thresholds used when building groupings and year spans."""

    # Tags below this count are pooled into "Misc Tags"
    min_category_threshold: int = Field(default=2, ge=1)
    # Episode count a year span tries to reach before it is closed
    min_year_group_threshold: int = Field(default=5, ge=1)


class GlobalConfig(BaseModel):
    """Global feedindex configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"
    default_sort_by: SortField = "published"
    default_sort_ascending: bool = False

    index: IndexConfig = Field(default_factory=IndexConfig)
