"""Pydantic models for nda-search configuration."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from nda_search.config.defaults import DEFAULT_BASE_URL, DEFAULT_SEARCH_URL


class OutputFormat(str, Enum):
    """Supported output formats."""

    RICH = "rich"
    PLAIN = "plain"
    JSON = "json"
    JSONL = "jsonl"


class ServiceConfig(BaseModel):
    """Data dictionary service configuration."""

    base_url: str = DEFAULT_BASE_URL
    search_url: str = DEFAULT_SEARCH_URL
    timeout: float = Field(default=30.0, gt=0)


class SearchConfig(BaseModel):
    """Fuzzy search configuration."""

    batch_size: int = Field(default=25, ge=1)
    batch_pause_seconds: float = Field(default=0.1, ge=0)
    supplementary_categories: list[str] = Field(default_factory=list)
    max_cached_elements: int = Field(default=1000, ge=1)
    full_text_size: int = Field(default=10000, ge=1)
    max_results: int = Field(default=50, ge=1)


class HistoryConfig(BaseModel):
    """Recent search history configuration."""

    enabled: bool = True
    max_entries: int = Field(default=10, ge=1)
    path: Path | None = None  # Default: ~/.cache/nda-search/history.duckdb


class OutputConfig(BaseModel):
    """Output configuration."""

    default_format: OutputFormat = OutputFormat.RICH
    color: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file: Path | None = None  # Default: no file logging
    json_format: bool = False


class NDASearchConfig(BaseModel):
    """Root configuration for nda-search."""

    model_config = ConfigDict(use_enum_values=True)

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
