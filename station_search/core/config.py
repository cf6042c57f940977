"""
Configuration management for the station search engine
"""
import json
import os
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from station_search.core.exceptions import ConfigurationError
from station_search.core.models import DEFAULT_FIELDS, SearchField


class SearchConfig(BaseModel):
    """Configuration for search operations"""
    fuzzy_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    max_candidates: int = Field(default=100, ge=1)
    min_match_length: int = Field(default=2, ge=1)
    field_weights: Dict[str, float] = Field(default_factory=lambda: {
        "name": 0.4,
        "alt_name": 0.3,
        "country": 0.2,
        "country_code": 0.1,
    })
    phonetic_score: float = Field(default=0.5, ge=0.0, le=1.0)
    phonetic_min_word_length: int = Field(default=3, ge=1)
    max_results: int = Field(default=50, ge=0)
    max_suggestions: int = Field(default=10, ge=0)
    min_suggestion_length: int = Field(default=2, ge=1)
    default_fields: List[str] = Field(default_factory=lambda: [f.value for f in DEFAULT_FIELDS])

    @field_validator("field_weights")
    @classmethod
    def _check_weights(cls, weights: Dict[str, float]) -> Dict[str, float]:
        if not weights:
            raise ValueError("at least one fuzzy field weight is required")
        for name, weight in weights.items():
            if name not in SearchField._value2member_map_:
                raise ValueError(f"unknown search field '{name}'")
            if weight <= 0:
                raise ValueError(f"weight for '{name}' must be positive")
        return weights


class LoggingConfig(BaseModel):
    """Logging settings"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config(BaseModel):
    """Main configuration class"""
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from STATION_SEARCH_* environment variables"""
        search = {}
        numeric = {
            "fuzzy_threshold": ("STATION_SEARCH_FUZZY_THRESHOLD", float),
            "max_candidates": ("STATION_SEARCH_MAX_CANDIDATES", int),
            "max_results": ("STATION_SEARCH_MAX_RESULTS", int),
            "max_suggestions": ("STATION_SEARCH_MAX_SUGGESTIONS", int),
        }
        for key, (env_name, cast) in numeric.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            try:
                search[key] = cast(raw)
            except ValueError:
                raise ConfigurationError(f"{env_name} must be a number, got '{raw}'")

        try:
            return cls(
                search=SearchConfig(**search),
                logging=LoggingConfig(
                    level=os.getenv("STATION_SEARCH_LOG_LEVEL", "INFO"),
                    file=os.getenv("STATION_SEARCH_LOG_FILE") or None,
                ),
            )
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def load_from_file(cls, file_path: str) -> "Config":
        """Load configuration from JSON file"""
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
            return cls(**data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigurationError(f"Cannot load configuration from {file_path}: {e}") from e

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(self.model_dump(), f, indent=2)
