"""
Station Search

A multi-strategy search engine for facility records: exact, substring,
fuzzy and phonetic matching with explainable, ranked results and
autocomplete suggestions.
"""

__version__ = "0.1.0"
__author__ = "Michelle Liu"

from .core.config import Config, SearchConfig
from .core.exceptions import ConfigurationError, InvalidSearchArgumentsError, SearchError
from .core.models import (
    MatchSpan,
    MultiSearchOptions,
    Record,
    SearchField,
    SearchFilters,
    SearchResult,
    SearchStrategy,
)
from .search.engine import SearchEngine
from .search.phonetic import phonetic_code, sounds_like
from .search.suggestions import suggest

__all__ = [
    "Config",
    "SearchConfig",
    "SearchError",
    "InvalidSearchArgumentsError",
    "ConfigurationError",
    "MatchSpan",
    "MultiSearchOptions",
    "Record",
    "SearchField",
    "SearchFilters",
    "SearchResult",
    "SearchStrategy",
    "SearchEngine",
    "phonetic_code",
    "sounds_like",
    "suggest",
]
