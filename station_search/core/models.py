"""
Data model for the station search engine
"""
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """A searchable facility entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    alt_name: Optional[str] = None
    country: str = ""
    country_code: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    obsolete: bool = False

    @field_validator("alt_name", mode="before")
    @classmethod
    def _blank_alt_name(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_coordinates(self) -> bool:
        """0,0 is the "no coordinates" sentinel"""
        return not (self.latitude == 0 and self.longitude == 0)


class SearchField(str, Enum):
    """Closed allow-list of record fields that may be searched"""

    NAME = "name"
    ALT_NAME = "alt_name"
    COUNTRY = "country"
    CODE = "code"
    COUNTRY_CODE = "country_code"


FIELD_ACCESSORS: Dict[SearchField, Callable[[Record], Optional[str]]] = {
    SearchField.NAME: lambda record: record.name,
    SearchField.ALT_NAME: lambda record: record.alt_name,
    SearchField.COUNTRY: lambda record: record.country,
    SearchField.CODE: lambda record: record.code,
    SearchField.COUNTRY_CODE: lambda record: record.country_code,
}

DEFAULT_FIELDS: Tuple[SearchField, ...] = (
    SearchField.NAME,
    SearchField.ALT_NAME,
    SearchField.COUNTRY,
)


def field_value(record: Record, field: SearchField) -> Optional[str]:
    """Return the string value of ``field`` or None when it is absent or empty"""
    value = FIELD_ACCESSORS[field](record)
    if not isinstance(value, str) or not value:
        return None
    return value


def resolve_fields(
    fields: Optional[Iterable[Union[str, SearchField]]],
    default: Optional[Iterable[Union[str, SearchField]]] = None
) -> List[SearchField]:
    """
    Intersect requested field names with the allow-list

    Unknown names are dropped silently and duplicates collapse, keeping the
    first occurrence. An empty result falls back to ``default`` (itself
    resolved the same way) or DEFAULT_FIELDS.
    """
    resolved: List[SearchField] = []
    for name in fields or ():
        try:
            field = SearchField(name)
        except ValueError:
            continue
        if field not in resolved:
            resolved.append(field)
    if resolved:
        return resolved
    if default is not None:
        return resolve_fields(default)
    return list(DEFAULT_FIELDS)


class SearchStrategy(str, Enum):
    """Matching algorithm selected by the caller"""

    EXACT = "exact"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"
    PHONETIC = "phonetic"

    @classmethod
    def lookup(cls, value: Union[str, "SearchStrategy", None]) -> Optional["SearchStrategy"]:
        """Map a strategy name or alias to a strategy, None if unknown"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _STRATEGY_ALIASES.get(key, key)
            if key in cls._value2member_map_:
                return cls(key)
        return None

    @classmethod
    def resolve(cls, value: Union[str, "SearchStrategy", None]) -> "SearchStrategy":
        """Like lookup, but unknown values mean substring"""
        return cls.lookup(value) or cls.SUBSTRING


_STRATEGY_ALIASES = {
    "partial": "substring",
    "contains": "substring",
    "soundex": "phonetic",
}

NO_COUNTRY_FILTER = "all"


class SearchFilters(BaseModel):
    """Query text plus the non-text filters applied before matching"""

    query: str = ""
    strategy: Union[SearchStrategy, str] = SearchStrategy.SUBSTRING
    fields: List[str] = Field(default_factory=lambda: [f.value for f in DEFAULT_FIELDS])
    country_filter: Optional[str] = NO_COUNTRY_FILTER
    include_obsolete: bool = False

    @field_validator("query", mode="before")
    @classmethod
    def _none_query(cls, value):
        return "" if value is None else value

    @property
    def has_country_filter(self) -> bool:
        return bool(self.country_filter) and self.country_filter != NO_COUNTRY_FILTER


class MatchSpan(BaseModel):
    """Where in a field a match occurred; offsets are inclusive"""

    model_config = ConfigDict(frozen=True)

    field: str
    value: str
    start: int
    end: int


class SearchResult(BaseModel):
    """A record with its score (lower is better) and match spans"""

    record: Record
    score: Optional[float] = None
    matches: List[MatchSpan] = Field(default_factory=list)

    @property
    def code(self) -> str:
        return self.record.code


class MultiSearchOptions(BaseModel):
    """Options for running several matchers and merging their results"""

    threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    max_results: int = Field(default=50, ge=0)
    fields: List[str] = Field(default_factory=lambda: [f.value for f in DEFAULT_FIELDS])
