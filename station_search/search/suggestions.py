"""
Autocomplete suggestions drawn from record field values
"""
import unicodedata
from typing import List, Sequence, Tuple

from station_search.core.models import Record, SearchField, field_value
from station_search.utils.logger import get_logger

logger = get_logger(__name__)

SUGGESTION_FIELDS = (SearchField.NAME, SearchField.ALT_NAME, SearchField.COUNTRY)


def collation_key(value: str) -> Tuple[str, str]:
    """
    Sort key approximating locale-aware alphabetical order

    Accents and case are ignored at the first level ("Évian" sorts next to
    "Evian"); the exact string breaks ties so ordering is deterministic.
    """
    decomposed = unicodedata.normalize('NFKD', value)
    base = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value


def suggest(
    records: Sequence[Record],
    query: str,
    max_suggestions: int = 10,
    min_length: int = 2
) -> List[str]:
    """
    Get autocomplete suggestions for a partially typed query

    Filters (country, obsolete) deliberately do not apply here.

    Args:
        records: Records to draw vocabulary from
        query: Text typed so far
        max_suggestions: Maximum number of suggestions
        min_length: Shortest trimmed query that produces suggestions

    Returns:
        Distinct field values containing the query, prefix matches first,
        each group in alphabetical order
    """
    needle = (query or "").strip().lower()
    if len(needle) < min_length or not records or max_suggestions <= 0:
        return []

    suggestions = set()
    for record in records:
        for field in SUGGESTION_FIELDS:
            value = field_value(record, field)
            if value is not None and needle in value.lower():
                suggestions.add(value)

    ordered = sorted(
        suggestions,
        key=lambda value: (not value.lower().startswith(needle), collation_key(value)),
    )

    logger.debug(f"Suggestions for '{needle}': {len(ordered)} candidates")
    return ordered[:max_suggestions]
