"""
Utility functions for the station search engine
"""
import hashlib
import time
from typing import Any, Callable, Iterable, List, Tuple, TypeVar

from station_search.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def fingerprint(records: Iterable[Any], algorithm: str = 'sha1') -> str:
    """
    Calculate a dataset fingerprint from the ordered record codes

    Args:
        records: Records exposing a ``code`` attribute
        algorithm: Hashing algorithm ('md5', 'sha1', 'sha256')

    Returns:
        Hexadecimal hash string; changes when a code is added, removed,
        renamed or reordered
    """
    hash_func = getattr(hashlib, algorithm)()
    for record in records:
        hash_func.update(record.code.encode('utf-8'))
        hash_func.update(b'\x1f')
    return hash_func.hexdigest()


def normalize_query(query: str) -> str:
    """Trim and lowercase a query; None becomes an empty string"""
    if not query:
        return ""
    return query.strip().lower()


def lower_with_offsets(value: str) -> Tuple[str, List[int]]:
    """
    Lowercase a value, keeping track of where each lowered character came from

    Some characters lowercase to more than one character ("İ" becomes
    "i̇"), so positions in the lowered text can drift from the original.

    Args:
        value: Original text

    Returns:
        Tuple of (lowered text, offsets) where ``offsets[i]`` is the index in
        ``value`` of the character that produced lowered character ``i``
    """
    lowered = []
    offsets = []
    for index, char in enumerate(value):
        folded = char.lower()
        lowered.append(folded)
        offsets.extend([index] * len(folded))
    return "".join(lowered), offsets


def format_duration(duration_ms: float) -> str:
    """
    Format a duration in milliseconds for display

    Args:
        duration_ms: Duration in milliseconds

    Returns:
        Formatted duration string
    """
    if duration_ms < 1000:
        return f"{duration_ms:.2f}ms"
    return f"{duration_ms / 1000:.2f}s"


def measure_search_performance(
    search_function: Callable[[], T],
    search_type: str,
    query: str
) -> Tuple[T, float]:
    """
    Run a search and time it

    Args:
        search_function: Zero-argument callable performing the search
        search_type: Label for the log line
        query: Query text for the log line

    Returns:
        Tuple of (search result, duration in milliseconds)
    """
    start = time.perf_counter()
    result = search_function()
    duration = (time.perf_counter() - start) * 1000

    count = len(result) if isinstance(result, (list, tuple)) else 1
    logger.debug(
        f"Search performance - {search_type}: query='{query}', "
        f"duration={format_duration(duration)}, results={count}"
    )
    return result, duration
