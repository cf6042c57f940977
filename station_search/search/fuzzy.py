"""
Approximate matching over a cached, weighted multi-field index

Each record field is compared to the query with two normalized edit
measures from rapidfuzz: a partial alignment ratio (the query against the
best-aligned window of the field) and the Damerau-Levenshtein distance of the
whole strings. The smaller distance wins. A field matches when its distance
is within the threshold, and a record's score is the weighted mean of its
matched field distances, so 0 is a perfect match and 1 the worst.
"""
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz
from rapidfuzz.distance import DamerauLevenshtein

from station_search.core.models import (
    MatchSpan,
    Record,
    SearchField,
    SearchResult,
    field_value,
)
from station_search.utils.helpers import fingerprint, lower_with_offsets, normalize_query
from station_search.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_WEIGHTS: Dict[str, float] = {
    "name": 0.4,
    "alt_name": 0.3,
    "country": 0.2,
    "country_code": 0.1,
}


class IndexedField:
    """One searchable value of one record"""

    __slots__ = ("field", "weight", "value", "lowered", "offsets")

    def __init__(self, field: SearchField, weight: float, value: str):
        self.field = field
        self.weight = weight
        self.value = value
        self.lowered, self.offsets = lower_with_offsets(value)


class FuzzyIndex:
    """
    Per-dataset structure used by the fuzzy matcher

    Built once per distinct dataset and never mutated afterwards; a new
    dataset gets a new index.
    """

    def __init__(self, records: Sequence[Record], weights: Dict[str, float], data_fingerprint: str):
        self.fingerprint = data_fingerprint
        # Heaviest field first so spans come out in weight order
        self.weights: List[Tuple[SearchField, float]] = sorted(
            ((SearchField(name), weight) for name, weight in weights.items()),
            key=lambda item: -item[1],
        )
        self.entries: List[Tuple[Record, List[IndexedField]]] = []

        for record in records:
            indexed = []
            for field, weight in self.weights:
                value = field_value(record, field)
                if value is not None:
                    indexed.append(IndexedField(field, weight, value))
            self.entries.append((record, indexed))

    def __len__(self) -> int:
        return len(self.entries)


def field_distance(query: str, indexed: IndexedField) -> Tuple[float, int, int]:
    """
    Distance between a lowercase query and one indexed value

    Args:
        query: Trimmed, lowercased query
        indexed: Indexed field value

    Returns:
        Tuple of (distance in [0, 1], span start, span end) where the span is
        an inclusive region of the field value
    """
    value = indexed.lowered
    last = len(indexed.value) - 1

    distance = DamerauLevenshtein.normalized_distance(query, value)
    start, end = 0, last

    if len(query) <= len(value):
        alignment = fuzz.partial_ratio_alignment(query, value)
        if alignment is not None:
            partial = 1.0 - alignment.score / 100.0
            if partial < distance:
                distance = partial
                if alignment.dest_end > alignment.dest_start:
                    start = indexed.offsets[alignment.dest_start]
                    end = indexed.offsets[alignment.dest_end - 1]

    return distance, start, end


class IndexCache:
    """
    Owns the current FuzzyIndex and rebuilds it when the dataset changes

    The fingerprint of the live dataset is recomputed on every call and is
    the only staleness signal. Rebuild-and-swap happens under a lock, so a
    caller never sees a partially built index.

    The fingerprint covers record codes and their order only. A record whose
    other fields change under the same code keeps being served from the
    cached index; call ``clear()`` after editing records in place.
    """

    def __init__(self, weights: Optional[Dict[str, float]] = None):
        self.weights = dict(weights or DEFAULT_WEIGHTS)
        self._index: Optional[FuzzyIndex] = None
        self._lock = threading.Lock()
        self.builds = 0

    @property
    def current(self) -> Optional[FuzzyIndex]:
        return self._index

    def get_index(self, records: Sequence[Record]) -> FuzzyIndex:
        """
        Return an index for ``records``, rebuilding it if stale

        Args:
            records: The live dataset

        Returns:
            FuzzyIndex whose fingerprint matches ``records``
        """
        data_fingerprint = fingerprint(records)

        with self._lock:
            index = self._index
            if index is None or index.fingerprint != data_fingerprint:
                index = FuzzyIndex(records, self.weights, data_fingerprint)
                self._index = index
                self.builds += 1
                logger.info(
                    f"Built fuzzy index for {len(index)} records "
                    f"(fingerprint {data_fingerprint[:12]})"
                )
            return index

    def clear(self) -> None:
        with self._lock:
            self._index = None


class FuzzyMatcher:
    """
    Typo-tolerant matching using a cached weighted index
    """

    def __init__(
        self,
        threshold: float = 0.3,
        max_candidates: int = 100,
        min_match_length: int = 2,
        weights: Optional[Dict[str, float]] = None,
        cache: Optional[IndexCache] = None
    ):
        self.threshold = threshold
        self.max_candidates = max_candidates
        self.min_match_length = min_match_length
        self.cache = cache or IndexCache(weights)

    def match(
        self,
        records: Sequence[Record],
        query: str,
        threshold: Optional[float] = None
    ) -> List[SearchResult]:
        """
        Find records approximately matching the query

        Args:
            records: Records to search
            query: Raw query text
            threshold: Maximum accepted score (defaults to the matcher threshold)

        Returns:
            Results with score <= threshold, sorted ascending, at most
            ``max_candidates`` of them
        """
        needle = normalize_query(query)
        if len(needle) < self.min_match_length:
            return []

        if threshold is None:
            threshold = self.threshold

        index = self.cache.get_index(records)
        candidates = []

        for record, indexed_fields in index.entries:
            weighted = 0.0
            total_weight = 0.0
            matches = []

            for indexed in indexed_fields:
                distance, start, end = field_distance(needle, indexed)
                if distance > threshold:
                    continue

                weighted += indexed.weight * distance
                total_weight += indexed.weight
                matches.append(MatchSpan(
                    field=indexed.field.value,
                    value=indexed.value,
                    start=start,
                    end=end,
                ))

            if matches:
                score = weighted / total_weight
                candidates.append(SearchResult(record=record, score=score, matches=matches))

        candidates.sort(key=lambda result: result.score)
        results = [
            result for result in candidates[:self.max_candidates]
            if result.score <= threshold
        ]

        logger.debug(f"Fuzzy match for '{needle}': {len(results)} results")
        return results
