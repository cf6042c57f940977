"""
Exact and substring matching over record fields
"""
from typing import List, Optional, Sequence

from station_search.core.models import (
    DEFAULT_FIELDS,
    MatchSpan,
    Record,
    SearchField,
    SearchResult,
    field_value,
)
from station_search.utils.helpers import lower_with_offsets, normalize_query
from station_search.utils.logger import get_logger

logger = get_logger(__name__)


def _score_key(result: SearchResult) -> float:
    return result.score if result.score is not None else 0.0


class ExactMatcher:
    """
    Case-insensitive whole-field equality
    """

    def match(
        self,
        records: Sequence[Record],
        query: str,
        fields: Optional[Sequence[SearchField]] = None
    ) -> List[SearchResult]:
        """
        Find records with a field equal to the query

        Args:
            records: Records to search
            query: Raw query text; trimmed before comparison
            fields: Fields to compare (defaults to name, alt_name, country)

        Returns:
            One result per matching record, score 0, one span per equal field
        """
        needle = normalize_query(query)
        if not needle:
            return []

        fields = list(fields or DEFAULT_FIELDS)
        results = []

        for record in records:
            matches = []
            for field in fields:
                value = field_value(record, field)
                if value is not None and value.lower() == needle:
                    matches.append(MatchSpan(
                        field=field.value,
                        value=value,
                        start=0,
                        end=len(value) - 1,
                    ))

            if matches:
                results.append(SearchResult(record=record, score=0.0, matches=matches))

        logger.debug(f"Exact match for '{needle}': {len(results)} results")
        return sorted(results, key=_score_key)


class SubstringMatcher:
    """
    Case-insensitive "contains" matching, ranked by where the match starts
    """

    def match(
        self,
        records: Sequence[Record],
        query: str,
        fields: Optional[Sequence[SearchField]] = None
    ) -> List[SearchResult]:
        """
        Find records with a field containing the query

        The score of a field is ``start / len(field)`` so an earlier match in
        a shorter value ranks better; a record keeps its best field score.

        Args:
            records: Records to search
            query: Raw query text; trimmed before comparison
            fields: Fields to search (defaults to name, alt_name, country)

        Returns:
            Matching records sorted by ascending score
        """
        needle = normalize_query(query)
        if not needle:
            return []

        fields = list(fields or DEFAULT_FIELDS)
        results = []

        for record in records:
            matches = []
            best_score = None

            for field in fields:
                value = field_value(record, field)
                if value is None:
                    continue

                lowered, offsets = lower_with_offsets(value)
                index = lowered.find(needle)
                if index == -1:
                    continue

                start = offsets[index]
                end = offsets[index + len(needle) - 1]

                score = start / len(value)
                if best_score is None or score < best_score:
                    best_score = score

                matches.append(MatchSpan(
                    field=field.value,
                    value=value,
                    start=start,
                    end=end,
                ))

            if matches:
                results.append(SearchResult(record=record, score=best_score, matches=matches))

        logger.debug(f"Substring match for '{needle}': {len(results)} results")
        return sorted(results, key=_score_key)


def highlight_matches(value: str, spans: Sequence[MatchSpan], highlight_format: str = "**{}**") -> str:
    """
    Highlight matched regions of a field value

    Args:
        value: Field value to render
        spans: Spans reported for this value; spans for other values are ignored
        highlight_format: Format string for highlighting (default: markdown bold)

    Returns:
        Value with every matched region wrapped by ``highlight_format``
    """
    regions = sorted(
        (max(span.start, 0), min(span.end, len(value) - 1))
        for span in spans
        if span.value == value
    )

    # Merge overlapping regions
    merged = []
    for start, end in regions:
        if end < start:
            continue
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))

    result = []
    position = 0
    for start, end in merged:
        result.append(value[position:start])
        result.append(highlight_format.format(value[start:end + 1]))
        position = end + 1
    result.append(value[position:])

    return "".join(result)
