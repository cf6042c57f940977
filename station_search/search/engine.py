"""
Search engine: pre-filtering, strategy dispatch and multi-strategy merging
"""
from collections.abc import Mapping, Sequence as SequenceABC
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from station_search.core.config import SearchConfig
from station_search.core.exceptions import InvalidSearchArgumentsError
from station_search.core.models import (
    MultiSearchOptions,
    Record,
    SearchFilters,
    SearchResult,
    SearchStrategy,
    resolve_fields,
)
from station_search.search.fuzzy import FuzzyMatcher, IndexCache
from station_search.search.patterns import ExactMatcher, SubstringMatcher
from station_search.search.phonetic import PhoneticMatcher
from station_search.search.suggestions import suggest
from station_search.utils.logger import get_logger


class SearchEngine:
    """
    Main search engine over an in-memory dataset

    The engine keeps no dataset of its own: every call receives the records
    to search. Its only state is the fuzzy matcher's index cache.
    """

    def __init__(self, config: SearchConfig = None):
        self.config = config or SearchConfig()
        self.logger = get_logger("SearchEngine")

        self.exact = ExactMatcher()
        self.substring = SubstringMatcher()
        self.phonetic = PhoneticMatcher(
            score=self.config.phonetic_score,
            min_word_length=self.config.phonetic_min_word_length,
        )
        self.fuzzy = FuzzyMatcher(
            threshold=self.config.fuzzy_threshold,
            max_candidates=self.config.max_candidates,
            min_match_length=self.config.min_match_length,
            cache=IndexCache(self.config.field_weights),
        )

    def search(
        self,
        records: Sequence[Union[Record, Mapping]],
        filters: Union[SearchFilters, Mapping]
    ) -> List[SearchResult]:
        """
        Search records with the strategy and filters given

        Args:
            records: Dataset snapshot; never modified
            filters: Query, strategy, fields and non-text filters

        Returns:
            Matcher-ranked results, or every filtered record unscored when the
            query is empty
        """
        records = self._check_records(records)
        filters = self._check_filters(filters)

        filtered = self.apply_filters(records, filters)

        if not filters.query.strip():
            return [SearchResult(record=record) for record in filtered]

        fields = resolve_fields(filters.fields, self.config.default_fields)
        strategy = SearchStrategy.lookup(filters.strategy)
        if strategy is None:
            self.logger.warning(f"Unknown search strategy '{filters.strategy}', using substring")
            strategy = SearchStrategy.SUBSTRING

        self.logger.debug(
            f"Starting search: query='{filters.query}', strategy='{strategy.value}', "
            f"records={len(filtered)}"
        )

        if strategy is SearchStrategy.EXACT:
            results = self.exact.match(filtered, filters.query, fields)
        elif strategy is SearchStrategy.FUZZY:
            results = self.fuzzy.match(filtered, filters.query)
        elif strategy is SearchStrategy.PHONETIC:
            results = self.phonetic.match(filtered, filters.query, fields)
        else:
            results = self.substring.match(filtered, filters.query, fields)

        self.logger.debug(f"Search completed: {len(results)} results found")
        return results

    def apply_filters(self, records: Sequence[Record], filters: SearchFilters) -> List[Record]:
        """
        Apply the country and obsolete filters

        Args:
            records: Dataset snapshot
            filters: Filters carrying ``country_filter`` and ``include_obsolete``

        Returns:
            Records passing both filters, in input order
        """
        filtered = list(records)

        if filters.has_country_filter:
            country = filters.country_filter
            filtered = [
                record for record in filtered
                if record.country_code == country or record.country == country
            ]

        if not filters.include_obsolete:
            filtered = [record for record in filtered if not record.obsolete]

        return filtered

    def multi_search(
        self,
        records: Sequence[Union[Record, Mapping]],
        query: str,
        options: Union[MultiSearchOptions, Mapping, None] = None,
        **overrides: Any
    ) -> List[SearchResult]:
        """
        Run exact, substring and fuzzy matching and merge the results

        Filters do not apply. Each record appears once with its best score;
        on equal scores the earlier matcher (exact, substring, fuzzy) wins.

        Args:
            records: Dataset snapshot
            query: Raw query text
            options: threshold, max_results and fields
            **overrides: Individual option values, e.g. ``max_results=10``

        Returns:
            Merged results sorted by ascending score, at most ``max_results``
        """
        records = self._check_records(records)
        options = self._check_options(options, overrides)

        if query is not None and not isinstance(query, str):
            raise InvalidSearchArgumentsError(f"query must be a string, got {type(query).__name__}")
        if not (query or "").strip():
            return []

        fields = resolve_fields(options.fields, self.config.default_fields)

        runs = (
            self.exact.match(records, query, fields),
            self.substring.match(records, query, fields),
            self.fuzzy.match(records, query, threshold=options.threshold),
        )

        best: Dict[str, SearchResult] = {}
        for results in runs:
            for result in results:
                existing = best.get(result.code)
                if existing is None or _score(result) < _score(existing):
                    best[result.code] = result

        merged = sorted(best.values(), key=_score)[:options.max_results]
        self.logger.debug(f"Multi search for '{query}': {len(merged)} merged results")
        return merged

    def suggest(
        self,
        records: Sequence[Union[Record, Mapping]],
        query: str,
        max_suggestions: Optional[int] = None
    ) -> List[str]:
        """
        Get autocomplete suggestions

        Args:
            records: Dataset snapshot
            query: Text typed so far
            max_suggestions: Maximum number of suggestions (config default if None)

        Returns:
            Distinct matching field values, prefix matches first
        """
        records = self._check_records(records)
        if query is not None and not isinstance(query, str):
            raise InvalidSearchArgumentsError(f"query must be a string, got {type(query).__name__}")
        if max_suggestions is None:
            max_suggestions = self.config.max_suggestions

        return suggest(
            records,
            query,
            max_suggestions=max_suggestions,
            min_length=self.config.min_suggestion_length,
        )

    def _check_records(self, records) -> List[Record]:
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, SequenceABC):
            raise InvalidSearchArgumentsError(
                f"records must be a sequence of Record objects, got {type(records).__name__}"
            )

        checked = []
        for position, record in enumerate(records):
            if isinstance(record, Record):
                checked.append(record)
            elif isinstance(record, Mapping):
                try:
                    checked.append(Record.model_validate(record))
                except ValidationError as e:
                    raise InvalidSearchArgumentsError(f"Invalid record at position {position}: {e}") from e
            else:
                raise InvalidSearchArgumentsError(
                    f"Invalid record at position {position}: {type(record).__name__}"
                )
        return checked

    def _check_filters(self, filters) -> SearchFilters:
        if isinstance(filters, SearchFilters):
            return filters
        if isinstance(filters, Mapping):
            try:
                return SearchFilters.model_validate(filters)
            except ValidationError as e:
                raise InvalidSearchArgumentsError(f"Invalid search filters: {e}") from e
        raise InvalidSearchArgumentsError(
            f"filters must be SearchFilters or a mapping, got {type(filters).__name__}"
        )

    def _check_options(self, options, overrides) -> MultiSearchOptions:
        if options is None:
            data = {"max_results": self.config.max_results, "threshold": self.config.fuzzy_threshold}
        elif isinstance(options, MultiSearchOptions):
            data = options.model_dump()
        elif isinstance(options, Mapping):
            data = {"max_results": self.config.max_results, "threshold": self.config.fuzzy_threshold}
            data.update(options)
        else:
            raise InvalidSearchArgumentsError(
                f"options must be MultiSearchOptions or a mapping, got {type(options).__name__}"
            )

        data.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return MultiSearchOptions.model_validate(data)
        except ValidationError as e:
            raise InvalidSearchArgumentsError(f"Invalid multi search options: {e}") from e


def _score(result: SearchResult) -> float:
    return result.score if result.score is not None else 0.0
