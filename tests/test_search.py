"""
Tests for search engine
"""

import unittest

from station_search.core.config import SearchConfig
from station_search.core.exceptions import InvalidSearchArgumentsError
from station_search.core.models import MultiSearchOptions, Record, SearchFilters, SearchStrategy
from station_search.search.engine import SearchEngine

from stations_data import STATIONS


class TestSearchEngine(unittest.TestCase):
    """Test cases for SearchEngine class"""

    def setUp(self):
        """Set up test fixtures"""
        self.records = list(STATIONS)
        self.engine = SearchEngine()

    def test_browse_returns_filtered_records(self):
        """An empty query lists every filtered record without ranking"""
        results = self.engine.search(self.records, SearchFilters(query="  "))

        expected = [r.code for r in self.records if not r.obsolete]
        self.assertEqual([r.code for r in results], expected)
        for result in results:
            self.assertIsNone(result.score)
            self.assertEqual(result.matches, [])

    def test_browse_with_obsolete(self):
        results = self.engine.search(self.records, SearchFilters(include_obsolete=True))

        self.assertEqual(len(results), len(self.records))

    def test_obsolete_excluded_for_every_strategy(self):
        for strategy in SearchStrategy:
            for query in ["old", "Old Town", "Kenya", "Olde"]:
                filters = SearchFilters(query=query, strategy=strategy, include_obsolete=False)
                results = self.engine.search(self.records, filters)
                self.assertFalse(any(r.record.obsolete for r in results), (strategy, query))

    def test_obsolete_included_on_request(self):
        filters = SearchFilters(query="old", include_obsolete=True)

        results = self.engine.search(self.records, filters)

        self.assertEqual([r.code for r in results], ["OLD"])

    def test_country_filter(self):
        by_code = self.engine.search(self.records, SearchFilters(country_filter="CH"))
        by_name = self.engine.search(self.records, SearchFilters(country_filter="Switzerland"))
        no_filter = self.engine.search(self.records, SearchFilters(country_filter="all"))

        self.assertEqual([r.code for r in by_code], ["GVA"])
        self.assertEqual([r.code for r in by_name], ["GVA"])
        self.assertEqual(len(no_filter), 6)

    def test_country_filter_applies_before_matching(self):
        filters = SearchFilters(query="gen", country_filter="IT")

        results = self.engine.search(self.records, filters)

        self.assertEqual([r.code for r in results], ["GOA"])

    def test_dispatch(self):
        exact = self.engine.search(self.records, SearchFilters(query="paris", strategy="exact"))
        substring = self.engine.search(self.records, SearchFilters(query="ari", strategy="partial"))
        fuzzy = self.engine.search(self.records, SearchFilters(query="Pariss", strategy="fuzzy"))
        phonetic = self.engine.search(
            self.records, SearchFilters(query="Rupertsport", strategy="soundex")
        )

        self.assertEqual([r.code for r in exact], ["PAR"])
        self.assertEqual([r.code for r in substring], ["PAR"])
        self.assertEqual(fuzzy[0].code, "PAR")
        self.assertEqual([r.code for r in phonetic], ["ROB"])
        self.assertEqual(phonetic[0].score, 0.5)

    def test_unknown_strategy_falls_back_to_substring(self):
        fallback = self.engine.search(self.records, {"query": "york", "strategy": "regex"})
        substring = self.engine.search(self.records, {"query": "york", "strategy": "substring"})

        self.assertEqual(fallback, substring)

    def test_fields_filtered_against_allow_list(self):
        filters = SearchFilters(query="gva", strategy="exact", fields=["code", "latitude"])

        results = self.engine.search(self.records, filters)

        self.assertEqual([r.code for r in results], ["GVA"])
        self.assertEqual(results[0].matches[0].field, "code")

    def test_empty_fields_use_defaults(self):
        filters = SearchFilters(query="switzerland", strategy="exact", fields=[])

        results = self.engine.search(self.records, filters)

        self.assertEqual([r.code for r in results], ["GVA"])

    def test_dict_records_accepted(self):
        records = [{"code": "BER", "name": "Bern", "country": "Switzerland", "obsolete": "0"}]

        results = self.engine.search(records, {"query": "bern"})

        self.assertEqual(results[0].record, Record(code="BER", name="Bern", country="Switzerland"))

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.search("GVA,GOA", SearchFilters(query="x"))
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.search([1, 2], SearchFilters(query="x"))
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.search([{"name": "no code"}], SearchFilters(query="x"))
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.search(self.records, "paris")
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.search(self.records, {"include_obsolete": [1, 2]})
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.multi_search(self.records, "paris", max_results=-1)
        with self.assertRaises(InvalidSearchArgumentsError):
            self.engine.multi_search(self.records, 42)
        with self.assertRaises(ValueError):
            self.engine.suggest(self.records, 42)

    def test_records_not_modified(self):
        before = list(self.records)

        self.engine.search(self.records, SearchFilters(query="gen", strategy="fuzzy"))

        self.assertEqual(self.records, before)


class TestMultiSearch(unittest.TestCase):
    """Test cases for combined search"""

    def setUp(self):
        self.records = list(STATIONS)
        self.engine = SearchEngine()

    def test_exact_ranks_first(self):
        results = self.engine.multi_search(self.records, "Paris")

        self.assertEqual(results[0].code, "PAR")
        self.assertEqual(results[0].score, 0)

    def test_unique_codes_and_ordering(self):
        for query in ["gen", "Genva", "new", "a", "Kenia", "port"]:
            results = self.engine.multi_search(self.records, query)
            codes = [r.code for r in results]
            scores = [r.score for r in results]

            self.assertEqual(len(codes), len(set(codes)), query)
            self.assertEqual(scores, sorted(scores), query)

    def test_best_score_kept(self):
        results = self.engine.multi_search(self.records, "gen")

        self.assertEqual([r.code for r in results], ["GVA", "GOA"])
        self.assertTrue(all(r.score == 0 for r in results))

    def test_exact_wins_ties(self):
        records = [Record(code="KEN", name="Kenya", country="Kenya Republic")]

        results = self.engine.multi_search(records, "kenya")

        # The substring run would also report the country field
        self.assertEqual(len(results), 1)
        self.assertEqual([span.field for span in results[0].matches], ["name"])

    def test_ignores_filters(self):
        results = self.engine.multi_search(self.records, "Old Town")

        self.assertEqual(results[0].code, "OLD")

    def test_max_results(self):
        results = self.engine.multi_search(self.records, "a", {"max_results": 2})
        options = MultiSearchOptions(max_results=1)

        self.assertEqual(len(results), 2)
        self.assertEqual(len(self.engine.multi_search(self.records, "a", options)), 1)

    def test_fields_option(self):
        by_default = self.engine.multi_search(self.records, "gva")
        by_code = self.engine.multi_search(self.records, "gva", {"fields": ["code"]})

        self.assertFalse(any(
            span.field == "code" for result in by_default for span in result.matches
        ))
        self.assertEqual(by_code[0].code, "GVA")
        self.assertEqual(by_code[0].score, 0)
        self.assertEqual([span.field for span in by_code[0].matches], ["code"])

    def test_empty_query(self):
        self.assertEqual(self.engine.multi_search(self.records, " "), [])

    def test_config_defaults(self):
        engine = SearchEngine(SearchConfig(max_results=3))

        self.assertEqual(len(engine.multi_search(self.records, "a")), 3)


class TestSuggest(unittest.TestCase):
    """Test cases for engine suggestions"""

    def test_config_limit(self):
        engine = SearchEngine(SearchConfig(max_suggestions=1))

        self.assertEqual(engine.suggest(list(STATIONS), "gen"), ["Geneva"])
        self.assertEqual(engine.suggest(list(STATIONS), "gen", 5), ["Geneva", "Genève", "Genoa"])


if __name__ == '__main__':
    unittest.main()
