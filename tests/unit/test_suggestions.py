"""
Test autocomplete suggestions
"""
import pytest

from station_search.core.models import Record
from station_search.search.suggestions import collation_key, suggest


class TestSuggestions:
    """Test suggestion generation"""

    def setup_method(self):
        """Setup test environment"""
        self.records = [
            Record(code="GVA", name="Geneva"),
            Record(code="GOA", name="Genoa"),
            Record(code="PAR", name="Paris"),
        ]

    def test_prefix_matches_alphabetical(self):
        assert suggest(self.records, "gen") == ["Geneva", "Genoa"]

    def test_query_length_boundary(self):
        assert suggest(self.records, "g") == []
        assert suggest(self.records, " g ") == []
        assert suggest(self.records, "ge") == ["Geneva", "Genoa"]

    def test_empty_dataset(self):
        assert suggest([], "gen") == []

    def test_prefix_before_contains(self):
        records = [
            Record(code="ANR", name="Antwerp", country="Belgium"),
            Record(code="MIL", name="Milan", country="Italy"),
            Record(code="ALV", name="Andorra la Vella", country="Andorra"),
        ]

        assert suggest(records, "an") == ["Andorra", "Andorra la Vella", "Antwerp", "Milan"]
        assert suggest(records, "an", max_suggestions=2) == ["Andorra", "Andorra la Vella"]

    def test_distinct_values_across_fields(self, stations):
        """Values are deduplicated; alternate names and countries contribute"""
        results = suggest(stations, "ken")

        assert results == ["Kenya"]

        assert suggest(stations, "york") == ["New York", "New York City"]

    def test_ignores_obsolete_flag(self, stations):
        assert "Old Town" in suggest(stations, "old")

    def test_accents_sort_with_base_letter(self):
        records = [
            Record(code="E1", name="Evry"),
            Record(code="E2", name="Évreux"),
            Record(code="E3", name="Ecully"),
        ]

        assert suggest(records, "vr") == ["Évreux", "Evry"]
        assert collation_key("Évreux") < collation_key("Evry")

    def test_zero_limit(self):
        assert suggest(self.records, "gen", max_suggestions=0) == []


if __name__ == '__main__':
    pytest.main([__file__])
