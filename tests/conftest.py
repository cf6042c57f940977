"""
Shared fixtures
"""
import pytest

from station_search.search.engine import SearchEngine

from stations_data import STATIONS


@pytest.fixture
def stations():
    return list(STATIONS)


@pytest.fixture
def engine():
    return SearchEngine()
