"""
Exception classes shared across the search engine
"""


class SearchError(Exception):
    """
    Base class for errors reported by the search engine.

    Matchers never raise for individual field values; these errors signal
    caller-level contract violations only.
    """

    pass


class InvalidSearchArgumentsError(SearchError, ValueError):
    """
    Raised when the dataset, filters or options passed to the engine have the
    wrong shape entirely.

    Examples:
        - records is not a sequence of Record objects or mappings
        - filters is neither SearchFilters nor a mapping of filter values
        - max_results is negative
    """

    pass


class ConfigurationError(SearchError, ValueError):
    """Raised when a configuration file or environment value cannot be used"""

    pass


__all__ = [
    "SearchError",
    "InvalidSearchArgumentsError",
    "ConfigurationError",
]
