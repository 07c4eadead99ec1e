"""Privileged access to the persisted sales series.

Only the application layer writes through these stores; the reconcile
engine only prepares payloads.
"""

from .http_store import HttpSeriesStore, SeriesServiceUnavailable
from .store import JsonSeriesStore, SeriesStore, get_series_store

__all__ = [
    "HttpSeriesStore",
    "JsonSeriesStore",
    "SeriesServiceUnavailable",
    "SeriesStore",
    "get_series_store",
]
