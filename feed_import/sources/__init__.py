"""
feed_import/sources package exports.
"""

from feed_import.sources.delimited import (
    CSVRowSource,
    DelimitedRowSource,
    TSVRowSource,
    normalize_headers,
)

__all__ = [
    "CSVRowSource",
    "DelimitedRowSource",
    "TSVRowSource",
    "normalize_headers",
]
