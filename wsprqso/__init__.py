"""
Reconstruct two-way WSPR contacts for one station from WSPRnet spot dumps.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("wspr-qso")
except Exception:
    __version__ = "unknown"

from .bands import UNKNOWN_BAND, Band, band_for
from .correlate import (
    DEFAULT_EXCLUDED,
    DEFAULT_WINDOW,
    QsoPair,
    QsoSession,
    ScoredSpot,
    best_spots,
    merge_pairs,
    mutual_pairs,
)
from .exceptions import InvalidCallSign, IoFailure, MalformedRow, WsprQsoError
from .metrics import describe, dbm_to_mw, format_mw, format_power, quality_score
from .records import OutputRecord, record_from_pair, record_from_scored, record_from_session
from .spots import Spot, filter_spots, parse_spot, read_spots, split_by_role

__all__ = [
    "Band",
    "DEFAULT_EXCLUDED",
    "DEFAULT_WINDOW",
    "InvalidCallSign",
    "IoFailure",
    "MalformedRow",
    "OutputRecord",
    "QsoPair",
    "QsoSession",
    "ScoredSpot",
    "Spot",
    "UNKNOWN_BAND",
    "WsprQsoError",
    "band_for",
    "best_spots",
    "dbm_to_mw",
    "describe",
    "filter_spots",
    "format_mw",
    "format_power",
    "merge_pairs",
    "mutual_pairs",
    "parse_spot",
    "quality_score",
    "read_spots",
    "record_from_pair",
    "record_from_scored",
    "record_from_session",
    "split_by_role",
]
