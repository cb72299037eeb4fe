"""
Parsing and filtering of WSPRnet spot rows.

A spot dump is CSV without a header, one spot per line. Two layouts are
accepted: the compact 12 column one

    id, timestamp, reporter, reporter grid, snr, frequency,
    call, grid, power, drift, distance, band

and the 15 column WSPRnet monthly archive, which adds azimuth before the
band and version and code after it. The band column is ignored, the band is
always derived from the frequency.
"""

import csv
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

from .exceptions import MalformedRow
from .locator import grid_distance_km

logger = logging.getLogger(__name__)

COMPACT_COLUMNS = 12
ARCHIVE_COLUMNS = 15

TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")

# Power levels a WSPR message can encode
POWER_LEVELS_DBM = frozenset({0, 3, 7, 10, 13, 17, 20, 23, 27, 30, 33, 37, 40, 43, 47, 50, 53, 57, 60})

# Half the earth's circumference, and the widest report ADIF +NN can carry
MAX_DISTANCE_KM = 20040
MAX_SNR_DB = 99

ROLES = ("reporter", "transmitter", "either")


@dataclass(frozen=True)
class Spot:
    """One reception of a transmitter's beacon by a reporter."""

    spot_id: int
    timestamp: datetime
    reporter_call: str
    reporter_grid: str
    snr_db: int
    frequency_mhz: float
    transmitter_call: str
    transmitter_grid: str
    power_dbm: int
    drift_hz_per_s: int
    distance_km: int


def normalize_call(call):
    return call.strip().upper()


def parse_timestamp(value):
    """Unix seconds or 'YYYY-MM-DD HH:MM[:SS]', always UTC."""
    value = value.strip()
    if value.isdigit():
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError):
            raise ValueError(f"timestamp out of range {value!r}") from None

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    raise ValueError(f"unrecognised timestamp {value!r}")


def _number(fields, index, name, kind, line_number, row):
    try:
        return kind(fields[index].strip())
    except ValueError:
        raise MalformedRow(line_number, f"{name} is not a valid {kind.__name__}: {fields[index]!r}", row) from None


def parse_spot(line, line_number=1):
    """
    Parse one CSV row into a Spot.

    Raises MalformedRow on a wrong column count, a bad or out of range
    number, a power that is not a WSPR level, a bad timestamp, or a missing
    distance that cannot be computed from the grids.
    """
    row = line.rstrip("\r\n")
    fields = next(csv.reader([row]), [])

    if len(fields) not in (COMPACT_COLUMNS, ARCHIVE_COLUMNS):
        raise MalformedRow(
            line_number,
            f"expected {COMPACT_COLUMNS} or {ARCHIVE_COLUMNS} columns, got {len(fields)}",
            row,
        )

    spot_id = _number(fields, 0, "spot id", int, line_number, row)
    if spot_id < 0:
        raise MalformedRow(line_number, f"negative spot id {spot_id}", row)

    try:
        timestamp = parse_timestamp(fields[1])
    except ValueError as e:
        raise MalformedRow(line_number, str(e), row) from None

    reporter_call = fields[2].strip()
    transmitter_call = fields[6].strip()
    if not reporter_call or not transmitter_call:
        raise MalformedRow(line_number, "missing call sign", row)

    frequency_mhz = _number(fields, 5, "frequency", float, line_number, row)
    if not math.isfinite(frequency_mhz) or frequency_mhz <= 0:
        raise MalformedRow(line_number, f"frequency out of range: {fields[5]!r}", row)

    power_dbm = _number(fields, 8, "power", int, line_number, row)
    if power_dbm not in POWER_LEVELS_DBM:
        raise MalformedRow(line_number, f"power {power_dbm} dBm is not a WSPR power level", row)

    reporter_grid = fields[3].strip()
    transmitter_grid = fields[7].strip()

    if fields[10].strip():
        distance_km = _number(fields, 10, "distance", int, line_number, row)
        if not 0 <= distance_km <= MAX_DISTANCE_KM:
            raise MalformedRow(line_number, f"distance out of range: {distance_km}", row)
    else:
        try:
            distance_km = grid_distance_km(reporter_grid, transmitter_grid)
        except ValueError as e:
            raise MalformedRow(line_number, f"cannot compute distance: {e}", row) from None

    snr_db = _number(fields, 4, "snr", int, line_number, row)
    if abs(snr_db) > MAX_SNR_DB:
        raise MalformedRow(line_number, f"snr out of range: {snr_db}", row)

    return Spot(
        spot_id=spot_id,
        timestamp=timestamp,
        reporter_call=reporter_call,
        reporter_grid=reporter_grid,
        snr_db=snr_db,
        frequency_mhz=frequency_mhz,
        transmitter_call=transmitter_call,
        transmitter_grid=transmitter_grid,
        power_dbm=power_dbm,
        drift_hz_per_s=_number(fields, 9, "drift", int, line_number, row),
        distance_km=distance_km,
    )


def read_spots(lines: Iterable[str]) -> Tuple[List[Spot], List[MalformedRow]]:
    """
    Parse every line of a spot dump.

    Malformed rows are logged and collected, never raised. Blank lines are
    skipped without counting as malformed.
    """
    spots = []
    malformed = []

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        try:
            spots.append(parse_spot(line, line_number))
        except MalformedRow as e:
            logger.warning("Skipping malformed row %s", e)
            malformed.append(e)

    logger.debug("Parsed %d spots, %d malformed rows", len(spots), len(malformed))
    return spots, malformed


def filter_spots(spots, call, role="either"):
    """ Spots where `call` is the reporter, the transmitter, or either."""
    if role not in ROLES:
        raise ValueError(f"role must be one of {ROLES}, not {role!r}")

    call = normalize_call(call)
    kept = []
    for spot in spots:
        is_reporter = normalize_call(spot.reporter_call) == call
        is_transmitter = normalize_call(spot.transmitter_call) == call

        if role == "reporter" and is_reporter:
            kept.append(spot)
        elif role == "transmitter" and is_transmitter:
            kept.append(spot)
        elif role == "either" and (is_reporter or is_transmitter):
            kept.append(spot)

    return kept


def split_by_role(spots, call):
    """
    Split spots into (as_reporter, as_transmitter) for `call`.

    Self-spots, where the call is on both ends, belong to neither.
    """
    call = normalize_call(call)
    as_reporter = []
    as_transmitter = []

    for spot in spots:
        is_reporter = normalize_call(spot.reporter_call) == call
        is_transmitter = normalize_call(spot.transmitter_call) == call

        if is_reporter and not is_transmitter:
            as_reporter.append(spot)
        elif is_transmitter and not is_reporter:
            as_transmitter.append(spot)

    return as_reporter, as_transmitter
