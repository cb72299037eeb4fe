"""
Spot correlation: best spot per station, and mutual spot pairs.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from .bands import Band, band_for
from .metrics import spot_quality
from .spots import Spot, filter_spots, normalize_call, split_by_role

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(minutes=4)

# Stations that asked not to have WSPR QSOs logged with them
DEFAULT_EXCLUDED = frozenset({"DL6WAB"})


@dataclass(frozen=True)
class ScoredSpot:
    spot: Spot
    quality_score: int


@dataclass(frozen=True)
class QsoPair:
    """
    Two spots proving a two-way link.

    `outbound` is the operator heard by the remote station, `inbound` the
    remote station heard by the operator.
    """

    outbound: Spot
    inbound: Spot

    @property
    def operator_call(self):
        return self.outbound.transmitter_call

    @property
    def remote_call(self):
        return self.inbound.transmitter_call

    @property
    def time_on(self):
        return min(self.outbound.timestamp, self.inbound.timestamp)

    @property
    def time_off(self):
        return max(self.outbound.timestamp, self.inbound.timestamp)

    @property
    def spot_ids(self):
        return sorted({self.outbound.spot_id, self.inbound.spot_id})

    @property
    def outbound_band(self) -> Band:
        return band_for(self.outbound.frequency_mhz)

    @property
    def inbound_band(self) -> Band:
        return band_for(self.inbound.frequency_mhz)


@dataclass
class QsoSession:
    """
    Consecutive mutual pairs with one station, merged into a single contact.

    SNR keeps the best report in each direction, power the lowest.
    """

    operator_call: str
    remote_call: str
    operator_grid: str
    remote_grid: str
    time_on: datetime
    time_off: datetime
    outbound_snr_db: int
    inbound_snr_db: int
    outbound_power_dbm: int
    inbound_power_dbm: int
    outbound_drift_hz_per_s: int
    inbound_drift_hz_per_s: int
    outbound_frequency_mhz: float
    inbound_frequency_mhz: float
    distance_km: int
    spot_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_pair(cls, pair):
        out, inb = pair.outbound, pair.inbound
        return cls(
            operator_call=out.transmitter_call,
            remote_call=inb.transmitter_call,
            operator_grid=inb.reporter_grid,
            remote_grid=inb.transmitter_grid,
            time_on=pair.time_on,
            time_off=pair.time_off,
            outbound_snr_db=out.snr_db,
            inbound_snr_db=inb.snr_db,
            outbound_power_dbm=out.power_dbm,
            inbound_power_dbm=inb.power_dbm,
            outbound_drift_hz_per_s=out.drift_hz_per_s,
            inbound_drift_hz_per_s=inb.drift_hz_per_s,
            outbound_frequency_mhz=out.frequency_mhz,
            inbound_frequency_mhz=inb.frequency_mhz,
            distance_km=inb.distance_km,
            spot_ids=pair.spot_ids,
        )

    def update(self, pair):
        out, inb = pair.outbound, pair.inbound
        self.time_on = min(self.time_on, pair.time_on)
        self.time_off = max(self.time_off, pair.time_off)
        self.outbound_snr_db = max(self.outbound_snr_db, out.snr_db)
        self.inbound_snr_db = max(self.inbound_snr_db, inb.snr_db)
        self.outbound_drift_hz_per_s = max(self.outbound_drift_hz_per_s, out.drift_hz_per_s)
        self.inbound_drift_hz_per_s = max(self.inbound_drift_hz_per_s, inb.drift_hz_per_s)
        self.outbound_power_dbm = min(self.outbound_power_dbm, out.power_dbm)
        self.inbound_power_dbm = min(self.inbound_power_dbm, inb.power_dbm)
        self.spot_ids = sorted(set(self.spot_ids) | set(pair.spot_ids))

    @property
    def outbound_band(self) -> Band:
        return band_for(self.outbound_frequency_mhz)

    @property
    def inbound_band(self) -> Band:
        return band_for(self.inbound_frequency_mhz)


def _excluded_set(excluded):
    return {normalize_call(call) for call in excluded}


def score_spot(spot):
    return ScoredSpot(spot, spot_quality(spot))


def best_spots(spots, call, excluded=()) -> List[ScoredSpot]:
    """
    The best spot of every station `call` heard.

    Highest quality score wins; on a tie the later spot, then the higher
    spot id. Output is ordered by timestamp.
    """
    excluded = _excluded_set(excluded)
    best = {}

    for spot in filter_spots(spots, call, role="reporter"):
        remote = normalize_call(spot.transmitter_call)
        if remote in excluded or remote == normalize_call(call):
            continue

        scored = score_spot(spot)
        key = (scored.quality_score, spot.timestamp, spot.spot_id)
        current = best.get(remote)
        if current is None or key > (current.quality_score, current.spot.timestamp, current.spot.spot_id):
            best[remote] = scored

    logger.debug("Selected best spots for %d stations", len(best))
    return sorted(best.values(), key=lambda s: (s.spot.timestamp, s.spot.spot_id))


def _pair_order(pair):
    return (pair.time_on, pair.time_off, pair.outbound.spot_id, pair.inbound.spot_id)


def mutual_pairs(spots, call, window=DEFAULT_WINDOW, excluded=()) -> List[QsoPair]:
    """
    Every reciprocal pair of spots within `window` of each other.

    A spot is not consumed by a match, so it can be part of several pairs
    when more than one partner falls inside the window.
    """
    excluded = _excluded_set(excluded)
    as_reporter, as_transmitter = split_by_role(spots, call)

    inbound_by_remote = defaultdict(list)
    for spot in as_reporter:
        inbound_by_remote[normalize_call(spot.transmitter_call)].append(spot)

    outbound_by_remote = defaultdict(list)
    for spot in as_transmitter:
        outbound_by_remote[normalize_call(spot.reporter_call)].append(spot)

    pairs = []
    for remote in outbound_by_remote.keys() & inbound_by_remote.keys():
        if remote in excluded:
            continue

        for outbound in outbound_by_remote[remote]:
            for inbound in inbound_by_remote[remote]:
                if abs(outbound.timestamp - inbound.timestamp) <= window:
                    pairs.append(QsoPair(outbound, inbound))

    pairs.sort(key=_pair_order)
    logger.debug("Found %d mutual pairs from %d inbound and %d outbound spots",
                 len(pairs), len(as_reporter), len(as_transmitter))
    return pairs


def _session_key(pair) -> Tuple[str, str, str, Band, Band]:
    return (
        normalize_call(pair.remote_call),
        pair.inbound.reporter_grid.upper(),
        pair.inbound.transmitter_grid.upper(),
        pair.inbound_band,
        pair.outbound_band,
    )


def merge_pairs(pairs, window=DEFAULT_WINDOW) -> List[QsoSession]:
    """
    Collapse chains of pairs with the same station, grids and bands.

    A pair joins an open session when it starts no later than `window`
    after the session's last spot.
    """
    open_sessions = {}
    sessions = []

    for pair in sorted(pairs, key=_pair_order):
        key = _session_key(pair)
        session: Optional[QsoSession] = open_sessions.get(key)

        if session is not None and pair.time_on - session.time_off <= window:
            session.update(pair)
        else:
            session = QsoSession.from_pair(pair)
            open_sessions[key] = session
            sessions.append(session)

    sessions.sort(key=lambda s: (s.time_on, s.time_off, s.spot_ids))
    return sessions
