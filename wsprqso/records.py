"""
Assembly of ADIF field sets from selected spots and mutual pairs.
"""

from typing import Dict

from .bands import UNKNOWN_BAND, band_for
from .correlate import QsoPair, QsoSession, ScoredSpot
from .metrics import describe, format_watts

# ADIF field name -> value, in output order
OutputRecord = Dict[str, str]

MODE = "WSPR"


def adif_date(dt):
    "Datetime object to ADIF date, requires an UTC datetime object"
    return dt.strftime("%Y%m%d")


def adif_time(dt):
    "Datetime object to ADIF time, requires an UTC datetime object"
    return dt.strftime("%H%M")


def adif_db(snr_db):
    "Signal report in dB, ADIF formatted"
    return f"{snr_db:+03d}"


def adif_freq(frequency_mhz):
    return f"{frequency_mhz:.6f}"


def _band(frequency_mhz):
    band = band_for(frequency_mhz)
    return None if band == UNKNOWN_BAND else band.adif


def _finish(record):
    record["MODE"] = MODE
    record["QSO_RANDOM"] = "Y"
    return {name: value for name, value in record.items() if value is not None}


def record_from_scored(scored: ScoredSpot) -> OutputRecord:
    """One-way record for the best spot of a station the operator heard."""
    spot = scored.spot
    band = band_for(spot.frequency_mhz)
    comment = describe(band, spot.power_dbm, spot.snr_db, spot.drift_hz_per_s,
                       spot.distance_km, frequency_mhz=spot.frequency_mhz)

    return _finish({
        "QSO_DATE": adif_date(spot.timestamp),
        "TIME_ON": adif_time(spot.timestamp),
        "OPERATOR": spot.reporter_call,
        "CALL": spot.transmitter_call,
        "MY_GRIDSQUARE": spot.reporter_grid,
        "GRIDSQUARE": spot.transmitter_grid,
        "RST_SENT": adif_db(spot.snr_db),
        "FREQ": adif_freq(spot.frequency_mhz),
        "BAND": _band(spot.frequency_mhz),
        "RX_PWR": format_watts(spot.power_dbm),
        "DISTANCE": str(spot.distance_km),
        "QSLMSG": comment,
        "COMMENT": comment,
        "NOTES": f"WSPRnet spot ID {spot.spot_id}, quality score {scored.quality_score}",
    })


def record_from_session(session: QsoSession) -> OutputRecord:
    """
    Two-way record.

    FREQ and BAND are the leg the operator heard, RX_FREQ and BAND_RX the leg
    the remote station heard. TX_PWR is the operator's power.
    """
    comment = describe(
        session.inbound_band,
        session.inbound_power_dbm,
        session.inbound_snr_db,
        session.inbound_drift_hz_per_s,
        session.distance_km,
        rx_band=session.outbound_band,
        frequency_mhz=session.inbound_frequency_mhz,
        rx_frequency_mhz=session.outbound_frequency_mhz,
        two_way=True,
    )

    return _finish({
        "QSO_DATE": adif_date(session.time_on),
        "TIME_ON": adif_time(session.time_on),
        "QSO_DATE_OFF": adif_date(session.time_off),
        "TIME_OFF": adif_time(session.time_off),
        "OPERATOR": session.operator_call,
        "CALL": session.remote_call,
        "MY_GRIDSQUARE": session.operator_grid,
        "GRIDSQUARE": session.remote_grid,
        "RST_SENT": adif_db(session.inbound_snr_db),
        "RST_RCVD": adif_db(session.outbound_snr_db),
        "FREQ": adif_freq(session.inbound_frequency_mhz),
        "RX_FREQ": adif_freq(session.outbound_frequency_mhz),
        "BAND": _band(session.inbound_frequency_mhz),
        "BAND_RX": _band(session.outbound_frequency_mhz),
        "TX_PWR": format_watts(session.outbound_power_dbm),
        "RX_PWR": format_watts(session.inbound_power_dbm),
        "DISTANCE": str(session.distance_km),
        "QSLMSG": comment,
        "COMMENT": comment,
        "NOTES": "WSPRnet spot IDs " + ", ".join(str(i) for i in session.spot_ids),
    })


def record_from_pair(pair: QsoPair) -> OutputRecord:
    return record_from_session(QsoSession.from_pair(pair))
