"""
Derived spot metrics: power conversions, quality score and descriptions.

The quality score ranks spots of one transmitter against each other. It
combines SNR, transmit power and distance in four stages and rounds at each
of them, so the same inputs always give the same integer:

1. ``snr_term = max(snr_db + 35, 0)``. WSPR decodes down to about -34 dB, so
   this is the margin above the decode floor. Integer, no rounding.
2. ``watts = 10 ** ((power_dbm - 30) / 10)`` rounded to 4 significant digits.
3. ``reach = distance_km / sqrt(watts)`` rounded to a whole number, the
   distance covered per root-watt.
4. ``score = snr_term * reach / 100`` rounded to a whole number.

Rounding uses Python's round(), which is round-half-to-even. The score is
non-decreasing in SNR and distance and non-increasing in power.
"""

import math
from decimal import Decimal

from .bands import UNKNOWN_BAND

SNR_FLOOR_DB = -35
SIGNIFICANT_DIGITS = 4

# (upper bound in W, unit scale, unit, rounding step in W, decimals)
POWER_FORMATS = (
    (1e-6, 1e9, "nW", None, 0),
    (1e-5, 1e6, "uW", None, 1),
    (1e-4, 1e6, "uW", 1e-6, 0),
    (1e-3, 1e6, "uW", 1e-5, 0),
    (1e-2, 1e3, "mW", None, 1),
    (1e-1, 1e3, "mW", 1e-3, 0),
    (1e0, 1e3, "mW", 1e-2, 0),
    (1e1, 1e0, "W", None, 1),
    (1e2, 1e0, "W", 1e0, 0),
    (1e3, 1e0, "W", 1e1, 0),
    (math.inf, 1e-3, "kW", None, 1),
)


def round_sig(value, digits=SIGNIFICANT_DIGITS):
    if value == 0:
        return 0.0
    return round(value, digits - 1 - math.floor(math.log10(abs(value))))


def format_sig(value, digits=SIGNIFICANT_DIGITS):
    """ Format to `digits` significant digits without exponent notation."""
    text = format(Decimal(repr(round_sig(value, digits))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def dbm_to_mw(dbm):
    return 10 ** (dbm / 10)


def dbm_to_watts(dbm):
    return 10 ** ((dbm - 30) / 10)


def format_mw(dbm):
    return format_sig(dbm_to_mw(dbm))


def format_watts(dbm):
    return format_sig(dbm_to_watts(dbm))


def format_power(dbm):
    """ Power with an SI prefix, e.g. 23 dBm -> '200 mW', 37 dBm -> '5.0 W'."""
    watts = dbm_to_watts(dbm)

    for upper, scale, unit, step, decimals in POWER_FORMATS:
        if watts < upper:
            if step is not None:
                watts = round(watts / step) * step
            return f"{watts * scale:.{decimals}f} {unit}"


def quality_score(snr_db, power_dbm, distance_km):
    """Composite spot quality, see the module docstring for the stages."""
    snr_term = max(snr_db - SNR_FLOOR_DB, 0)
    watts = round_sig(dbm_to_watts(power_dbm))
    reach = round(distance_km / math.sqrt(watts))
    return round(snr_term * reach / 100)


def spot_quality(spot):
    return quality_score(spot.snr_db, spot.power_dbm, spot.distance_km)


def band_label(band, frequency_mhz):
    if band == UNKNOWN_BAND:
        return f"{frequency_mhz:.6f} MHz"
    return band.label


def describe(band, power_dbm, snr_db, drift_hz_per_s, distance_km,
             rx_band=None, frequency_mhz=0.0, rx_frequency_mhz=0.0, two_way=False):
    """
    One-line summary of a spot or contact for COMMENT and QSLMSG.

    `rx_band` is the band the other direction was heard on; it is only
    mentioned when it differs from `band`.
    """
    bands = band_label(band, frequency_mhz)
    if rx_band is not None:
        rx_bands = band_label(rx_band, rx_frequency_mhz)
        if rx_bands != bands:
            bands = f"{bands} (RX {rx_bands})"

    kind = "2-way WSPR spot" if two_way else "WSPR spot"
    return (
        f"{kind} on {bands} with {format_power(power_dbm)} "
        f"({power_dbm} dBm, {format_mw(power_dbm)} mW), SNR {snr_db} dB, "
        f"drift {drift_hz_per_s:+d} Hz/s, distance {distance_km} km"
    )
