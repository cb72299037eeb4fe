"""
Amateur radio band lookup by frequency.
"""

from typing import NamedTuple


class Band(NamedTuple):
    name: str
    unit: str

    @property
    def adif(self):
        """Band as an ADIF enumeration value, e.g. '80m'."""
        return f"{self.name}{self.unit}"

    @property
    def label(self):
        return f"{self.name} {self.unit}"


UNKNOWN_BAND = Band("", "")

# Inclusive band edges in Hz
BAND_EDGES = (
    (135_700, 137_800, Band("2200", "m")),
    (160_000, 190_000, Band("1750", "m")),
    (472_000, 479_000, Band("630", "m")),
    (1_800_000, 2_000_000, Band("160", "m")),
    (3_500_000, 4_000_000, Band("80", "m")),
    (5_060_000, 5_450_500, Band("60", "m")),
    (7_000_000, 7_300_000, Band("40", "m")),
    (10_100_000, 10_150_000, Band("30", "m")),
    (14_000_000, 14_350_000, Band("20", "m")),
    (18_068_000, 18_168_000, Band("17", "m")),
    (21_000_000, 21_450_000, Band("15", "m")),
    (24_890_000, 24_990_000, Band("12", "m")),
    (28_000_000, 29_700_000, Band("10", "m")),
    (40_000_000, 45_000_000, Band("8", "m")),
    (50_000_000, 54_000_000, Band("6", "m")),
    (54_000_001, 69_900_000, Band("5", "m")),
    (70_000_000, 71_000_000, Band("4", "m")),
    (144_000_000, 148_000_000, Band("2", "m")),
    (219_000_000, 225_000_000, Band("1.25", "m")),
    (420_000_000, 450_000_000, Band("70", "cm")),
    (902_000_000, 928_000_000, Band("33", "cm")),
    (1_240_000_000, 1_300_000_000, Band("23", "cm")),
    (2_300_000_000, 2_450_000_000, Band("13", "cm")),
    (3_300_000_000, 3_500_000_000, Band("9", "cm")),
    (5_600_000_000, 5_925_000_000, Band("6", "cm")),
    (10_000_000_000, 10_500_000_000, Band("3", "cm")),
    (24_000_000_000, 24_250_000_000, Band("1.25", "cm")),
    (47_000_000_000, 47_200_000_000, Band("6", "mm")),
    (75_500_000_000, 81_000_000_000, Band("4", "mm")),
    (119_980_000_000, 120_020_000_000, Band("2.5", "mm")),
    (142_000_000_000, 149_000_000_000, Band("2", "mm")),
    (241_000_000_000, 250_000_000_000, Band("1", "mm")),
)


def frequency_hz(frequency_mhz):
    return round(frequency_mhz * 1e6)


def band_for(frequency_mhz):
    """
    Convert a frequency in MHz to its amateur band.

    Frequencies outside every band map to UNKNOWN_BAND.
    """
    hz = frequency_hz(frequency_mhz)
    for low, high, band in BAND_EDGES:
        if low <= hz <= high:
            return band

    return UNKNOWN_BAND
