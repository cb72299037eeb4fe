"""
Maidenhead locator helpers.
"""

from geopy.distance import great_circle

DIGITS = "0123456789"

# Size of a square in degrees (lat, lon) at each precision
SQUARE_SIZE = {
    2: (10.0, 20.0),
    4: (1.0, 2.0),
    6: (2.5 / 60, 5.0 / 60),
    8: (2.5 / 600, 5.0 / 600),
}


def grid_to_latlon(maiden):
    """ South-west corner of a 2-8 character Maidenhead locator."""
    maiden = maiden.strip().upper()
    N = len(maiden)
    if not ((8 >= N >= 2) and (N % 2 == 0)):
        raise ValueError("Maidenhead locator requires 2-8 characters, even number of characters")

    Oa = ord("A")
    if not ("A" <= maiden[0] <= "R" and "A" <= maiden[1] <= "R"):
        raise ValueError(f"Invalid Maidenhead field in {maiden!r}")

    lon = -180.0 + (ord(maiden[0]) - Oa) * 20
    lat = -90.0 + (ord(maiden[1]) - Oa) * 10

    if N >= 4 and not (maiden[2] in DIGITS and maiden[3] in DIGITS):
        raise ValueError(f"Invalid Maidenhead square in {maiden!r}")
    if N >= 6 and not ("A" <= maiden[4] <= "X" and "A" <= maiden[5] <= "X"):
        raise ValueError(f"Invalid Maidenhead subsquare in {maiden!r}")
    if N >= 8 and not (maiden[6] in DIGITS and maiden[7] in DIGITS):
        raise ValueError(f"Invalid Maidenhead extended square in {maiden!r}")

    if N >= 4:
        lon += int(maiden[2]) * 2
        lat += int(maiden[3]) * 1
    if N >= 6:
        lon += (ord(maiden[4]) - Oa) * 5.0 / 60
        lat += (ord(maiden[5]) - Oa) * 2.5 / 60
    if N >= 8:
        lon += int(maiden[6]) * 5.0 / 600
        lat += int(maiden[7]) * 2.5 / 600

    return lat, lon


def grid_center(maiden):
    """ Centre of the square a locator describes."""
    lat, lon = grid_to_latlon(maiden)
    lat_size, lon_size = SQUARE_SIZE[len(maiden.strip())]
    return lat + lat_size / 2, lon + lon_size / 2


def grid_distance_km(grid_a, grid_b):
    """ Great-circle distance between two locators, in whole km."""
    return round(great_circle(grid_center(grid_a), grid_center(grid_b)).km)
