"""
Shared spot rows for the test suite.
"""

import pytest

from wsprqso.spots import parse_spot

OPERATOR = "DL1ABC"
OPERATOR_GRID = "JO62qm"
REMOTE = "VK2XYZ"
REMOTE_GRID = "QF56od"


def make_row(spot_id, timestamp, reporter, reporter_grid, snr, frequency, call, grid,
             power=37, drift=0, distance="13805", band="7"):
    """ Compact 12 column spot row."""
    return ",".join(str(v) for v in (
        spot_id, timestamp, reporter, reporter_grid, snr, frequency,
        call, grid, power, drift, distance, band,
    ))


def make_spot(spot_id, timestamp, reporter, call, snr=-20, frequency=7.040100,
              power=37, drift=0, distance=13805, reporter_grid=None, grid=None):
    reporter_grid = reporter_grid or (OPERATOR_GRID if reporter == OPERATOR else REMOTE_GRID)
    grid = grid or (OPERATOR_GRID if call == OPERATOR else REMOTE_GRID)
    return parse_spot(make_row(spot_id, timestamp, reporter, reporter_grid, snr, frequency,
                               call, grid, power, drift, distance))


@pytest.fixture
def reciprocal_rows():
    """Operator hears the remote at 21:20 on 80 m, the remote hears the operator at 21:24 on 40 m."""
    return [
        make_row(101, "2024-01-15 21:20", OPERATOR, OPERATOR_GRID, -29, "3.570100",
                 REMOTE, REMOTE_GRID, power=37, drift=0, band="3"),
        make_row(102, "2024-01-15 21:24", REMOTE, REMOTE_GRID, -29, "7.040100",
                 OPERATOR, OPERATOR_GRID, power=23, drift=-1, band="7"),
    ]
