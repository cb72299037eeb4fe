"""
Exceptions for spot parsing and QSO reconstruction.
"""


class WsprQsoError(Exception):
    """Base exception for wspr-qso errors."""

    pass


class MalformedRow(WsprQsoError):
    """A spot row that could not be parsed. The row is skipped, not fatal."""

    def __init__(self, line_number, reason, row=""):
        self.line_number = line_number
        self.reason = reason
        self.row = row
        super().__init__(f"line {line_number}: {reason}")


class InvalidCallSign(WsprQsoError):
    """The operator call sign given on the command line is not usable."""

    pass


class IoFailure(WsprQsoError):
    """Reading the spot stream or writing the log failed."""

    pass
