"""
Command line entry point: WSPRnet spot dump on stdin, ADIF log on stdout.

Usage:
  wspr-qso DL1ABC < wsprspots-2024-01.csv > wspr.adi
  wspr-qso DL1ABC --mode best < wsprspots-2024-01.csv
  wspr-qso DL1ABC --merge --map contacts_map.html < wsprspots-2024-01.csv
"""

import argparse
import logging
import math
import re
import sys
from datetime import datetime, timedelta, timezone

from . import __version__
from .adif import write_adif
from .correlate import DEFAULT_EXCLUDED, DEFAULT_WINDOW, best_spots, merge_pairs, mutual_pairs
from .exceptions import InvalidCallSign, IoFailure
from .records import record_from_pair, record_from_scored, record_from_session
from .spots import normalize_call, read_spots

PROGRAM_ID = "wspr-qso"

CALL_RE = re.compile(r"^(?=.*[0-9])(?=.*[A-Z])[A-Z0-9/]{3,}$")

# One month, the span of a WSPRnet archive
MAX_WINDOW_MINUTES = 31 * 24 * 60

HEADER_TITLES = {
    "mutual": "Mutual WSPR spots",
    "best": "Best WSPR spots",
}

logger = logging.getLogger(__name__)


def validate_call(call):
    """ Normalized operator call sign, InvalidCallSign if it cannot be one."""
    normalized = normalize_call(call or "")
    if not CALL_RE.match(normalized):
        raise InvalidCallSign(f"Invalid call sign: {call!r}")
    return normalized


def build_parser():
    parser = argparse.ArgumentParser(
        prog=PROGRAM_ID,
        description="Reconstruct WSPR QSOs for one call sign from a WSPRnet spot dump on stdin, as ADIF on stdout",
    )
    parser.add_argument("call", metavar="CALL", help="Operator call sign")
    parser.add_argument("--mode", choices=("mutual", "best"), default="mutual",
                        help="mutual: reciprocal spot pairs (default); best: best spot per station heard")
    parser.add_argument("--window", metavar="MINUTES", type=float,
                        default=DEFAULT_WINDOW.total_seconds() / 60,
                        help="Pairing tolerance in minutes, defaults to 4")
    parser.add_argument("--merge", action="store_true",
                        help="Merge consecutive pairs with one station into a single QSO")
    parser.add_argument("--exclude", metavar="CALL", nargs="*", default=None,
                        help=f"Call signs not to log, defaults to {' '.join(sorted(DEFAULT_EXCLUDED))}")
    parser.add_argument("--map", metavar="FILE", dest="map_file",
                        help="Also write an HTML map of the contacts")
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_records(spots, call, mode="mutual", window=DEFAULT_WINDOW, merge=False, excluded=DEFAULT_EXCLUDED):
    """ ADIF field sets for `call` from parsed spots."""
    if mode == "best":
        return [record_from_scored(s) for s in best_spots(spots, call, excluded=excluded)]

    pairs = mutual_pairs(spots, call, window=window, excluded=excluded)
    if merge:
        return [record_from_session(s) for s in merge_pairs(pairs, window=window)]
    return [record_from_pair(p) for p in pairs]


def run(args, stdin, stdout):
    call = validate_call(args.call)
    excluded = DEFAULT_EXCLUDED if args.exclude is None else frozenset(args.exclude)

    try:
        spots, malformed = read_spots(stdin)
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailure(f"Failed to read spots: {e}") from e

    records = build_records(spots, call, mode=args.mode, window=timedelta(minutes=args.window),
                            merge=args.merge, excluded=excluded)

    try:
        write_adif(stdout, call, records, datetime.now(timezone.utc), PROGRAM_ID, __version__,
                   title=HEADER_TITLES[args.mode])
        stdout.flush()
    except OSError as e:
        raise IoFailure(f"Failed to write log: {e}") from e

    if args.map_file:
        from .mapping import generate_map

        try:
            generate_map(records, args.map_file)
        except OSError as e:
            raise IoFailure(f"Failed to write map: {e}") from e
        print(f"Map saved as {args.map_file}", file=sys.stderr)

    contacts = {record["CALL"].upper() for record in records}
    print(f"Logged {len(records)} QSOs with {len(contacts)} unique call signs", file=sys.stderr)
    if malformed:
        print(f"Skipped {len(malformed)} malformed rows", file=sys.stderr)

    return records, malformed


def main(argv=None, stdin=None, stdout=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not math.isfinite(args.window) or not 0 <= args.window <= MAX_WINDOW_MINUTES:
        parser.error(f"--window must be between 0 and {MAX_WINDOW_MINUTES} minutes")

    try:
        validate_call(args.call)
    except InvalidCallSign as e:
        parser.error(str(e))

    try:
        run(args, stdin if stdin is not None else sys.stdin, stdout if stdout is not None else sys.stdout)
    except IoFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
