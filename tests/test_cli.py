"""
End-to-end tests for the command line.
"""

from io import StringIO

import adif_io
import pytest

from wsprqso.cli import main, validate_call
from wsprqso.exceptions import InvalidCallSign

from .conftest import OPERATOR, OPERATOR_GRID, REMOTE, REMOTE_GRID, make_row


def run_cli(argv, lines):
    stdin = StringIO("".join(line + "\n" for line in lines))
    stdout = StringIO()
    status = main(argv, stdin=stdin, stdout=stdout)
    qsos, headers = adif_io.read_from_string(stdout.getvalue())
    return status, qsos, headers


class FailingStream:
    def __iter__(self):
        raise OSError("stream closed")


class TestMutualMode:
    """Test the default mutual mode."""

    def test_reciprocal_rows(self, reciprocal_rows, capsys):
        status, qsos, headers = run_cli([OPERATOR], reciprocal_rows)

        assert status == 0
        assert headers["ADIF_VER"] == "3.1.1"
        assert len(qsos) == 1
        qso = qsos[0]
        assert qso["TIME_ON"] == "2120"
        assert qso["TIME_OFF"] == "2124"
        assert qso["BAND"] == "80m"
        assert qso["BAND_RX"] == "40m"
        assert qso["DISTANCE"] == "13805"
        assert qso["OPERATOR"] == OPERATOR
        assert qso["CALL"] == REMOTE
        assert qso["MODE"] == "WSPR"
        assert qso["QSO_RANDOM"] == "Y"
        assert "Logged 1 QSOs with 1 unique call signs" in capsys.readouterr().err

    def test_lower_case_call(self, reciprocal_rows):
        status, qsos, _ = run_cli(["dl1abc"], reciprocal_rows)
        assert status == 0
        assert len(qsos) == 1

    def test_malformed_rows_are_skipped(self, reciprocal_rows, capsys):
        status, qsos, _ = run_cli([OPERATOR], ["not,a,spot"] + reciprocal_rows + ["1,2"])

        assert status == 0
        assert len(qsos) == 1
        assert "Skipped 2 malformed rows" in capsys.readouterr().err

    @pytest.mark.parametrize("bad_row", [
        "9,99999999999999999,DL1ABC,JO62qm,-29,3.5701,VK2XYZ,QF56od,37,0,13805,3",
        "9,1705353600,DL1ABC,JO62qm,-29,inf,VK2XYZ,QF56od,37,0,13805,3",
        "9,1705353600,DL1ABC,JO62qm,-29,nan,VK2XYZ,QF56od,37,0,13805,3",
        "9,1705353600,DL1ABC,JO62qm,-29,1e400,VK2XYZ,QF56od,37,0,13805,3",
        "9,1705353600,DL1ABC,JO62qm,-29,3.5701,VK2XYZ,QF56od,4000,0,13805,3",
        "9,1705353600,DL1ABC,JO62qm,-29,3.5701,VK2XYZ,QF56od,-4000,0,13805,3",
    ])
    @pytest.mark.parametrize("mode", ["mutual", "best"])
    def test_out_of_range_row_is_skipped(self, reciprocal_rows, bad_row, mode, capsys):
        status, qsos, _ = run_cli([OPERATOR, "--mode", mode], reciprocal_rows + [bad_row])

        assert status == 0
        assert len(qsos) == 1
        assert "Skipped 1 malformed rows" in capsys.readouterr().err

    def test_header_names_the_mode(self, reciprocal_rows):
        stdout = StringIO()
        main([OPERATOR, "--mode", "best"], stdin=StringIO("\n".join(reciprocal_rows)), stdout=stdout)
        assert stdout.getvalue().startswith("Best WSPR spots for DL1ABC\n")

        stdout = StringIO()
        main([OPERATOR], stdin=StringIO("\n".join(reciprocal_rows)), stdout=stdout)
        assert stdout.getvalue().startswith("Mutual WSPR spots for DL1ABC\n")

    def test_no_matches(self, reciprocal_rows):
        status, qsos, headers = run_cli(["G4XYZ"], reciprocal_rows)

        assert status == 0
        assert qsos == []
        assert headers["PROGRAMID"] == "wspr-qso"

    def test_window_option(self):
        rows = [
            make_row(1, "2024-01-15 21:20", OPERATOR, OPERATOR_GRID, -20, "7.0401", REMOTE, REMOTE_GRID),
            make_row(2, "2024-01-15 21:30", REMOTE, REMOTE_GRID, -20, "7.0401", OPERATOR, OPERATOR_GRID),
        ]
        assert run_cli([OPERATOR], rows)[1] == []
        assert len(run_cli([OPERATOR, "--window", "10"], rows)[1]) == 1

    def test_merge_option(self):
        rows = [
            make_row(1, "2024-01-15 21:20", OPERATOR, OPERATOR_GRID, -20, "7.0401", REMOTE, REMOTE_GRID),
            make_row(2, "2024-01-15 21:22", REMOTE, REMOTE_GRID, -20, "7.0401", OPERATOR, OPERATOR_GRID),
            make_row(3, "2024-01-15 21:24", OPERATOR, OPERATOR_GRID, -20, "7.0401", REMOTE, REMOTE_GRID),
        ]
        assert len(run_cli([OPERATOR], rows)[1]) == 2

        _, qsos, _ = run_cli([OPERATOR, "--merge"], rows)
        assert len(qsos) == 1
        assert qsos[0]["NOTES"] == "WSPRnet spot IDs 1, 2, 3"

    def test_default_exclusions(self):
        rows = [
            make_row(1, "2024-01-15 21:20", OPERATOR, OPERATOR_GRID, -20, "7.0401", "DL6WAB", "JO31"),
            make_row(2, "2024-01-15 21:22", "DL6WAB", "JO31", -20, "7.0401", OPERATOR, OPERATOR_GRID),
        ]
        assert run_cli([OPERATOR], rows)[1] == []
        assert len(run_cli([OPERATOR, "--exclude"], rows)[1]) == 1

    def test_map_option(self, reciprocal_rows, tmp_path):
        output = tmp_path / "contacts_map.html"
        status, _, _ = run_cli([OPERATOR, "--map", str(output)], reciprocal_rows)

        assert status == 0
        assert REMOTE in output.read_text(encoding="utf-8")


class TestBestMode:
    """Test the legacy best spot mode."""

    def test_higher_score_wins(self):
        rows = [
            make_row(1, "2024-01-15 21:20", OPERATOR, OPERATOR_GRID, -25, "3.5701", REMOTE, REMOTE_GRID),
            make_row(2, "2024-01-15 21:40", OPERATOR, OPERATOR_GRID, -12, "3.5701", REMOTE, REMOTE_GRID),
        ]
        status, qsos, _ = run_cli([OPERATOR, "--mode", "best"], rows)

        assert status == 0
        assert len(qsos) == 1
        assert qsos[0]["TIME_ON"] == "2140"
        assert qsos[0]["RST_SENT"] == "-12"
        assert "TIME_OFF" not in qsos[0]


class TestErrors:
    """Test argument and stream failures."""

    def test_missing_call(self):
        with pytest.raises(SystemExit) as excinfo:
            main([], stdin=StringIO(""), stdout=StringIO())
        assert excinfo.value.code == 2

    @pytest.mark.parametrize("call", ["", "ABC", "123", "DL1 ABC", "DL1-ABC"])
    def test_invalid_call(self, call):
        with pytest.raises(SystemExit) as excinfo:
            main([call], stdin=StringIO(""), stdout=StringIO())
        assert excinfo.value.code == 2

    def test_read_failure(self, capsys):
        assert main([OPERATOR], stdin=FailingStream(), stdout=StringIO()) == 1
        assert "Failed to read spots" in capsys.readouterr().err

    @pytest.mark.parametrize("window", ["-1", "nan", "inf", "-inf", "1e300"])
    def test_bad_window(self, window):
        with pytest.raises(SystemExit) as excinfo:
            main([OPERATOR, "--window", window], stdin=StringIO(""), stdout=StringIO())
        assert excinfo.value.code == 2


class TestValidateCall:
    """Test call sign validation."""

    @pytest.mark.parametrize("call, expected", [
        ("DL1ABC", "DL1ABC"),
        (" vk2xyz ", "VK2XYZ"),
        ("DL1ABC/P", "DL1ABC/P"),
        ("PA/G4XYZ", "PA/G4XYZ"),
    ])
    def test_valid(self, call, expected):
        assert validate_call(call) == expected

    def test_invalid(self):
        with pytest.raises(InvalidCallSign):
            validate_call("N0-CALL")
