"""
Tests for claim parsing and the fabric_claims command-line interface.
"""

import os

import pytest

from software_reference.claims import MAX_VALUE, make_claim, parse_claim, parse_claims, read_input
from software_reference.fabric import overlapping_area, overlapping_area_sweep
from software_reference.fabric_claims import main, solve
from software_reference.finder import find_non_overlapping_claim


TESTCASES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "testcases")
EXAMPLE_INPUT = os.path.join(TESTCASES, "example_input.txt")
DEFAULT_INPUT = os.path.join(TESTCASES, "default_input.txt")


def test_parse_claim():
    claim = parse_claim("#123 @ 3,2: 5x4")
    assert claim.id == 123
    assert (claim.rectangle.x.start, claim.rectangle.x.end) == (3, 8)
    assert (claim.rectangle.y.start, claim.rectangle.y.end) == (2, 6)


def test_parse_claim_strips_line_ending():
    assert parse_claim("#1 @ 1,3: 4x4\n") == make_claim(1, 1, 3, 4, 4)
    assert parse_claim("#1 @ 1,3: 4x4\r\n") == make_claim(1, 1, 3, 4, 4)


@pytest.mark.parametrize("line", [
    "",
    "# comment",
    "#1 @ 1,3 4x4",
    "#1 @ -1,3: 4x4",
    "#x @ 1,3: 4x4",
    "#1 @ 1,3: 4x4 extra",
    "claim #1 @ 1,3: 4x4",
    "  #1 @ 1,3: 4x4",
    "#1 @ 1,3: 4x4 ",
    "\t#1 @ 1,3: 4x4",
])
def test_malformed_lines_are_skipped(line):
    assert parse_claim(line) is None


def test_parse_claims_counts_skipped_lines():
    text = "#1 @ 1,3: 4x4\n\nnot a claim\n#2 @ 3,1: 4x4\n"
    claims, skipped = parse_claims(text)
    assert [claim.id for claim in claims] == [1, 2]
    assert skipped == 2


def test_field_out_of_range_is_fatal():
    with pytest.raises(ValueError):
        parse_claim(f"#1 @ {MAX_VALUE + 1},0: 1x1")
    with pytest.raises(ValueError):
        parse_claim(f"#1 @ {MAX_VALUE},0: 1x1")


def test_read_input_keeps_order(tmp_path):
    path = tmp_path / "claims.txt"
    path.write_text("#3 @ 5,5: 2x2\n#1 @ 1,3: 4x4\ngarbage\n#2 @ 3,1: 4x4\n")
    assert [claim.id for claim in read_input(str(path))] == [3, 1, 2]


def test_read_input_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_input(str(tmp_path / "missing.txt"))


def test_default_input():
    claims = read_input(DEFAULT_INPUT)
    assert len(claims) == 12
    assert overlapping_area(claims) == 39
    assert overlapping_area_sweep(claims) == 39
    assert find_non_overlapping_claim(claims).id == 3


def test_solve_methods_agree():
    claims = read_input(DEFAULT_INPUT)
    dense_area, dense_claim, _ = solve(claims, 'dense')
    sweep_area, sweep_claim, _ = solve(claims, 'sweep')
    assert (dense_area, dense_claim) == (sweep_area, sweep_claim)


def test_solve_unknown_method():
    with pytest.raises(ValueError):
        solve([], 'quadtree')


@pytest.mark.parametrize("method", ["dense", "sweep"])
def test_cli_example(capsys, method):
    assert main([EXAMPLE_INPUT, "--method", method]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["overlapping area: 4", "non-overlapping claim: 3"]


def test_cli_no_solution(capsys, tmp_path):
    path = tmp_path / "claims.txt"
    path.write_text("#1 @ 0,0: 2x2\n#2 @ 0,0: 2x2\n")

    assert main([str(path)]) == 1

    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["overlapping area: 4"]
    assert "no non-overlapping claim" in captured.err


def test_cli_verbose_statistics(capsys):
    assert main([DEFAULT_INPUT, "--verbose"]) == 0
    captured = capsys.readouterr()
    assert "overlapping area: 39" in captured.out
    assert "Fabric extent: 29x30" in captured.err
    assert "Claims: 12" in captured.err


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(OSError):
        main([str(tmp_path / "missing.txt")])
    assert capsys.readouterr().out == ""
