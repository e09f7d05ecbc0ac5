import pytest

from fire_escape.model.evaluator import can_escape
from fire_escape.model.grid import CellKind
from fire_escape.puzzles import PuzzleFormatError, format_puzzles, load_puzzles, parse_puzzles


def test_parse_multiple_puzzles():
    text = "2\n2 3\nD.S\n.F.\n1 2\nDS\n"
    grids = parse_puzzles(text)
    assert [g.shape for g in grids] == [(2, 3), (1, 2)]
    assert grids[0].kind_at(1, 1) is CellKind.HAZARD
    assert grids[1].find(CellKind.EXIT) == (0, 1)


def test_long_rows_truncated_and_unknown_characters_empty():
    grids = parse_puzzles("1\n1 3\nD?S####\n")
    assert grids[0].to_lines() == ["D.S"]


def test_header_tokens_may_share_a_line():
    grids = parse_puzzles("1 2 2\nDS\n..\n")
    assert grids[0].shape == (2, 2)


def test_short_row_is_an_error():
    with pytest.raises(PuzzleFormatError) as excinfo:
        parse_puzzles("1\n2 3\nD.S\n..\n")
    assert excinfo.value.puzzle == 1
    assert "too short" in str(excinfo.value)


def test_missing_rows_is_an_error():
    with pytest.raises(PuzzleFormatError):
        parse_puzzles("2\n1 2\nDS\n2 2\nD.\n")


def test_bad_header_values():
    with pytest.raises(PuzzleFormatError):
        parse_puzzles("x\n")
    with pytest.raises(PuzzleFormatError):
        parse_puzzles("1\n0 3\n")
    with pytest.raises(PuzzleFormatError):
        parse_puzzles("")
    # Still a ValueError for callers that do not know the subclass
    with pytest.raises(ValueError):
        parse_puzzles("1\n")


def test_zero_puzzles():
    assert parse_puzzles("0\n") == []


def test_load_and_format(tmp_path):
    text = "2\n2 2\nD.\n.S\n1 3\nF#S\n"
    path = tmp_path / "puzzles.txt"
    path.write_text(text)
    grids = load_puzzles(path)
    assert format_puzzles(grids) == text


@pytest.mark.parametrize("odd", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e"])
def test_control_characters_in_rows_become_empty(odd):
    grids = parse_puzzles(f"1\n1 3\nD{odd}S\n")
    assert grids[0].to_lines() == ["D.S"]
    assert can_escape(grids[0])


def test_crlf_line_endings():
    grids = parse_puzzles("1\r\n2 2\r\nD.\r\n.S\r\n")
    assert grids[0].to_lines() == ["D.", ".S"]
