import pytest

from ucibridge.engine import LineKind, SearchMode, classify_line


def test_bestmove_is_terminal_in_both_modes():
    for mode in SearchMode:
        assert classify_line("bestmove e2e4 ponder e7e5", mode) is LineKind.TERMINAL


def test_bestmove_must_prefix_the_line():
    assert classify_line("info string bestmove soon", SearchMode.ANALYZE) is LineKind.PLAIN


@pytest.mark.parametrize(
    "line",
    [
        "info string Found 510 WDL tablebases",
        "info string dtz 12",
        "info string Tablebase hit",
        "info depth 1 tbhits 3 pv f1f7",
        "info string wdl loss",
    ],
)
def test_tablebase_markers_are_hints_in_probe_mode(line):
    assert classify_line(line, SearchMode.PROBE) is LineKind.HINT


def test_tablebase_markers_are_plain_in_analyze_mode():
    line = "info string Found 510 WDL tablebases"
    assert classify_line(line, SearchMode.ANALYZE) is LineKind.PLAIN


def test_progress_lines_are_plain():
    for line in ("id name Stockfish 16", "uciok", "info depth 12 score cp 31 pv e2e4"):
        assert classify_line(line, SearchMode.PROBE) is LineKind.PLAIN
