"""Test parsing of the referee feed and command formatting."""
import io
import pytest
from runtime.protocol import ProtocolError, TokenReader, format_command, read_catalog, read_turn
from scanner.model import Command, Drone, RadarDirection, Sighting

CATALOG = """3
4 0 0
5 0 1
6 1 2
"""

TURN = """10
5
1
4
0
2
0 3000 1000 0 30
1 7000 1000 1 20
2
2 3000 1200 0 30
3 7000 1200 0 30
1
0 5
2
5 3100 1500 10 -20
6 8000 8000 0 0
3
0 6 BR
1 5 BL
1 6 BR
"""


def reader_for(text: str) -> TokenReader:
    return TokenReader(io.StringIO(text))


def test_read_catalog():
    catalog = read_catalog(reader_for(CATALOG))
    assert len(catalog) == 3
    assert catalog.get(6).color == 1
    assert catalog.get(6).type == 2
    assert catalog.get(6).pos is None


def test_read_turn():
    reader = reader_for(CATALOG + TURN)
    catalog = read_catalog(reader)
    snap = read_turn(reader, catalog, turn=7)

    assert snap.turn == 7
    assert (snap.my_score, snap.foe_score) == (10, 5)
    assert snap.my_scans == frozenset({4})
    assert snap.foe_scans == frozenset()
    assert snap.my_drones == (Drone(0, (3000, 1000), False, 30), Drone(1, (7000, 1000), True, 20))
    assert [d.id for d in snap.foe_drones] == [2, 3]
    assert snap.carried_by(0) == frozenset({5})
    assert snap.visible[5] == Sighting((3100, 1500), (10, -20))
    assert snap.radar[(1, 5)] is RadarDirection.BOTTOM_LEFT
    assert len(snap.radar) == 3
    # Catalog keeps the latest sighting
    assert catalog.get(5).velocity == (10, -20)


def test_tokens_may_span_lines():
    reader = reader_for("2\n4 0\n0 5 1 1\n")
    catalog = read_catalog(reader)
    assert catalog.get(5).type == 1


def test_end_of_feed():
    reader = reader_for(CATALOG)
    catalog = read_catalog(reader)
    with pytest.raises(EOFError):
        read_turn(reader, catalog)


def test_bad_integer():
    with pytest.raises(ProtocolError):
        read_catalog(reader_for("2\n4 zero 0\n"))


def test_bad_radar_label():
    reader = reader_for(CATALOG + TURN.replace("1 6 BR", "1 6 XX"))
    catalog = read_catalog(reader)
    with pytest.raises(ProtocolError, match="XX"):
        read_turn(reader, catalog)


def test_format_command():
    assert format_command(Command(0, (5100, 5000), light=False)) == "MOVE 5100 5000 0"
    assert format_command(Command(1, (3000, 0), light=True)) == "MOVE 3000 0 1"
