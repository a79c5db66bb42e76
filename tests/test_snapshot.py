"""Test the per-turn snapshot and the creature catalog."""
import dataclasses
import pytest
from scanner.model import (
    Creature,
    CreatureCatalog,
    Drone,
    RadarDirection,
    Sighting,
    Snapshot,
    UnknownCreatureError,
)


def make_catalog() -> CreatureCatalog:
    return CreatureCatalog([Creature(4, 0, 0), Creature(5, 0, 1), Creature(6, 1, 2)])


def test_build_refreshes_visible_creatures():
    """Visible creatures get fresh positions; the others keep their last one."""
    catalog = make_catalog()
    Snapshot.build(catalog, visible={4: Sighting((100, 3000), (10, 0)), 5: Sighting((200, 6000), (0, 5))})
    Snapshot.build(catalog, turn=1, visible={5: Sighting((250, 6100), (5, 5))})

    assert catalog.get(4).pos == (100, 3000)
    assert catalog.get(4).velocity == (10, 0)
    assert catalog.get(5).pos == (250, 6100)
    assert catalog.get(6).pos is None


def test_refresh_skips_creatures_outside_catalog():
    catalog = make_catalog()
    Snapshot.build(catalog, visible={99: Sighting((0, 0), (0, 0))})
    assert 99 not in catalog
    assert len(catalog) == 3


def test_unknown_creature_lookup():
    with pytest.raises(UnknownCreatureError):
        make_catalog().get(42)
    # Still a KeyError for callers that only know about dict semantics
    with pytest.raises(KeyError):
        make_catalog().get(42)


def test_already_scanned_unions_banked_and_carried():
    snap = Snapshot.build(
        make_catalog(),
        my_scans=[4],
        my_drones=[Drone(0, (0, 0)), Drone(1, (0, 0))],
        drone_scans={0: [5]},
    )
    assert snap.already_scanned(0) == frozenset({4, 5})
    assert snap.already_scanned(1) == frozenset({4})
    assert snap.carried_by(1) == frozenset()


def test_snapshot_is_frozen_and_independent():
    """Each turn gets its own value; inputs mutated later do not leak in."""
    scans = {0: {5}}
    snap = Snapshot.build(make_catalog(), drone_scans=scans,
                          radar={(0, 6): RadarDirection.BOTTOM_LEFT})
    scans[0].add(6)

    assert snap.carried_by(0) == frozenset({5})
    assert snap.radar[(0, 6)] is RadarDirection.BOTTOM_LEFT
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.my_score = 10


def test_snapshot_maps_are_read_only():
    visible = {4: Sighting((100, 3000), (0, 0))}
    snap = Snapshot.build(make_catalog(), visible=visible, drone_scans={0: [5]},
                          radar={(0, 6): RadarDirection.TOP_LEFT})
    visible[5] = Sighting((0, 0), (0, 0))

    assert 5 not in snap.visible
    with pytest.raises(TypeError):
        snap.visible[4] = Sighting((0, 0), (0, 0))
    with pytest.raises(TypeError):
        snap.drone_scans[1] = frozenset()
    with pytest.raises(TypeError):
        del snap.radar[(0, 6)]
