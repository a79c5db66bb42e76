from typing import Dict, List, Optional
from .geometry import clamp_coord, distance, step_toward
from .model import (
    DEFAULT_TUNING,
    MAP_MAX,
    TYPE_PRIORITY,
    UNKNOWN_TYPE_PRIORITY,
    Command,
    CreatureCatalog,
    Drone,
    Point,
    Snapshot,
    Target,
    Tuning,
)

class DecisionEngine:
    """Pure per-turn decision logic: one greedy command per drone."""

    def __init__(self, catalog: CreatureCatalog, tuning: Tuning = DEFAULT_TUNING,
                 type_priority: Optional[Dict[int, int]] = None):
        self.catalog = catalog
        self.tuning = tuning
        self.type_priority = dict(TYPE_PRIORITY if type_priority is None else type_priority)

    def priority(self, creature_type: int) -> int:
        """Pursuit weight of a creature type, 0 for types outside the table."""
        return self.type_priority.get(creature_type, UNKNOWN_TYPE_PRIORITY)

    def select_target(self, drone: Drone, snapshot: Snapshot) -> Optional[Target]:
        """Pick the best visible creature this drone has not scanned yet."""
        done = snapshot.already_scanned(drone.id)
        best: Optional[Target] = None

        for creature_id, sighting in snapshot.visible.items():
            if creature_id in done:
                continue

            dist = distance(drone.pos, sighting.pos)
            creature = self.catalog.get(creature_id)
            score = self.priority(creature.type) * self.tuning.score_scale / (dist + 1)

            # Exact ties go to the closer creature
            if best is None or score > best.score or (score == best.score and dist < best.distance):
                best = Target(creature_id, sighting.pos, dist, score)

        return best

    def wants_light(self, drone: Drone, target: Optional[Target]) -> bool:
        if target is None:
            return False
        return drone.battery > self.tuning.light_battery and target.distance > self.tuning.light_distance

    def explore(self, pos: Point) -> Point:
        """Waypoint used when nothing worth chasing is visible."""
        t = self.tuning
        x, y = pos
        if y < t.shallow_depth:
            # Shallow: sweep toward the other half while diving
            if x < MAP_MAX // 2:
                return (clamp_coord(x + t.explore_dx), clamp_coord(y + t.explore_dy))
            return (clamp_coord(x - t.explore_dx), clamp_coord(y + t.explore_dy))
        # Deep: head back up
        return (x, clamp_coord(y - t.explore_dy))

    def avoid_edges(self, pos: Point) -> Point:
        """Pull a coordinate hugging a map edge back to the interior."""
        return (self._unstick(pos[0]), self._unstick(pos[1]))

    def _unstick(self, v: int) -> int:
        t = self.tuning
        if v <= t.edge_margin:
            return t.edge_low_snap
        if v >= MAP_MAX - t.edge_margin:
            return t.edge_high_snap
        return v

    def plan_move(self, drone: Drone, snapshot: Snapshot) -> Command:
        """Decide the command for a single drone."""
        if drone.emergency:
            return Command(drone.id, (drone.pos[0], 0), light=False, reason="emergency")

        target = self.select_target(drone, snapshot)
        if target is not None:
            waypoint = target.pos
        else:
            waypoint = self.explore(drone.pos)

        move_to = step_toward(drone.pos, waypoint, self.tuning.max_move)
        move_to = self.avoid_edges(move_to)

        if target is None:
            return Command(drone.id, move_to, light=False, reason="explore")
        return Command(drone.id, move_to, light=self.wants_light(drone, target),
                       reason="pursue", creature_id=target.creature_id)

    def decide(self, snapshot: Snapshot) -> List[Command]:
        """Return one command per owned drone, in snapshot order."""
        return [self.plan_move(drone, snapshot) for drone in snapshot.my_drones]
