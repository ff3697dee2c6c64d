"""
Coordinate commands for Fell Desert
Parses "row, col" input and describes what is at that spot.
"""

import re
from typing import Optional

from fell_desert.engine.interface import MissionEngine
from fell_desert.models.mission import Coordinate
from fell_desert.models.terrain import terrain_name

# "2, 0"  "3 5"  "(6, 10)"  "(1 2)"
COORDINATE_PATTERN = re.compile(r"^\(?(\d+)[,\s]+(\d+)\)?$")


def parse_coordinate(text: str) -> Optional[Coordinate]:
    """
    Parse text into a coordinate.

    Returns None for anything that is not two non-negative integers
    (optionally in parentheses), so callers can try their next route.
    """
    match = COORDINATE_PATTERN.match(text.strip())
    if match is None:
        return None
    try:
        return Coordinate(row=int(match.group(1)), col=int(match.group(2)))
    except ValueError:
        # Digit strings past the interpreter's int conversion limit
        return None


def is_on_map(engine: MissionEngine, coordinate: Coordinate) -> bool:
    dimensions = engine.get_map_dimensions()
    return (
        0 <= coordinate.row < dimensions.height
        and 0 <= coordinate.col < dimensions.width
    )


def inspect_coordinate(engine: MissionEngine, coordinate: Coordinate) -> str:
    """Terrain at the coordinate, plus the squaddie standing there (if any)."""
    label = coordinate.label()

    if not is_on_map(engine, coordinate):
        dimensions = engine.get_map_dimensions()
        return (
            f"{label} is off map (rows less than {dimensions.height}"
            f" and columns less than {dimensions.width} are valid.)"
        )

    terrain = engine.get_terrain_at_coordinate(coordinate)
    lines = [f"{label}: {terrain_name(terrain.movement_cost, terrain.can_stop)}"]

    squaddie_id = engine.get_squaddie_at_coordinate(coordinate)
    if squaddie_id is not None:
        info = engine.get_squaddie_info(squaddie_id)
        lines.append(info.name)
        lines.append(f"  Hit Points: {info.current_hit_points}/{info.max_hit_points}")
        lines.append(f"  Action Points: {info.current_action_points}/{info.maximum_action_points}")

    return "\n".join(lines)
