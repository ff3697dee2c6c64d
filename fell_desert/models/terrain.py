"""
Terrain classification for Fell Desert
Turns tile movement properties into a category, a name and a map symbol.

Used by both the map renderer (symbols) and the coordinate inspector (names).
"""

from enum import Enum
from typing import Dict, Optional


class TerrainType(Enum):
    STANDARD = "Standard"
    DIFFICULT = "Difficult"
    PIT = "Pit"
    WALL = "Wall"


TERRAIN_SYMBOLS: Dict[TerrainType, str] = {
    TerrainType.STANDARD: ".",
    TerrainType.DIFFICULT: "~",
    TerrainType.PIT: "_",
    TerrainType.WALL: "#",
}


def classify_terrain(movement_cost: Optional[float], can_stop: bool) -> TerrainType:
    """
    Classify a tile.

    Precedence matters: a missing movement cost is always a wall, even if
    can_stop is False (a wall is never reported as a pit).
    """
    if movement_cost is None:
        return TerrainType.WALL
    if not can_stop:
        return TerrainType.PIT
    if movement_cost == 1:
        return TerrainType.STANDARD
    return TerrainType.DIFFICULT


def terrain_name(movement_cost: Optional[float], can_stop: bool) -> str:
    return classify_terrain(movement_cost, can_stop).value


def terrain_to_symbol(movement_cost: Optional[float], can_stop: bool) -> str:
    return TERRAIN_SYMBOLS[classify_terrain(movement_cost, can_stop)]
