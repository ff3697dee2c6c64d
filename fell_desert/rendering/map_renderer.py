"""
Map Renderer for Fell Desert
Draws the hex-offset battle map as plain text.

Output, top to bottom:
    Turn 0 - Player Phase       (only with MapRenderInfo)
    Map: 5 columns x 4 rows
    L . ~ . .                   (odd rows shifted one space for the hex offset)
     . _ . # .
    <legend>
    Squaddies:                  (only if anyone is on the map)
      Player:
        L = lini (0,0)
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fell_desert.models.mission import (
    AFFILIATION_ORDER,
    Affiliation,
    MapOverview,
    MapTile,
    affiliation_display_name,
)
from fell_desert.models.terrain import terrain_to_symbol

# Disambiguation looks at most this far into a squaddie id
MAX_LABEL_OFFSET = 19

LEGEND_LINES = [
    "",
    "Legend:",
    "  . = Normal terrain",
    "  ~ = Rough terrain",
    "  _ = Pit (cannot stop)",
    "  # = Wall (impassable)",
]


@dataclass
class MapRenderInfo:
    """
    Extra context for the map header and the grouped squaddie listing.

    Attributes:
        turn_number: Current mission turn
        current_affiliation: Whose phase it is, None between phases
        squaddie_affiliations: out-of-battle squaddie id -> affiliation
    """
    turn_number: int
    current_affiliation: Optional[Affiliation] = None
    squaddie_affiliations: Dict[str, Affiliation] = field(default_factory=dict)


# ════════════════════════════════════════════════════════════
# SQUADDIE LABELS
# ════════════════════════════════════════════════════════════

def _first_char(squaddie_id: str) -> str:
    return squaddie_id[0].upper() if squaddie_id else "?"


def assign_squaddie_labels(squaddie_ids: List[str]) -> Dict[str, str]:
    """
    Give every squaddie id a unique label for the grid.

    Ids are grouped by their uppercased first character. A lone id gets that
    character. A crowded group tries offsets 1..MAX_LABEL_OFFSET into each id
    (ids too short for the offset fall back to their first character) and
    takes the first offset where every member gets a different character that
    no other squaddie already uses. If none works, members become
    first character + index within the group ("L0", "L1").
    """
    unique_ids = list(dict.fromkeys(squaddie_ids))

    groups: Dict[str, List[str]] = {}
    for squaddie_id in unique_ids:
        groups.setdefault(_first_char(squaddie_id), []).append(squaddie_id)

    labels: Dict[str, str] = {}
    for first_char, ids in groups.items():
        if len(ids) == 1:
            labels[ids[0]] = first_char

    for first_char, ids in groups.items():
        if len(ids) > 1:
            labels.update(_disambiguate_labels(first_char, ids, set(labels.values())))

    return labels


def _disambiguate_labels(first_char: str, ids: List[str], taken: set) -> Dict[str, str]:
    for offset in range(1, MAX_LABEL_OFFSET + 1):
        candidates = [
            (squaddie_id[offset] if offset < len(squaddie_id) else first_char).upper()
            for squaddie_id in ids
        ]
        if len(set(candidates)) == len(candidates) and not taken.intersection(candidates):
            return dict(zip(ids, candidates))

    return {squaddie_id: f"{first_char}{index}" for index, squaddie_id in enumerate(ids)}


def build_squaddie_labels(overview: MapOverview) -> Dict[str, str]:
    """Labels for every squaddie on the map, scanned row by row."""
    return assign_squaddie_labels([
        tile.squaddie_id.out_of_battle_squaddie_id
        for tile in overview.squaddie_tiles()
    ])


# ════════════════════════════════════════════════════════════
# SECTIONS
# ════════════════════════════════════════════════════════════

def _render_turn_header(render_info: MapRenderInfo) -> str:
    if render_info.current_affiliation is None:
        return f"Turn {render_info.turn_number}"
    phase = affiliation_display_name(render_info.current_affiliation)
    return f"Turn {render_info.turn_number} - {phase} Phase"


def _render_grid_lines(overview: MapOverview, labels: Dict[str, str]) -> List[str]:
    lines = []
    for row_index, row in enumerate(overview.tiles):
        indent = " " if row_index % 2 == 1 else ""
        cells = []
        for tile in row:
            if tile.squaddie_id is not None:
                cells.append(labels[tile.squaddie_id.out_of_battle_squaddie_id])
            else:
                cells.append(terrain_to_symbol(tile.movement_cost, tile.can_stop))
        lines.append(indent + " ".join(cells))
    return lines


def _squaddie_line(tile: MapTile, labels: Dict[str, str], indent: str) -> str:
    squaddie_id = tile.squaddie_id.out_of_battle_squaddie_id
    return f"{indent}{labels[squaddie_id]} = {squaddie_id} ({tile.row},{tile.col})"


def _render_squaddie_list(
        overview: MapOverview,
        labels: Dict[str, str],
        render_info: Optional[MapRenderInfo],
) -> List[str]:
    tiles = overview.squaddie_tiles()
    if not tiles:
        return []

    lines = ["Squaddies:"]

    if render_info is None:
        lines.extend(_squaddie_line(tile, labels, "  ") for tile in tiles)
        return lines

    # Unknown squaddies are listed as unaffiliated
    by_affiliation: Dict[Affiliation, List[MapTile]] = {}
    for tile in tiles:
        affiliation = render_info.squaddie_affiliations.get(
            tile.squaddie_id.out_of_battle_squaddie_id, Affiliation.NONE
        )
        by_affiliation.setdefault(affiliation, []).append(tile)

    for affiliation in AFFILIATION_ORDER:
        members = by_affiliation.get(affiliation)
        if not members:
            continue
        lines.append(f"  {affiliation_display_name(affiliation)}:")
        lines.extend(_squaddie_line(tile, labels, "    ") for tile in members)

    return lines


def render_map(overview: MapOverview, render_info: Optional[MapRenderInfo] = None) -> str:
    """Render the full map view as a single string."""
    labels = build_squaddie_labels(overview)

    lines = []
    if render_info is not None:
        lines.append(_render_turn_header(render_info))
    lines.append(f"Map: {overview.width} columns x {overview.height} rows")
    lines.extend(_render_grid_lines(overview, labels))
    lines.extend(LEGEND_LINES)
    lines.extend(_render_squaddie_list(overview, labels, render_info))

    return "\n".join(lines)
