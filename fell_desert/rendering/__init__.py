"""
Text formatters for Fell Desert.

Each formatter turns an engine snapshot into display text. None of them
keep state between calls.
"""

from .map_renderer import (
    MapRenderInfo,
    assign_squaddie_labels,
    build_squaddie_labels,
    render_map,
)
from .squaddie_detail import format_condition, format_conditions, format_squaddie_details
from .squaddie_actions import format_action_point_cost, format_squaddie_actions
from .controllable import (
    ControllableSquaddieEntry,
    format_controllable_entries,
    gather_controllable_entries,
)
from .objectives import (
    MissionObjectiveDisplayEntry,
    format_objective_entries,
    gather_objective_entries,
)

__all__ = [
    "MapRenderInfo",
    "assign_squaddie_labels",
    "build_squaddie_labels",
    "render_map",
    "format_condition",
    "format_conditions",
    "format_squaddie_details",
    "format_action_point_cost",
    "format_squaddie_actions",
    "ControllableSquaddieEntry",
    "format_controllable_entries",
    "gather_controllable_entries",
    "MissionObjectiveDisplayEntry",
    "format_objective_entries",
    "gather_objective_entries",
]
