"""
Controllable squaddie listing for Fell Desert
Answers "who can act this phase?"
"""

from dataclasses import dataclass
from typing import List

from fell_desert.engine.interface import MissionEngine
from fell_desert.models.mission import MaybeOffMapCoordinate, SquaddieRef

NO_SQUADDIES_MESSAGE = "No squaddies can act this phase."


@dataclass
class ControllableSquaddieEntry:
    squaddie_id: SquaddieRef
    name: str
    current_action_points: int
    maximum_action_points: int
    coordinate: MaybeOffMapCoordinate


def gather_controllable_entries(engine: MissionEngine) -> List[ControllableSquaddieEntry]:
    """One entry per squaddie the engine says can act, in engine order."""
    entries = []
    for squaddie_id in engine.get_squaddies_who_can_act_this_phase():
        info = engine.get_squaddie_info(squaddie_id)
        entries.append(ControllableSquaddieEntry(
            squaddie_id=squaddie_id,
            name=info.name,
            current_action_points=info.current_action_points,
            maximum_action_points=info.maximum_action_points,
            coordinate=MaybeOffMapCoordinate.from_position(engine.get_squaddie_position(squaddie_id)),
        ))
    return entries


def _format_position(coordinate: MaybeOffMapCoordinate) -> str:
    if not coordinate.is_on_map:
        return "(off map)"
    return f"({coordinate.row},{coordinate.col})"


def format_controllable_entries(entries: List[ControllableSquaddieEntry]) -> str:
    if not entries:
        return NO_SQUADDIES_MESSAGE

    lines = ["Squaddies who can act:"]
    for entry in entries:
        lines.append(
            f"  {entry.name} {_format_position(entry.coordinate)}"
            f" - AP: {entry.current_action_points}/{entry.maximum_action_points}"
        )
    return "\n".join(lines)
