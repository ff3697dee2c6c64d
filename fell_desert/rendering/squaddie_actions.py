"""
Squaddie action menu formatting for Fell Desert

Renders what a squaddie could do right now:

    Actions:
      Invalid:
        Scimitar - No applicable targets in range
      Valid:
        End Turn (all AP)
        Move

Invalid actions always come first, whatever order the engine reported.
"""

from typing import Dict, Optional

from fell_desert.models.mission import (
    ALL_ACTION_POINTS,
    ActionDefinition,
    ActionPointCost,
    SquaddieActionValidity,
)


def format_action_point_cost(cost: ActionPointCost) -> str:
    """AP suffix: " (1 AP)", " (all AP)", or "" for free actions."""
    if cost is None or cost == 0:
        return ""
    if cost == ALL_ACTION_POINTS:
        return " (all AP)"
    return f" ({cost} AP)"


def format_squaddie_actions(
        validity: SquaddieActionValidity,
        actions_by_id: Dict[str, Optional[ActionDefinition]],
) -> str:
    """
    Format the action menu.

    Args:
        validity: Valid/invalid actions from the engine
        actions_by_id: Action definitions used to look up AP costs.
                       Missing entries are shown without a cost.

    Returns:
        The menu, or "" if the squaddie has no actions at all
    """
    if not validity.invalid_actions and not validity.valid_actions:
        return ""

    lines = ["Actions:"]

    if validity.invalid_actions:
        lines.append("  Invalid:")
        for action in validity.invalid_actions:
            lines.append(f"    {action.action_name} - {action.reason}")

    if validity.valid_actions:
        lines.append("  Valid:")
        for action in validity.valid_actions:
            definition = actions_by_id.get(action.action_id)
            cost = definition.action_points_spent if definition is not None else None
            lines.append(f"    {action.action_name}{format_action_point_cost(cost)}")

    return "\n".join(lines)
