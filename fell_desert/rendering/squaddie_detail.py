"""
Squaddie detail formatting for Fell Desert
Name, affiliation, resources and active conditions.
"""

from typing import Dict, List

from fell_desert.models.mission import ConditionType, SquaddieCondition, SquaddieInfo

CONDITION_DISPLAY_NAMES: Dict[ConditionType, str] = {
    ConditionType.UNKNOWN: "Unknown",
    ConditionType.ABSORB: "Absorb",
    ConditionType.ARMOR: "Armor",
    ConditionType.ELUSIVE: "Elusive",
    ConditionType.SLOWED: "Slowed",
    ConditionType.HUSTLE: "Hustle",
}


def condition_type_name(condition_type: ConditionType) -> str:
    return CONDITION_DISPLAY_NAMES[condition_type]


def format_condition(condition: SquaddieCondition) -> str:
    """
    One condition line.

    "Armor: 3 (2 turns remaining)", "Slowed: 1", "Elusive (2 turns remaining)"
    or just "Hustle". Amount and duration are independent of each other.
    """
    result = condition_type_name(condition.type)

    if condition.amount is not None:
        result += f": {condition.amount}"

    if condition.duration is not None:
        result += f" ({condition.duration} turns remaining)"

    return result


def format_conditions(conditions: List[SquaddieCondition]) -> str:
    """Conditions block, or "" when the squaddie has none."""
    if not conditions:
        return ""

    lines = ["Conditions:"]
    lines.extend(f"  {format_condition(condition)}" for condition in conditions)
    return "\n".join(lines)


def format_squaddie_details(info: SquaddieInfo) -> str:
    lines = [
        info.name,
        f"Affiliation: {info.affiliation.value}",
        f"Hit Points: {info.current_hit_points}/{info.max_hit_points}",
        f"Action Points: {info.current_action_points}/{info.maximum_action_points}",
    ]

    conditions = format_conditions(info.conditions)
    if conditions:
        lines.append(conditions)

    return "\n".join(lines)
