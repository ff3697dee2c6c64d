"""
Mission objective formatting for Fell Desert

Collects every objective the engine knows about (in progress, completed,
completed and rewarded) and splits them into what wins the mission and
what loses it:

    Objective:
    - Defeat enemy: slither-demon
    Failure:
    - Defeat players: lini

An objective is a failure condition only when one of its rewards is a
mission failure. The affiliation it tracks plays no part in that decision.
"""

from dataclasses import dataclass
from typing import Dict, List

from fell_desert.engine.interface import MissionEngine
from fell_desert.models.mission import (
    Affiliation,
    MissionObjective,
    MissionObjectiveCriteria,
    MissionObjectiveCriteriaType,
)

AFFILIATION_OBJECTIVE_WORDS: Dict[Affiliation, str] = {
    Affiliation.ENEMY: "enemy",
    Affiliation.PLAYER: "players",
    Affiliation.ALLY: "allies",
    Affiliation.NONE: "neutrals",
}


@dataclass
class MissionObjectiveDisplayEntry:
    description: str
    is_completed: bool
    is_failure_condition: bool


def _squaddie_ids_with_affiliation(engine: MissionEngine, affiliations: List[Affiliation]) -> List[str]:
    """Ids of every squaddie on the map in one of the affiliations, row-major."""
    matching = []
    for tile in engine.get_map_overview().squaddie_tiles():
        info = engine.get_squaddie_info(tile.squaddie_id)
        if info.affiliation in affiliations:
            matching.append(tile.squaddie_id.out_of_battle_squaddie_id)
    return matching


def describe_criteria(engine: MissionEngine, criteria: MissionObjectiveCriteria) -> str:
    if criteria.affiliations:
        word = AFFILIATION_OBJECTIVE_WORDS[criteria.affiliations[0]]
        names = _squaddie_ids_with_affiliation(engine, criteria.affiliations)
        return f"Defeat {word}: {', '.join(names)}"

    if criteria.out_of_battle_squaddie_ids:
        return f"Defeat: {', '.join(criteria.out_of_battle_squaddie_ids)}"

    return "Defeat squaddies"


def objective_to_entry(
        engine: MissionEngine,
        objective: MissionObjective,
        is_completed: bool,
) -> MissionObjectiveDisplayEntry:
    descriptions = [
        describe_criteria(engine, criteria)
        for criteria in objective.criteria
        if criteria.type == MissionObjectiveCriteriaType.SQUADDIES_DEFEATED
    ]
    return MissionObjectiveDisplayEntry(
        description="; ".join(descriptions),
        is_completed=is_completed,
        is_failure_condition=objective.is_failure_condition,
    )


def gather_objective_entries(engine: MissionEngine) -> List[MissionObjectiveDisplayEntry]:
    entries = [
        objective_to_entry(engine, objective, False)
        for objective in engine.get_in_progress_mission_objectives()
    ]
    entries.extend(
        objective_to_entry(engine, objective, True)
        for objective in engine.get_completed_but_not_rewarded_mission_objectives()
    )
    entries.extend(
        objective_to_entry(engine, objective, True)
        for objective in engine.get_completed_and_rewarded_mission_objectives()
    )
    return entries


def _format_section(header: str, entries: List[MissionObjectiveDisplayEntry]) -> List[str]:
    if not entries:
        return []

    # Stable sort: completed first, otherwise engine order
    ordered = sorted(entries, key=lambda entry: not entry.is_completed)

    lines = [header]
    for entry in ordered:
        done = " [DONE]" if entry.is_completed else ""
        lines.append(f"- {entry.description}{done}")
    return lines


def format_objective_entries(entries: List[MissionObjectiveDisplayEntry]) -> str:
    """Objective section then Failure section, or "" with nothing to show."""
    if not entries:
        return ""

    objectives = [entry for entry in entries if not entry.is_failure_condition]
    failures = [entry for entry in entries if entry.is_failure_condition]

    lines = _format_section("Objective:", objectives)
    lines.extend(_format_section("Failure:", failures))
    return "\n".join(lines)
