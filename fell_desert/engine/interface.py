"""
Mission engine interface for Fell Desert

===============================================================================
ENGINE CONTRACT
===============================================================================

The text interface never owns game state. It asks a MissionEngine for a
snapshot every time it needs one and formats the answer.

    CommandDispatcher (commands/dispatcher.py)
         |
         | query calls (read-only)
         v
    MissionEngine (abstract)
         |
         +-- FellDesertEngine: in-memory scenario (engine/harness.py)
         |
         +-- (the full mission engine plugs in here)

All queries are synchronous and side-effect free. transition_to_next_phase()
is the only call that mutates engine state: it advances exactly one phase.

===============================================================================
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from fell_desert.models.mission import (
    ActionDefinition,
    Coordinate,
    MapDimensions,
    MapOverview,
    MissionAffiliationTurn,
    MissionObjective,
    SquaddieActionValidity,
    SquaddieInfo,
    SquaddieRef,
    TerrainInfo,
)


class MissionEngine(ABC):
    """Capability surface the CLI consumes."""

    # ── Map ──────────────────────────────────────────────

    @abstractmethod
    def get_map_overview(self) -> MapOverview:
        pass

    @abstractmethod
    def get_map_dimensions(self) -> MapDimensions:
        pass

    @abstractmethod
    def get_terrain_at_coordinate(self, coordinate: Coordinate) -> TerrainInfo:
        pass

    @abstractmethod
    def get_squaddie_at_coordinate(self, coordinate: Coordinate) -> Optional[SquaddieRef]:
        pass

    # ── Squaddies ────────────────────────────────────────

    @abstractmethod
    def get_squaddie_position(self, squaddie_id: SquaddieRef) -> Optional[Coordinate]:
        """Board position, None when the squaddie is off map."""
        pass

    @abstractmethod
    def get_squaddie_info(self, squaddie_id: SquaddieRef) -> SquaddieInfo:
        pass

    @abstractmethod
    def get_squaddie_action_validity(self, squaddie_id: SquaddieRef) -> SquaddieActionValidity:
        pass

    @abstractmethod
    def get_action_by_id(self, action_id: str) -> Optional[ActionDefinition]:
        pass

    @abstractmethod
    def get_squaddies_who_can_act_this_phase(self) -> List[SquaddieRef]:
        pass

    # ── Turn ─────────────────────────────────────────────

    @abstractmethod
    def get_current_turn_number(self) -> int:
        pass

    @abstractmethod
    def get_current_affiliation_turn(self) -> MissionAffiliationTurn:
        pass

    @abstractmethod
    def transition_to_next_phase(self) -> None:
        """Advance the engine by one phase."""
        pass

    # ── Objectives ───────────────────────────────────────

    @abstractmethod
    def get_in_progress_mission_objectives(self) -> List[MissionObjective]:
        pass

    @abstractmethod
    def get_completed_but_not_rewarded_mission_objectives(self) -> List[MissionObjective]:
        pass

    @abstractmethod
    def get_completed_and_rewarded_mission_objectives(self) -> List[MissionObjective]:
        pass
