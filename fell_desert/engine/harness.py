"""
In-memory mission engine for Fell Desert
Runs the "Battle of Fell Desert" scenario without the full mission engine.

The CLI uses it as its default engine and the test suite uses it as a
known fixture:

    L . ~ . .          L = lini (Lini, PLAYER)
     . _ . # .         S = slither-demon (Slither Demon, ENEMY)
    . . . . ~
     ~ . _ . S

Phase progression:
    TURN_START -> PLAYER_TURN_START -> PLAYER_TURN -> PLAYER_TURN_END
               -> ENEMY_TURN_START -> ... -> next TURN_START
Affiliations without squaddies on the map are skipped. An affiliation's
TURN phase does not end while one of its squaddies still has action points.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from fell_desert.engine.interface import MissionEngine
from fell_desert.models.mission import (
    AFFILIATION_ORDER,
    ALL_ACTION_POINTS,
    ActionDefinition,
    Affiliation,
    Coordinate,
    InvalidAction,
    MapDimensions,
    MapOverview,
    MapTile,
    MissionAffiliationTurn,
    MissionObjective,
    MissionObjectiveCriteria,
    MissionObjectiveCriteriaType,
    MissionObjectiveReward,
    MissionObjectiveRewardType,
    SquaddieActionValidity,
    SquaddieCondition,
    SquaddieInfo,
    SquaddieRef,
    TerrainInfo,
    ValidAction,
)

# Same symbols the map renderer prints
FELL_DESERT_TERRAIN = [
    ". . ~ . .",
    " . _ . # .",
    ". . . . ~",
    " ~ . _ . .",
]

TERRAIN_BY_SYMBOL: Dict[str, TerrainInfo] = {
    ".": TerrainInfo(movement_cost=1, can_stop=True),
    "~": TerrainInfo(movement_cost=2, can_stop=True),
    "_": TerrainInfo(movement_cost=1, can_stop=False),
    "#": TerrainInfo(movement_cost=None, can_stop=False),
}

END_TURN_ACTION_ID = "default-end-turn"
MOVE_ACTION_ID = "default-move"

NO_TARGETS_REASON = "No applicable targets in range"
NO_ACTION_POINTS_REASON = "No action points remaining"

# Which side of the fight each affiliation is on. NONE fights nobody.
SIDES: Dict[Affiliation, str] = {
    Affiliation.PLAYER: "friendly",
    Affiliation.ALLY: "friendly",
    Affiliation.ENEMY: "hostile",
}


def are_foes(first: Affiliation, second: Affiliation) -> bool:
    return first in SIDES and second in SIDES and SIDES[first] != SIDES[second]


def hex_distance(start: Coordinate, end: Coordinate) -> int:
    """Distance between two odd-row offset coordinates, in tiles."""
    def to_cube(coordinate: Coordinate):
        x = coordinate.col - (coordinate.row - (coordinate.row & 1)) // 2
        z = coordinate.row
        return x, -x - z, z

    sx, sy, sz = to_cube(start)
    ex, ey, ez = to_cube(end)
    return max(abs(sx - ex), abs(sy - ey), abs(sz - ez))


def parse_terrain_layout(layout: List[str]) -> List[List[TerrainInfo]]:
    return [
        [TERRAIN_BY_SYMBOL[symbol] for symbol in line.split()]
        for line in layout
    ]


@dataclass
class BattleSquaddie:
    """A squaddie as the harness tracks it."""
    squaddie_id: SquaddieRef
    info: SquaddieInfo
    position: Optional[Coordinate]
    action_ids: List[str] = field(default_factory=list)

    @property
    def can_act(self) -> bool:
        return self.position is not None and self.info.current_action_points > 0


class FellDesertEngine(MissionEngine):
    """
    Mission engine backed by plain Python objects.

    Only enough game logic to drive the text interface: no combat,
    no movement rules, no objective evaluation.
    """

    def __init__(self, terrain_layout: Optional[List[str]] = None):
        layout = FELL_DESERT_TERRAIN if terrain_layout is None else terrain_layout
        self.terrain = parse_terrain_layout(layout)
        self.height = len(self.terrain)
        self.width = len(self.terrain[0]) if self.terrain else 0

        self.turn_number = 0
        self.phase = MissionAffiliationTurn.TURN_START

        self.actions: Dict[str, ActionDefinition] = {}
        self.squaddies: Dict[str, BattleSquaddie] = {}
        self.in_progress_objectives: List[MissionObjective] = []
        self.completed_objectives: List[MissionObjective] = []
        self.rewarded_objectives: List[MissionObjective] = []

        if terrain_layout is None:
            self._setup_fell_desert()

    # ════════════════════════════════════════════════════════════
    # SCENARIO SETUP
    # ════════════════════════════════════════════════════════════

    def _setup_fell_desert(self):
        self.add_action(ActionDefinition(
            id=END_TURN_ACTION_ID, name="End Turn", action_points_spent=ALL_ACTION_POINTS,
        ))
        self.add_action(ActionDefinition(id=MOVE_ACTION_ID, name="Move"))
        self.add_action(ActionDefinition(
            id="scimitar", name="Scimitar", action_points_spent=1,
            minimum_range=1, maximum_range=1, targets_foes=True,
        ))
        self.add_action(ActionDefinition(
            id="slither-bite", name="Bite", action_points_spent=1,
            minimum_range=1, maximum_range=1, targets_foes=True,
        ))

        self.add_squaddie(
            "lini",
            SquaddieInfo(
                name="Lini",
                affiliation=Affiliation.PLAYER,
                current_hit_points=5,
                max_hit_points=5,
                current_action_points=3,
                maximum_action_points=3,
            ),
            Coordinate(row=0, col=0),
            [END_TURN_ACTION_ID, MOVE_ACTION_ID, "scimitar"],
        )
        self.add_squaddie(
            "slither-demon",
            SquaddieInfo(
                name="Slither Demon",
                affiliation=Affiliation.ENEMY,
                current_hit_points=3,
                max_hit_points=3,
                current_action_points=3,
                maximum_action_points=3,
            ),
            Coordinate(row=3, col=4),
            [END_TURN_ACTION_ID, MOVE_ACTION_ID, "slither-bite"],
        )

        self.in_progress_objectives = [
            MissionObjective(
                id="defeat-enemies",
                criteria=[MissionObjectiveCriteria(
                    type=MissionObjectiveCriteriaType.SQUADDIES_DEFEATED,
                    affiliations=[Affiliation.ENEMY],
                )],
                rewards=[MissionObjectiveReward(type=MissionObjectiveRewardType.VICTORY)],
            ),
            MissionObjective(
                id="players-defeated",
                criteria=[MissionObjectiveCriteria(
                    type=MissionObjectiveCriteriaType.SQUADDIES_DEFEATED,
                    affiliations=[Affiliation.PLAYER],
                )],
                rewards=[MissionObjectiveReward(type=MissionObjectiveRewardType.MISSION_FAILURE)],
            ),
        ]

    def add_action(self, action: ActionDefinition):
        self.actions[action.id] = action

    def add_squaddie(
            self,
            out_of_battle_squaddie_id: str,
            info: SquaddieInfo,
            position: Optional[Coordinate],
            action_ids: Optional[List[str]] = None,
    ) -> SquaddieRef:
        """Put a squaddie into the battle and return its id."""
        squaddie_id = SquaddieRef(
            in_battle_squaddie_id=len(self.squaddies),
            out_of_battle_squaddie_id=out_of_battle_squaddie_id,
        )
        self.squaddies[out_of_battle_squaddie_id] = BattleSquaddie(
            squaddie_id=squaddie_id,
            info=info,
            position=position,
            action_ids=list(action_ids or []),
        )
        return squaddie_id

    def get_lini_squaddie_id(self) -> SquaddieRef:
        return self.squaddies["lini"].squaddie_id

    def get_slither_demon_squaddie_id(self) -> SquaddieRef:
        return self.squaddies["slither-demon"].squaddie_id

    # ════════════════════════════════════════════════════════════
    # TEST HOOKS (state changes the full engine would make itself)
    # ════════════════════════════════════════════════════════════

    def move_squaddie(self, squaddie_id: SquaddieRef, position: Optional[Coordinate]):
        """Place a squaddie, or take it off the map with position=None."""
        self._battle_squaddie(squaddie_id).position = position

    def add_condition(self, squaddie_id: SquaddieRef, condition: SquaddieCondition):
        self._battle_squaddie(squaddie_id).info.conditions.append(condition)

    def end_squaddie_turn(self, squaddie_id: SquaddieRef):
        """Spend all of a squaddie's remaining action points."""
        self._battle_squaddie(squaddie_id).info.current_action_points = 0

    def complete_objective(self, objective_id: str, rewarded: bool = False):
        for objective in self.in_progress_objectives:
            if objective.id == objective_id:
                self.in_progress_objectives.remove(objective)
                if rewarded:
                    self.rewarded_objectives.append(objective)
                else:
                    self.completed_objectives.append(objective)
                return
        raise KeyError(f"No in-progress objective '{objective_id}'")

    # ════════════════════════════════════════════════════════════
    # MAP QUERIES
    # ════════════════════════════════════════════════════════════

    def get_map_overview(self) -> MapOverview:
        occupants = {
            squaddie.position: squaddie.squaddie_id
            for squaddie in self.squaddies.values()
            if squaddie.position is not None
        }
        tiles = []
        for row, terrain_row in enumerate(self.terrain):
            tiles.append([
                MapTile(
                    row=row,
                    col=col,
                    movement_cost=terrain.movement_cost,
                    can_stop=terrain.can_stop,
                    squaddie_id=occupants.get(Coordinate(row=row, col=col)),
                )
                for col, terrain in enumerate(terrain_row)
            ])
        return MapOverview(width=self.width, height=self.height, tiles=tiles)

    def get_map_dimensions(self) -> MapDimensions:
        return MapDimensions(width=self.width, height=self.height)

    def _is_on_map(self, coordinate: Coordinate) -> bool:
        return 0 <= coordinate.row < self.height and 0 <= coordinate.col < self.width

    def get_terrain_at_coordinate(self, coordinate: Coordinate) -> TerrainInfo:
        if not self._is_on_map(coordinate):
            return TerrainInfo(movement_cost=None, can_stop=False)
        terrain = self.terrain[coordinate.row][coordinate.col]
        return TerrainInfo(movement_cost=terrain.movement_cost, can_stop=terrain.can_stop)

    def get_squaddie_at_coordinate(self, coordinate: Coordinate) -> Optional[SquaddieRef]:
        for squaddie in self.squaddies.values():
            if squaddie.position == coordinate:
                return squaddie.squaddie_id
        return None

    # ════════════════════════════════════════════════════════════
    # SQUADDIE QUERIES
    # ════════════════════════════════════════════════════════════

    def _battle_squaddie(self, squaddie_id: SquaddieRef) -> BattleSquaddie:
        return self.squaddies[squaddie_id.out_of_battle_squaddie_id]

    def get_squaddie_position(self, squaddie_id: SquaddieRef) -> Optional[Coordinate]:
        return self._battle_squaddie(squaddie_id).position

    def get_squaddie_info(self, squaddie_id: SquaddieRef) -> SquaddieInfo:
        info = self._battle_squaddie(squaddie_id).info
        return replace(info, conditions=[replace(c) for c in info.conditions])

    def get_action_by_id(self, action_id: str) -> Optional[ActionDefinition]:
        return self.actions.get(action_id)

    def _foes_in_range(self, squaddie: BattleSquaddie, action: ActionDefinition) -> List[BattleSquaddie]:
        if squaddie.position is None:
            return []
        foes = []
        for other in self.squaddies.values():
            if other.position is None:
                continue
            if not are_foes(squaddie.info.affiliation, other.info.affiliation):
                continue
            distance = hex_distance(squaddie.position, other.position)
            if action.minimum_range <= distance <= action.maximum_range:
                foes.append(other)
        return foes

    def get_squaddie_action_validity(self, squaddie_id: SquaddieRef) -> SquaddieActionValidity:
        squaddie = self._battle_squaddie(squaddie_id)
        validity = SquaddieActionValidity(squaddie_id=squaddie_id)

        for action_id in squaddie.action_ids:
            action = self.actions[action_id]

            if squaddie.info.current_action_points <= 0:
                validity.invalid_actions.append(InvalidAction(
                    action_id=action.id, action_name=action.name, reason=NO_ACTION_POINTS_REASON,
                ))
                continue

            if action.targets_foes:
                foes = self._foes_in_range(squaddie, action)
                if not foes:
                    validity.invalid_actions.append(InvalidAction(
                        action_id=action.id, action_name=action.name, reason=NO_TARGETS_REASON,
                    ))
                    continue
                validity.valid_actions.append(ValidAction(
                    action_id=action.id,
                    action_name=action.name,
                    target_coordinates=[foe.position for foe in foes],
                    target_squaddie_ids=[foe.squaddie_id for foe in foes],
                ))
                continue

            validity.valid_actions.append(ValidAction(action_id=action.id, action_name=action.name))

        return validity

    def get_squaddies_who_can_act_this_phase(self) -> List[SquaddieRef]:
        affiliation = self.phase.affiliation
        if affiliation is None or self.phase != MissionAffiliationTurn.for_affiliation(affiliation):
            return []
        return [
            squaddie.squaddie_id
            for squaddie in self.squaddies.values()
            if squaddie.info.affiliation == affiliation and squaddie.can_act
        ]

    # ════════════════════════════════════════════════════════════
    # TURN PROGRESSION
    # ════════════════════════════════════════════════════════════

    def get_current_turn_number(self) -> int:
        return self.turn_number

    def get_current_affiliation_turn(self) -> MissionAffiliationTurn:
        return self.phase

    def _affiliations_on_map(self) -> List[Affiliation]:
        present = {
            squaddie.info.affiliation
            for squaddie in self.squaddies.values()
            if squaddie.position is not None
        }
        return [affiliation for affiliation in AFFILIATION_ORDER if affiliation in present]

    def _next_affiliation(self, after: Optional[Affiliation]) -> Optional[Affiliation]:
        """First affiliation on the map that comes after `after` (None = from the top)."""
        start = 0 if after is None else AFFILIATION_ORDER.index(after) + 1
        present = self._affiliations_on_map()
        for affiliation in AFFILIATION_ORDER[start:]:
            if affiliation in present:
                return affiliation
        return None

    def _start_affiliation_phase(self, affiliation: Optional[Affiliation]):
        if affiliation is None:
            self.turn_number += 1
            self.phase = MissionAffiliationTurn.TURN_START
            return
        self.phase = MissionAffiliationTurn.for_affiliation(affiliation, "START")

    def transition_to_next_phase(self) -> None:
        phase = self.phase
        affiliation = phase.affiliation

        if phase == MissionAffiliationTurn.TURN_START:
            self._start_affiliation_phase(self._next_affiliation(None))
            return

        if phase == MissionAffiliationTurn.for_affiliation(affiliation, "START"):
            for squaddie in self.squaddies.values():
                if squaddie.info.affiliation == affiliation:
                    squaddie.info.current_action_points = squaddie.info.maximum_action_points
            self.phase = MissionAffiliationTurn.for_affiliation(affiliation)
            return

        if phase == MissionAffiliationTurn.for_affiliation(affiliation):
            still_acting = any(
                squaddie.can_act
                for squaddie in self.squaddies.values()
                if squaddie.info.affiliation == affiliation
            )
            if not still_acting:
                self.phase = MissionAffiliationTurn.for_affiliation(affiliation, "END")
            return

        self._start_affiliation_phase(self._next_affiliation(affiliation))

    # ════════════════════════════════════════════════════════════
    # OBJECTIVES
    # ════════════════════════════════════════════════════════════

    def get_in_progress_mission_objectives(self) -> List[MissionObjective]:
        return list(self.in_progress_objectives)

    def get_completed_but_not_rewarded_mission_objectives(self) -> List[MissionObjective]:
        return list(self.completed_objectives)

    def get_completed_and_rewarded_mission_objectives(self) -> List[MissionObjective]:
        return list(self.rewarded_objectives)
