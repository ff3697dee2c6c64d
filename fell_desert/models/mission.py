"""
Mission data model for Fell Desert
Read-only snapshots handed out by the mission engine.

Everything in here is recomputed by the engine on every query. The text
interface never caches these objects between commands because the engine
may have advanced the phase (or moved a squaddie) in the meantime.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


# ════════════════════════════════════════════════════════════
# COORDINATES & IDENTIFIERS
# ════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Coordinate:
    """Zero-based offset coordinate. Not bounds-checked until inspected."""
    row: int
    col: int

    def label(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class MaybeOffMapCoordinate:
    """Board position where either axis may be missing (squaddie off map)."""
    row: Optional[int] = None
    col: Optional[int] = None

    @classmethod
    def from_position(cls, position: Optional[Coordinate]) -> "MaybeOffMapCoordinate":
        if position is None:
            return cls()
        return cls(row=position.row, col=position.col)

    @property
    def is_on_map(self) -> bool:
        return self.row is not None and self.col is not None


@dataclass(frozen=True)
class SquaddieRef:
    """
    Identifies a squaddie in battle.

    out_of_battle_squaddie_id is the stable key ("lini"),
    in_battle_squaddie_id is the engine's transient handle.
    """
    in_battle_squaddie_id: int
    out_of_battle_squaddie_id: str


class Affiliation(Enum):
    """Who a squaddie fights for."""
    PLAYER = "PLAYER"
    ALLY = "ALLY"
    ENEMY = "ENEMY"
    NONE = "NONE"


AFFILIATION_DISPLAY_NAMES: Dict[Affiliation, str] = {
    Affiliation.PLAYER: "Player",
    Affiliation.ALLY: "Ally",
    Affiliation.ENEMY: "Enemy",
    Affiliation.NONE: "None",
}

# Order affiliations take their turns (and are listed on the map)
AFFILIATION_ORDER: List[Affiliation] = [
    Affiliation.PLAYER,
    Affiliation.ALLY,
    Affiliation.ENEMY,
    Affiliation.NONE,
]


def affiliation_display_name(affiliation: Affiliation) -> str:
    """Player / Ally / Enemy / None"""
    return AFFILIATION_DISPLAY_NAMES[affiliation]


# ════════════════════════════════════════════════════════════
# SQUADDIE STATUS
# ════════════════════════════════════════════════════════════

class ConditionType(Enum):
    """Status effects a squaddie can carry."""
    UNKNOWN = "UNKNOWN"
    ABSORB = "ABSORB"
    ARMOR = "ARMOR"
    ELUSIVE = "ELUSIVE"
    SLOWED = "SLOWED"
    HUSTLE = "HUSTLE"


@dataclass
class SquaddieCondition:
    """
    A timed or permanent status effect.

    Attributes:
        type: Which condition this is
        amount: Strength of the effect, None for binary conditions
        duration: Turns remaining, None if the condition does not expire
    """
    type: ConditionType
    amount: Optional[int] = None
    duration: Optional[int] = None

    @property
    def is_numerical(self) -> bool:
        return self.amount is not None


@dataclass
class SquaddieInfo:
    """What the engine reports about a single squaddie."""
    name: str
    affiliation: Affiliation
    current_hit_points: int
    max_hit_points: int
    current_action_points: int
    maximum_action_points: int
    conditions: List[SquaddieCondition] = field(default_factory=list)


# ════════════════════════════════════════════════════════════
# MAP
# ════════════════════════════════════════════════════════════

@dataclass
class TerrainInfo:
    """Movement properties of a single tile. movement_cost None = wall."""
    movement_cost: Optional[float]
    can_stop: bool


@dataclass
class MapTile:
    row: int
    col: int
    movement_cost: Optional[float]
    can_stop: bool
    squaddie_id: Optional[SquaddieRef] = None


@dataclass
class MapDimensions:
    width: int
    height: int


@dataclass
class MapOverview:
    """Row-major snapshot of every tile on the map."""
    width: int
    height: int
    tiles: List[List[MapTile]]

    def squaddie_tiles(self) -> List[MapTile]:
        """Occupied tiles in row-major scan order."""
        return [
            tile
            for row in self.tiles
            for tile in row
            if tile.squaddie_id is not None
        ]


# ════════════════════════════════════════════════════════════
# ACTIONS
# ════════════════════════════════════════════════════════════

# Sentinel cost: the action spends every remaining action point
ALL_ACTION_POINTS = "all"

ActionPointCost = Union[int, str, None]


@dataclass
class ActionDefinition:
    """
    A squaddie action template.

    action_points_spent is the cost on success: an int, ALL_ACTION_POINTS,
    or None when the action is free (Move pays per tile instead).
    """
    id: str
    name: str
    action_points_spent: ActionPointCost = None
    minimum_range: int = 0
    maximum_range: int = 0
    targets_foes: bool = False


@dataclass
class ValidAction:
    action_id: str
    action_name: str
    target_coordinates: List[Coordinate] = field(default_factory=list)
    target_squaddie_ids: List[SquaddieRef] = field(default_factory=list)


@dataclass
class InvalidAction:
    action_id: str
    action_name: str
    reason: str


@dataclass
class SquaddieActionValidity:
    squaddie_id: SquaddieRef
    valid_actions: List[ValidAction] = field(default_factory=list)
    invalid_actions: List[InvalidAction] = field(default_factory=list)


# ════════════════════════════════════════════════════════════
# TURN PHASES
# ════════════════════════════════════════════════════════════

class MissionAffiliationTurn(Enum):
    """Phases of a mission turn, in the order the engine walks them."""
    TURN_START = "TURN_START"
    PLAYER_TURN_START = "PLAYER_TURN_START"
    PLAYER_TURN = "PLAYER_TURN"
    PLAYER_TURN_END = "PLAYER_TURN_END"
    ALLY_TURN_START = "ALLY_TURN_START"
    ALLY_TURN = "ALLY_TURN"
    ALLY_TURN_END = "ALLY_TURN_END"
    ENEMY_TURN_START = "ENEMY_TURN_START"
    ENEMY_TURN = "ENEMY_TURN"
    ENEMY_TURN_END = "ENEMY_TURN_END"
    NONE_TURN_START = "NONE_TURN_START"
    NONE_TURN = "NONE_TURN"
    NONE_TURN_END = "NONE_TURN_END"

    @property
    def display_name(self) -> str:
        """PLAYER_TURN_START -> Player Turn Start"""
        return self.value.replace("_", " ").title()

    @property
    def affiliation(self) -> Optional[Affiliation]:
        """Affiliation whose phase this is, None for TURN_START."""
        if self is MissionAffiliationTurn.TURN_START:
            return None
        return Affiliation[self.value.split("_")[0]]

    @classmethod
    def for_affiliation(cls, affiliation: Affiliation, stage: str = "") -> "MissionAffiliationTurn":
        """for_affiliation(ENEMY, "START") -> ENEMY_TURN_START"""
        name = f"{affiliation.value}_TURN"
        if stage:
            name = f"{name}_{stage}"
        return cls[name]


# ════════════════════════════════════════════════════════════
# MISSION OBJECTIVES
# ════════════════════════════════════════════════════════════

class MissionObjectiveCriteriaType(Enum):
    SQUADDIES_DEFEATED = "SQUADDIES_DEFEATED"
    SQUADDIES_ESCAPED = "SQUADDIES_ESCAPED"


class MissionObjectiveRewardType(Enum):
    VICTORY = "VICTORY"
    MISSION_FAILURE = "MISSION_FAILURE"


@dataclass
class MissionObjectiveCriteria:
    """
    One condition of an objective.

    affiliations is ordered; the first entry names the objective on screen.
    """
    type: MissionObjectiveCriteriaType
    affiliations: List[Affiliation] = field(default_factory=list)
    out_of_battle_squaddie_ids: List[str] = field(default_factory=list)


@dataclass
class MissionObjectiveReward:
    type: MissionObjectiveRewardType


@dataclass
class MissionObjective:
    id: str
    criteria: List[MissionObjectiveCriteria] = field(default_factory=list)
    rewards: List[MissionObjectiveReward] = field(default_factory=list)

    @property
    def is_failure_condition(self) -> bool:
        """Only a mission-failure reward makes this a loss condition."""
        return any(
            reward.type == MissionObjectiveRewardType.MISSION_FAILURE
            for reward in self.rewards
        )
