"""
Interaction context for Fell Desert
State the caller carries between single-line commands.

CommandContext is immutable: the dispatcher hands back a new one when the
selection changes and the caller swaps its reference.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from fell_desert.models.mission import SquaddieRef


class InteractionPhase(Enum):
    """
    What kind of input the player is part-way through giving.

    Only BROWSING is produced by the current commands. The rest are kept
    for the action-execution commands.
    """
    BROWSING = "BROWSING"
    SELECTING_ACTION = "SELECTING_ACTION"
    SELECTING_TARGET = "SELECTING_TARGET"
    CONFIRMING_ACTION = "CONFIRMING_ACTION"
    VIEWING_RESULTS = "VIEWING_RESULTS"


class CommandContext(BaseModel):
    """Selection and interaction phase, replaced wholesale on every update."""
    model_config = ConfigDict(frozen=True)

    selected_squaddie_id: Optional[SquaddieRef] = None
    interaction_phase: InteractionPhase = InteractionPhase.BROWSING
    acting_squaddie_id: Optional[SquaddieRef] = None

    @classmethod
    def browsing(cls, selected_squaddie_id: Optional[SquaddieRef] = None) -> "CommandContext":
        """Fresh browsing context, selecting the given squaddie (or nothing)."""
        return cls(
            selected_squaddie_id=selected_squaddie_id,
            interaction_phase=InteractionPhase.BROWSING,
            acting_squaddie_id=None,
        )
