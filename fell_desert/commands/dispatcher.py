"""
Command Dispatcher for Fell Desert
Turns one line of player input into display text.

Routing (first match wins, case and surrounding whitespace ignored):
    Q        quit
    M        show the map
    ?        list commands
    L        look at the selected squaddie
    W        who can act this phase
    P        show the current phase
    O        show mission objectives
    r, c     inspect a coordinate (selects whoever stands there)
    other    echo the input back

Every route that needs the engine answers with its own "No engine
available ..." message when there is none. Nothing here raises for bad
input: unrecognised text is echoed.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from fell_desert.config import cli_debug
from fell_desert.commands.coordinates import inspect_coordinate, is_on_map, parse_coordinate
from fell_desert.engine.interface import MissionEngine
from fell_desert.models.context import CommandContext
from fell_desert.models.mission import (
    ActionDefinition,
    Affiliation,
    Coordinate,
    MissionAffiliationTurn,
)
from fell_desert.rendering.controllable import format_controllable_entries, gather_controllable_entries
from fell_desert.rendering.map_renderer import MapRenderInfo, render_map
from fell_desert.rendering.objectives import format_objective_entries, gather_objective_entries
from fell_desert.rendering.squaddie_actions import format_squaddie_actions
from fell_desert.rendering.squaddie_detail import format_squaddie_details


class CommandAction(str, Enum):
    """What the dispatcher did with the input."""
    QUIT = "quit"
    ECHO = "echo"
    SHOW_MAP = "showMap"
    SHOW_COMMANDS = "showCommands"
    INSPECT_COORDINATE = "inspectCoordinate"
    LOOK_AT_SQUADDIE = "lookAtSquaddie"
    LIST_CONTROLLABLE_SQUADDIES = "listControllableSquaddies"
    SHOW_PHASE = "showPhase"
    SHOW_OBJECTIVES = "showObjectives"


class CommandResult(BaseModel):
    """
    Dispatcher response.

    updated_context is only set when the caller must replace its context.
    """
    action: CommandAction
    message: str
    updated_context: Optional[CommandContext] = None


# Single-letter command codes, checked in this order
COMMAND_CODES: Dict[str, CommandAction] = {
    "Q": CommandAction.QUIT,
    "M": CommandAction.SHOW_MAP,
    "?": CommandAction.SHOW_COMMANDS,
    "L": CommandAction.LOOK_AT_SQUADDIE,
    "W": CommandAction.LIST_CONTROLLABLE_SQUADDIES,
    "P": CommandAction.SHOW_PHASE,
    "O": CommandAction.SHOW_OBJECTIVES,
}

NO_ENGINE_MESSAGES: Dict[CommandAction, str] = {
    CommandAction.SHOW_MAP: "No engine available to display the map.",
    CommandAction.INSPECT_COORDINATE: "No engine available to inspect coordinates.",
    CommandAction.LOOK_AT_SQUADDIE: "No engine available to look at squaddie details.",
    CommandAction.LIST_CONTROLLABLE_SQUADDIES: "No engine available to list controllable squaddies.",
    CommandAction.SHOW_PHASE: "No engine available to show phase.",
    CommandAction.SHOW_OBJECTIVES: "No engine available to show mission objectives.",
}

NO_SELECTION_MESSAGE = "No squaddie selected. Inspect a coordinate with a squaddie first."
NO_OBJECTIVES_MESSAGE = "No mission objectives."
QUIT_MESSAGE = "Goodbye!"


def transition_to_next_phase(engine: MissionEngine) -> MissionAffiliationTurn:
    """Advance the engine exactly one phase and return the phase it landed on."""
    engine.transition_to_next_phase()
    return engine.get_current_affiliation_turn()


class CommandDispatcher:
    """
    Routes player input to the right formatter.

    Holds no state of its own: the engine owns the game and the caller
    owns the CommandContext.
    """

    def dispatch(
            self,
            raw_input: str,
            engine: Optional[MissionEngine] = None,
            context: Optional[CommandContext] = None,
    ) -> CommandResult:
        """
        Handle one line of input.

        Args:
            raw_input: Exactly what the player typed
            engine: Mission engine to query, None if no mission is loaded
            context: Context returned by an earlier call, None for a fresh one

        Returns:
            CommandResult with the action taken, text to show and
            (for selection commands) the context to use next time
        """
        if context is None:
            context = CommandContext.browsing()
        normalized = raw_input.strip().upper()

        action = COMMAND_CODES.get(normalized)
        if action is not None:
            cli_debug(f"'{raw_input}' -> {action.value}")
            return self._execute(action, engine, context)

        coordinate = parse_coordinate(raw_input)
        if coordinate is not None:
            cli_debug(f"'{raw_input}' -> inspectCoordinate {coordinate.label()}")
            if engine is None:
                return self._no_engine(CommandAction.INSPECT_COORDINATE)
            return self._execute_inspect_coordinate(engine, coordinate)

        cli_debug(f"'{raw_input}' -> echo")
        return CommandResult(action=CommandAction.ECHO, message=f"You entered: {raw_input}")

    def _execute(
            self,
            action: CommandAction,
            engine: Optional[MissionEngine],
            context: CommandContext,
    ) -> CommandResult:
        if action == CommandAction.QUIT:
            return CommandResult(action=action, message=QUIT_MESSAGE)
        if action == CommandAction.SHOW_COMMANDS:
            return CommandResult(action=action, message=self.get_help(context))

        if engine is None:
            return self._no_engine(action)

        if action == CommandAction.SHOW_MAP:
            return self._execute_show_map(engine)
        if action == CommandAction.LOOK_AT_SQUADDIE:
            return self._execute_look_at_squaddie(engine, context)
        if action == CommandAction.LIST_CONTROLLABLE_SQUADDIES:
            return self._execute_list_controllable(engine)
        if action == CommandAction.SHOW_PHASE:
            return self._execute_show_phase(engine)
        if action == CommandAction.SHOW_OBJECTIVES:
            return self._execute_show_objectives(engine)
        raise ValueError(f"Unhandled command action: {action.value}")

    def _no_engine(self, action: CommandAction) -> CommandResult:
        return CommandResult(action=action, message=NO_ENGINE_MESSAGES[action])

    # ════════════════════════════════════════════════════════════
    # HELP
    # ════════════════════════════════════════════════════════════

    def get_help(self, context: Optional[CommandContext] = None) -> str:
        """Command list. L only shows up once something is selected."""
        lines: List[str] = [
            "Commands:",
            "  M - Show the map",
            "  row, col - Inspect a coordinate (e.g. 2, 0)",
        ]
        if context is not None and context.selected_squaddie_id is not None:
            lines.append("  L - Look at selected squaddie")
        lines.extend([
            "  W - Who can act this phase?",
            "  P - Show current phase",
            "  O - Show mission objectives",
            "  ? - Show all commands",
            "  Q - Quit the game",
        ])
        return "\n".join(lines)

    # ════════════════════════════════════════════════════════════
    # ENGINE ROUTES
    # ════════════════════════════════════════════════════════════

    def _execute_show_map(self, engine: MissionEngine) -> CommandResult:
        overview = engine.get_map_overview()

        squaddie_affiliations: Dict[str, Affiliation] = {}
        for tile in overview.squaddie_tiles():
            info = engine.get_squaddie_info(tile.squaddie_id)
            squaddie_affiliations[tile.squaddie_id.out_of_battle_squaddie_id] = info.affiliation

        render_info = MapRenderInfo(
            turn_number=engine.get_current_turn_number(),
            current_affiliation=engine.get_current_affiliation_turn().affiliation,
            squaddie_affiliations=squaddie_affiliations,
        )
        return CommandResult(action=CommandAction.SHOW_MAP, message=render_map(overview, render_info))

    def _execute_inspect_coordinate(self, engine: MissionEngine, coordinate: Coordinate) -> CommandResult:
        # Selection is always replaced: whoever is there, or nobody
        selected = None
        if is_on_map(engine, coordinate):
            selected = engine.get_squaddie_at_coordinate(coordinate)

        return CommandResult(
            action=CommandAction.INSPECT_COORDINATE,
            message=inspect_coordinate(engine, coordinate),
            updated_context=CommandContext.browsing(selected),
        )

    def _execute_look_at_squaddie(self, engine: MissionEngine, context: CommandContext) -> CommandResult:
        squaddie_id = context.selected_squaddie_id
        if squaddie_id is None:
            return CommandResult(action=CommandAction.LOOK_AT_SQUADDIE, message=NO_SELECTION_MESSAGE)

        info = engine.get_squaddie_info(squaddie_id)
        validity = engine.get_squaddie_action_validity(squaddie_id)
        actions_by_id: Dict[str, Optional[ActionDefinition]] = {
            action.action_id: engine.get_action_by_id(action.action_id)
            for action in validity.valid_actions
        }

        sections = [format_squaddie_details(info), format_squaddie_actions(validity, actions_by_id)]
        return CommandResult(
            action=CommandAction.LOOK_AT_SQUADDIE,
            message="\n".join(section for section in sections if section),
        )

    def _execute_list_controllable(self, engine: MissionEngine) -> CommandResult:
        entries = gather_controllable_entries(engine)
        return CommandResult(
            action=CommandAction.LIST_CONTROLLABLE_SQUADDIES,
            message=format_controllable_entries(entries),
        )

    def _execute_show_phase(self, engine: MissionEngine) -> CommandResult:
        turn = engine.get_current_turn_number()
        phase = engine.get_current_affiliation_turn()
        return CommandResult(action=CommandAction.SHOW_PHASE, message=f"Turn {turn} - {phase.display_name}")

    def _execute_show_objectives(self, engine: MissionEngine) -> CommandResult:
        message = format_objective_entries(gather_objective_entries(engine))
        return CommandResult(action=CommandAction.SHOW_OBJECTIVES, message=message or NO_OBJECTIVES_MESSAGE)


_default_dispatcher = CommandDispatcher()


def process_command(
        raw_input: str,
        engine: Optional[MissionEngine] = None,
        context: Optional[CommandContext] = None,
) -> CommandResult:
    """Dispatch one line with the shared (stateless) dispatcher."""
    return _default_dispatcher.dispatch(raw_input, engine, context)
