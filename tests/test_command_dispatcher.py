"""
Test suite for the command dispatcher.

Tests cover:
1. Routing of every single-letter command (case/whitespace insensitive)
2. "No engine available" messages for every engine route
3. Coordinate inspection and selection threading through CommandContext
4. Look at squaddie, who can act, phase and objectives
5. Echo fallback and phase transitions
"""

import pytest
from pydantic import ValidationError

from fell_desert.commands.dispatcher import (
    CommandAction,
    CommandDispatcher,
    process_command,
    transition_to_next_phase,
)
from fell_desert.engine.harness import FELL_DESERT_TERRAIN, FellDesertEngine
from fell_desert.models.context import CommandContext, InteractionPhase
from fell_desert.models.mission import (
    ConditionType,
    MissionAffiliationTurn,
    SquaddieCondition,
    SquaddieRef,
)


def lini_selected(engine):
    return CommandContext.browsing(engine.get_lini_squaddie_id())


class TestQuitAndEcho:
    """Test routes that never need an engine."""

    @pytest.mark.parametrize("raw", ["Q", "q", "  Q  ", "\tq\n"])
    def test_quit(self, raw):
        result = process_command(raw)
        assert result.action == CommandAction.QUIT
        assert result.action == "quit"
        assert result.message == "Goodbye!"
        assert result.updated_context is None

    def test_quit_ignores_engine_and_context(self):
        engine = FellDesertEngine()
        result = process_command("Q", engine, lini_selected(engine))
        assert result.action == "quit"
        assert result.message == "Goodbye!"

    def test_echo(self):
        result = process_command("hello world")
        assert result.action == "echo"
        assert result.message == "You entered: hello world"

    def test_echo_empty_input(self):
        result = process_command("")
        assert result.action == "echo"
        assert result.message == "You entered: "

    def test_echo_keeps_raw_input(self):
        result = process_command("  Hello  ")
        assert result.message == "You entered:   Hello  "

    def test_interior_whitespace_is_not_stripped(self):
        """'Q Q' is not the quit command."""
        assert process_command("Q Q").action == "echo"

    def test_single_number_echoes(self):
        engine = FellDesertEngine()
        result = process_command("5", engine)
        assert result.action == "echo"
        assert result.updated_context is None

    def test_oversized_coordinate_echoes(self):
        engine = FellDesertEngine()
        raw = "9" * 5000 + ", 0"
        result = process_command(raw, engine)
        assert result.action == "echo"
        assert result.message == f"You entered: {raw}"
        assert result.updated_context is None


class TestNormalization:
    """Inputs equal up to case and outer whitespace behave the same."""

    @pytest.mark.parametrize("code", ["q", "m", "?", "l", "w", "p", "o"])
    def test_case_and_whitespace_invariance(self, code):
        engine = FellDesertEngine()
        context = lini_selected(engine)
        results = [
            process_command(variant, engine, context)
            for variant in (code, code.upper(), f"  {code}  ", f"\t{code.upper()} ")
        ]
        assert len({result.action for result in results}) == 1
        assert len({result.message for result in results}) == 1


class TestNoEngine:
    """Every engine route has its own advisory message."""

    @pytest.mark.parametrize("raw,action,message", [
        ("M", "showMap", "No engine available to display the map."),
        ("0, 0", "inspectCoordinate", "No engine available to inspect coordinates."),
        ("W", "listControllableSquaddies", "No engine available to list controllable squaddies."),
        ("P", "showPhase", "No engine available to show phase."),
        ("O", "showObjectives", "No engine available to show mission objectives."),
    ])
    def test_missing_engine(self, raw, action, message):
        result = process_command(raw)
        assert result.action == action
        assert result.message == message
        assert result.updated_context is None

    def test_look_without_engine_checks_engine_first(self):
        context = CommandContext.browsing(SquaddieRef(in_battle_squaddie_id=0, out_of_battle_squaddie_id="test"))
        result = process_command("L", None, context)
        assert result.action == "lookAtSquaddie"
        assert result.message == "No engine available to look at squaddie details."
        assert result.updated_context is None


class TestShowCommands:
    """Test the ? help text."""

    def test_lists_commands(self):
        result = process_command("?")
        assert result.action == "showCommands"
        for expected in (
            "M - Show the map",
            "row, col - Inspect a coordinate",
            "W - Who can act this phase?",
            "P - Show current phase",
            "O - Show mission objectives",
            "? - Show all commands",
            "Q - Quit the game",
        ):
            assert expected in result.message

    def test_no_look_command_without_selection(self):
        assert "L - Look at selected squaddie" not in process_command("?").message

    def test_look_command_with_selection(self):
        engine = FellDesertEngine()
        result = process_command(" ? ", engine, lini_selected(engine))
        assert "L - Look at selected squaddie" in result.message


class TestInspectCoordinate:
    """Test coordinate routing and selection updates."""

    def setup_method(self):
        self.engine = FellDesertEngine()

    def test_terrain(self):
        result = process_command("0, 1", self.engine)
        assert result.action == "inspectCoordinate"
        assert result.message == "(0,1): Standard"

    def test_selects_squaddie(self):
        result = process_command("(0 0)", self.engine)
        assert result.updated_context == CommandContext(
            selected_squaddie_id=self.engine.get_lini_squaddie_id(),
            interaction_phase=InteractionPhase.BROWSING,
            acting_squaddie_id=None,
        )

    def test_empty_tile_clears_selection(self):
        result = process_command("2, 2", self.engine, lini_selected(self.engine))
        assert result.updated_context is not None
        assert result.updated_context.selected_squaddie_id is None
        assert result.updated_context.interaction_phase == InteractionPhase.BROWSING
        assert result.updated_context.acting_squaddie_id is None

    def test_off_map_clears_selection(self):
        result = process_command("10, 10", self.engine, lini_selected(self.engine))
        assert "is off map" in result.message
        assert result.updated_context is not None
        assert result.updated_context.selected_squaddie_id is None

    def test_selection_round_trip(self):
        """Inspect a squaddie, then look at it with the returned context."""
        inspected = process_command("3, 4", self.engine)
        looked = process_command("L", self.engine, inspected.updated_context)
        assert looked.action == "lookAtSquaddie"
        assert looked.message.startswith("Slither Demon\n")

    def test_original_context_is_untouched(self):
        context = lini_selected(self.engine)
        process_command("2, 2", self.engine, context)
        assert context.selected_squaddie_id == self.engine.get_lini_squaddie_id()

    def test_context_is_frozen(self):
        context = CommandContext.browsing()
        with pytest.raises(ValidationError):
            context.selected_squaddie_id = self.engine.get_lini_squaddie_id()


class TestLookAtSquaddie:
    """Test the L command."""

    def setup_method(self):
        self.engine = FellDesertEngine()

    def test_nothing_selected(self):
        result = process_command("L", self.engine)
        assert result.action == "lookAtSquaddie"
        assert result.message == "No squaddie selected. Inspect a coordinate with a squaddie first."

    @pytest.mark.parametrize("raw", ["L", "l", "  L  "])
    def test_full_details(self, raw):
        result = process_command(raw, self.engine, lini_selected(self.engine))
        assert result.action == "lookAtSquaddie"
        assert result.message == "\n".join([
            "Lini",
            "Affiliation: PLAYER",
            "Hit Points: 5/5",
            "Action Points: 3/3",
            "Actions:",
            "  Invalid:",
            "    Scimitar - No applicable targets in range",
            "  Valid:",
            "    End Turn (all AP)",
            "    Move",
        ])
        assert result.updated_context is None

    def test_shows_conditions(self):
        self.engine.add_condition(
            self.engine.get_lini_squaddie_id(),
            SquaddieCondition(type=ConditionType.ARMOR, amount=3, duration=2),
        )
        result = process_command("L", self.engine, lini_selected(self.engine))
        assert "Conditions:\n  Armor: 3 (2 turns remaining)\nActions:" in result.message

    def test_out_of_action_points(self):
        self.engine.end_squaddie_turn(self.engine.get_lini_squaddie_id())
        result = process_command("L", self.engine, lini_selected(self.engine))
        assert "Action Points: 0/3" in result.message
        assert "  Valid:" not in result.message
        assert "End Turn - No action points remaining" in result.message


class TestShowMap:
    """Test the M command."""

    def test_renders_scenario(self):
        engine = FellDesertEngine()
        result = process_command("m", engine)
        assert result.action == "showMap"
        lines = result.message.split("\n")
        assert lines[0] == "Turn 0"
        assert lines[1] == "Map: 5 columns x 4 rows"
        assert lines[2:6] == ["L . ~ . .", " . _ . # .", ". . . . ~", " ~ . _ . S"]
        assert result.message.endswith("\n".join([
            "Squaddies:",
            "  Player:",
            "    L = lini (0,0)",
            "  Enemy:",
            "    S = slither-demon (3,4)",
        ]))

    def test_header_shows_phase(self):
        engine = FellDesertEngine()
        transition_to_next_phase(engine)
        transition_to_next_phase(engine)
        result = process_command("M", engine)
        assert result.message.split("\n")[0] == "Turn 0 - Player Phase"

    def test_empty_mission(self):
        engine = FellDesertEngine(terrain_layout=FELL_DESERT_TERRAIN)
        result = process_command("M", engine)
        assert "Squaddies:" not in result.message


class TestPhaseCommands:
    """Test W, P and phase transitions."""

    def setup_method(self):
        self.engine = FellDesertEngine()

    def test_nobody_acts_at_turn_start(self):
        result = process_command("W", self.engine)
        assert result.action == "listControllableSquaddies"
        assert result.message == "No squaddies can act this phase."

    def test_lists_player_squaddies_in_player_turn(self):
        transition_to_next_phase(self.engine)
        transition_to_next_phase(self.engine)
        result = process_command("  w  ", self.engine)
        assert result.message == "Squaddies who can act:\n  Lini (0,0) - AP: 3/3"

    def test_transition_from_turn_start(self):
        assert transition_to_next_phase(self.engine) == MissionAffiliationTurn.PLAYER_TURN_START

    def test_two_transitions_reach_player_turn(self):
        transition_to_next_phase(self.engine)
        assert transition_to_next_phase(self.engine) == MissionAffiliationTurn.PLAYER_TURN

    def test_player_turn_holds_while_squaddies_can_act(self):
        transition_to_next_phase(self.engine)
        transition_to_next_phase(self.engine)
        assert transition_to_next_phase(self.engine) == MissionAffiliationTurn.PLAYER_TURN

    def test_show_phase_at_turn_start(self):
        result = process_command("P", self.engine)
        assert result.action == "showPhase"
        assert result.message == "Turn 0 - Turn Start"

    def test_show_phase_after_advancing(self):
        transition_to_next_phase(self.engine)
        transition_to_next_phase(self.engine)
        assert process_command("p", self.engine).message == "Turn 0 - Player Turn"


class TestShowObjectives:
    """Test the O command."""

    def test_scenario_objectives(self):
        engine = FellDesertEngine()
        result = process_command("O", engine)
        assert result.action == "showObjectives"
        assert result.message == "\n".join([
            "Objective:",
            "- Defeat enemy: slither-demon",
            "Failure:",
            "- Defeat players: lini",
        ])

    def test_no_objectives(self):
        engine = FellDesertEngine(terrain_layout=FELL_DESERT_TERRAIN)
        assert process_command("o", engine).message == "No mission objectives."


class TestDispatcherInstance:
    """CommandDispatcher keeps no state between calls."""

    def test_separate_dispatchers_agree(self):
        engine = FellDesertEngine()
        first = CommandDispatcher().dispatch("0, 0", engine)
        second = CommandDispatcher().dispatch("0, 0", engine)
        assert first == second

    def test_unhandled_action_is_not_routed_elsewhere(self):
        """An action with no handler raises instead of falling through to objectives."""
        engine = FellDesertEngine()
        with pytest.raises(ValueError, match="echo"):
            CommandDispatcher()._execute(CommandAction.ECHO, engine, CommandContext.browsing())
