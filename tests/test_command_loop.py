"""
Tests for the interactive command loop and CLI settings.

Tests cover:
1. Banner, scripted sessions and quitting
2. End of input and interrupted input
3. Errors raised while handling a command
4. Environment settings and debug tracing
"""

from fell_desert import config
from fell_desert.config import CliSettings, cli_debug, load_settings
from fell_desert.engine.harness import FellDesertEngine
from fell_desert.main import BANNER, run
from fell_desert.models.context import CommandContext


class ScriptedInput:
    """Feeds lines to run() and raises EOFError when they run out."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class BrokenMapEngine(FellDesertEngine):
    def get_map_overview(self):
        raise RuntimeError("map data unavailable")


def run_session(lines, engine=None, settings=None):
    output = []
    read_line = ScriptedInput(lines)
    context = run(
        engine=engine or FellDesertEngine(),
        settings=settings or CliSettings(),
        read_line=read_line,
        write=output.append,
    )
    return context, output, read_line


class TestCommandLoop:
    """Test run() with scripted input."""

    def test_banner_then_quit(self):
        _, output, _ = run_session(["q"])
        assert output[:len(BANNER)] == BANNER
        assert output[len(BANNER):] == ["Goodbye!"]

    def test_stops_reading_after_quit(self):
        _, _, read_line = run_session(["Q", "M"])
        assert read_line.lines == ["M"]

    def test_selection_carries_between_commands(self):
        context, output, _ = run_session(["0, 0", "L", "q"])
        assert output[len(BANNER)].startswith("(0,0): Standard\nLini")
        assert output[len(BANNER) + 1].startswith("Lini\nAffiliation: PLAYER")
        assert context.selected_squaddie_id.out_of_battle_squaddie_id == "lini"

    def test_context_is_kept_when_command_does_not_replace_it(self):
        context, _, _ = run_session(["3, 4", "M", "hello", "q"])
        assert context.selected_squaddie_id.out_of_battle_squaddie_id == "slither-demon"

    def test_echo_and_help(self):
        _, output, _ = run_session(["hello", "?", "q"])
        session = output[len(BANNER):]
        assert session[0] == "You entered: hello"
        assert session[1].startswith("Commands:")

    def test_end_of_input_says_goodbye(self):
        context, output, _ = run_session(["m"])
        assert output[-1] == "Goodbye!"
        assert context == CommandContext.browsing()

    def test_keyboard_interrupt_says_goodbye(self):
        output = []

        def interrupted(prompt):
            raise KeyboardInterrupt

        run(engine=FellDesertEngine(), settings=CliSettings(), read_line=interrupted, write=output.append)
        assert output[-1] == "Goodbye!"

    def test_prompt_comes_from_settings(self):
        _, _, read_line = run_session(["q"], settings=CliSettings(prompt="fell> "))
        assert read_line.prompts == ["fell> "]

    def test_command_errors_do_not_end_the_session(self, capsys):
        _, output, _ = run_session(["M", "P", "q"], engine=BrokenMapEngine())
        session = output[len(BANNER):]
        assert session[0] == "[ERROR]: map data unavailable"
        assert session[1] == "Turn 0 - Turn Start"
        assert session[2] == "Goodbye!"
        assert "RuntimeError" in capsys.readouterr().err


class TestSettings:
    """Test environment configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FELL_DESERT_DEBUG", raising=False)
        monkeypatch.delenv("FELL_DESERT_PROMPT", raising=False)
        settings = load_settings()
        assert settings.debug is False
        assert settings.prompt == "> "

    def test_debug_flag_values(self, monkeypatch):
        for value in ("1", "true", "TRUE", " yes ", "on"):
            monkeypatch.setenv("FELL_DESERT_DEBUG", value)
            assert load_settings().debug is True
        for value in ("0", "false", "", "nope"):
            monkeypatch.setenv("FELL_DESERT_DEBUG", value)
            assert load_settings().debug is False

    def test_custom_prompt(self, monkeypatch):
        monkeypatch.setenv("FELL_DESERT_PROMPT", ">> ")
        assert load_settings().prompt == ">> "


class TestDebugTracing:
    """Test [CLI DEBUG] output."""

    def test_silent_by_default(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "CLI_DEBUG", False)
        cli_debug("hidden")
        assert capsys.readouterr().out == ""

    def test_prints_when_enabled(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "CLI_DEBUG", True)
        cli_debug("visible")
        assert capsys.readouterr().out == "[CLI DEBUG] visible\n"

    def test_dispatch_routes_are_traced(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "CLI_DEBUG", True)
        run_session(["W", "hello", "q"])
        out = capsys.readouterr().out
        assert "[CLI DEBUG] 'W' -> listControllableSquaddies" in out
        assert "[CLI DEBUG] 'hello' -> echo" in out
