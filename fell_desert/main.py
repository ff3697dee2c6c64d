"""
Command loop for Fell Desert
Reads one line at a time, dispatches it and prints the answer.

Run with:
    python -m fell_desert.main
    fell-desert            (installed script)
"""

import sys
import traceback
from typing import Callable, Optional

from fell_desert.commands.dispatcher import CommandAction, CommandDispatcher
from fell_desert.config import CliSettings, load_settings
from fell_desert.engine.harness import FellDesertEngine
from fell_desert.engine.interface import MissionEngine
from fell_desert.models.context import CommandContext

BANNER = [
    "Battle of Fell Desert CLI",
    "=========================",
    "Game engine initialized.",
    "Enter 'Q' to quit, '?' for commands.",
    "",
]


def run(
        engine: Optional[MissionEngine] = None,
        settings: Optional[CliSettings] = None,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
) -> CommandContext:
    """
    Run the command loop until the player quits or input ends.

    Returns the last context, mostly so tests can check what was selected.
    """
    settings = settings or load_settings()
    engine = engine or FellDesertEngine()
    dispatcher = CommandDispatcher()
    context = CommandContext.browsing()

    for line in BANNER:
        write(line)

    while True:
        try:
            raw_input = read_line(settings.prompt)
        except (EOFError, KeyboardInterrupt):
            write("Goodbye!")
            return context

        try:
            result = dispatcher.dispatch(raw_input, engine, context)
        except Exception as e:
            write(f"[ERROR]: {e}")
            traceback.print_exc()
            continue

        write(result.message)

        if result.updated_context is not None:
            context = result.updated_context

        if result.action == CommandAction.QUIT:
            return context


def main():
    run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
