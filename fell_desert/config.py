"""
Configuration for Fell Desert CLI
Reads settings from the environment (and a local .env file).

Settings:
    FELL_DESERT_DEBUG   Print [CLI DEBUG] traces (default: off)
    FELL_DESERT_PROMPT  Prompt shown by the command loop (default: "> ")
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

TRUTHY_VALUES = ("1", "true", "yes", "on")


@dataclass
class CliSettings:
    debug: bool = False
    prompt: str = "> "


def load_settings() -> CliSettings:
    """Build settings from the current environment."""
    return CliSettings(
        debug=os.getenv("FELL_DESERT_DEBUG", "false").strip().lower() in TRUTHY_VALUES,
        prompt=os.getenv("FELL_DESERT_PROMPT", "> "),
    )


# Debug flag - set FELL_DESERT_DEBUG=true to trace command routing
CLI_DEBUG = load_settings().debug


def cli_debug(msg: str):
    """Print debug message if CLI_DEBUG is enabled."""
    if CLI_DEBUG:
        print(f"[CLI DEBUG] {msg}")
