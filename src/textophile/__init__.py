"""textophile - interactive line-oriented command prompts."""

from .command import Command
from .config import PromptOptions, Settings, get_settings
from .engine import PromptEngine
from .errors import (
    ContractError,
    InitContractError,
    InputError,
    NestedRunError,
    TextophileError,
    VerdictContractError,
)
from .readers import LineReader, StreamReader, TerminalReader, create_reader
from .types import COMMAND_ERROR, TIMEOUT, Continue, Exit, InitError, InitOk, InputMode, Sentinel

__version__ = "0.1.0"

__all__ = [
    "COMMAND_ERROR",
    "TIMEOUT",
    "Command",
    "Continue",
    "ContractError",
    "Exit",
    "InitContractError",
    "InitError",
    "InitOk",
    "InputError",
    "InputMode",
    "LineReader",
    "NestedRunError",
    "PromptEngine",
    "PromptOptions",
    "Sentinel",
    "Settings",
    "StreamReader",
    "TerminalReader",
    "TextophileError",
    "VerdictContractError",
    "create_reader",
    "get_settings",
]
