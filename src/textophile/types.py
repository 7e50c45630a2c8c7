"""Session data types shared by the engine and its consumers."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

State: TypeAlias = Any
PromptText: TypeAlias = str | Sequence[str]


class InputMode(str, Enum):
    """Whether typed input is echoed back to the terminal."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


class Sentinel(str, Enum):
    """Out-of-band results returned by a session instead of a handler result."""

    TIMEOUT = "timeout"
    COMMAND_ERROR = "Command Error"


TIMEOUT = Sentinel.TIMEOUT
COMMAND_ERROR = Sentinel.COMMAND_ERROR


@dataclass(frozen=True)
class Continue:
    """Loop again with the next state."""

    state: State


@dataclass(frozen=True)
class Exit:
    """Stop the session and hand ``result`` back to the caller of ``run``."""

    result: Any
    state: State = None


Verdict: TypeAlias = Continue | Exit


@dataclass(frozen=True)
class InitOk:
    """Initial state, optionally refined by a continuation before the first prompt.

    ``continue_with`` is either the name of a method on the command or a callable
    taking the intermediate state.
    """

    state: State
    continue_with: str | Callable[[State], Any] | None = None


@dataclass(frozen=True)
class InitError:
    """Initialization failed; returned unchanged from ``run``."""

    reason: Any


InitResult: TypeAlias = InitOk | InitError


def render_prompt(text: PromptText) -> str:
    """Flatten prompt text into the exact string written before a read."""
    if isinstance(text, str):
        return text
    return "".join(text)
