"""Username and password prompts.

The password prompt is hidden and runs as a nested session from the
username handler.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from ..command import Command
from ..types import Continue, Exit, InitOk, Sentinel, Verdict
from . import output

MAX_PASSWORD_TRIES = 5

_PASSWORDS = {"amos": "lonestar"}


@dataclass(frozen=True)
class User:
    name: str


def authenticate(username: str, password: str) -> User | None:
    if _PASSWORDS.get(username) == password:
        return User(name=username)
    return None


@dataclass(frozen=True)
class PasswordState:
    username: str
    tries: int = 0


class PasswordCommand(Command, input_mode="hidden", prompt="password: ", timeout=10):
    """Ask for a password; exits with the user, or ``None`` once tries run out."""

    def init(self, username: str) -> InitOk:
        return InitOk(PasswordState(username=username))

    def handle_command(self, password: str, state: PasswordState) -> Verdict:
        user = authenticate(state.username, password)
        if user is not None or state.tries >= MAX_PASSWORD_TRIES:
            return Exit(user)
        return Continue(PasswordState(username=state.username, tries=state.tries + 1))


class LoginCommand(Command, timeout=None):
    """Ask for a username, then a password, until someone logs in."""

    failure_delay = 2.0

    def init(self, args: Any) -> InitOk:
        return InitOk(None)

    def prompt_text(self, state: None) -> str:
        output.clear_screen()
        return "username: "

    async def handle_command(self, username: str, state: None) -> Verdict:
        result = await PasswordCommand.run_async(username)
        if isinstance(result, User):
            return Exit(result, state)
        if result is Sentinel.TIMEOUT:
            return Continue(state)
        output.say("Authentication Failed")
        await asyncio.sleep(self.failure_delay)
        return Continue(state)
