"""A small logged-in shell that counts the commands it has run."""

from __future__ import annotations

import asyncio
import shlex
from dataclasses import dataclass, replace

from ..command import Command
from ..types import Continue, Exit, InitError, InitOk, Verdict
from . import output
from .login import LoginCommand, User

SHELL_COMMANDS = ("exit", "whoami", "countdown")


@dataclass(frozen=True)
class ShellArgs:
    restart: bool = False


@dataclass(frozen=True)
class ShellState:
    user: User
    count: int = 0
    restart: bool = False


def parse_count(args: list[str]) -> int | None:
    """Accept ``--count N`` or ``--count=N``."""
    if len(args) == 2 and args[0] == "--count":
        value = args[1]
    elif len(args) == 1 and args[0].startswith("--count="):
        value = args[0].removeprefix("--count=")
    else:
        return None
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


class ShellCommand(Command, timeout=30, completions=SHELL_COMMANDS):
    """Log in, then run ``whoami``, ``countdown`` and ``exit``.

    With ``restart`` set, exiting waits a moment and starts a fresh session
    from the login prompt.
    """

    tick = 1.0
    restart_delay = 2.0

    async def init(self, args: ShellArgs | None) -> InitOk | InitError:
        args = args or ShellArgs()
        output.clear_screen()
        user = await LoginCommand.run_async()
        if not isinstance(user, User):
            return InitError(user)
        return InitOk(ShellState(user=user, restart=args.restart))

    def prompt_text(self, state: ShellState) -> str:
        return f"{state.count}> "

    async def handle_command(self, command: str, state: ShellState) -> Verdict:
        try:
            argv = shlex.split(command)
        except ValueError:
            output.say("Unknown Command")
            return Continue(self._counted(state))
        if not argv:
            return Continue(state)

        name, args = argv[0], argv[1:]
        if name == "exit":
            output.say("bye")
            if not state.restart:
                return Exit("ok", state)
            await asyncio.sleep(self.restart_delay)
            return Exit(await type(self).run_async(ShellArgs(restart=True)), state)
        if name == "whoami":
            output.say(state.user.name)
        elif name == "countdown":
            count = parse_count(args)
            if count is None:
                output.say("usage: countdown --count N")
            else:
                await self._countdown(count)
        else:
            output.say("Unknown Command")
        return Continue(self._counted(state))

    async def _countdown(self, count: int) -> None:
        for remaining in range(count, 0, -1):
            output.overwrite(f"{remaining} ")
            await asyncio.sleep(self.tick)
        output.say("0")

    @staticmethod
    def _counted(state: ShellState) -> ShellState:
        return replace(state, count=state.count + 1)
