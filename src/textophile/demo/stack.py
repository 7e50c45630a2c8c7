"""A push/pop stack kept as session state."""

from __future__ import annotations

from typing import Any

from ..command import Command
from ..types import Continue, Exit, InitOk, PromptText, Verdict
from . import output


class StackCommand(Command):
    def init(self, args: Any) -> InitOk:
        return InitOk(list(args or []))

    def handle_command(self, command: str, stack: list[Any]) -> Verdict:
        if command.startswith("push "):
            return Continue([command.removeprefix("push "), *stack])
        if command == "pop":
            if not stack:
                output.say("stack is empty")
                return Continue(stack)
            head, *rest = stack
            output.say(str(head))
            return Continue(rest)
        if command == "exit":
            return Exit("ok", stack)
        output.say("Unknown Command")
        return Continue(stack)

    def prompt_text(self, stack: list[Any]) -> PromptText:
        if not stack:
            return "empty> "
        return [str(len(stack)), "> "]
