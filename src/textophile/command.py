"""Base class for interactive prompt commands.

A command supplies three callbacks:

* ``init(args)`` returns ``InitOk(state)``, ``InitOk(state, continue_with=...)``
  or ``InitError(reason)``.
* ``prompt_text(state)`` (optional) returns a string or a list of strings.
  The default is the static ``prompt`` option.
* ``handle_command(command, state)`` returns ``Continue(state)`` or
  ``Exit(result, state)``.

Any callback may be a coroutine function. Options are class keywords::

    class Password(Command, input_mode="hidden", prompt="password: ", timeout=10):
        ...

Recognized options are ``timeout`` (seconds, ``None`` to wait forever),
``input_mode``, ``prompt`` and ``completions``.

Example::

    class Stack(Command):
        def init(self, stack):
            return InitOk(stack)

        def handle_command(self, command, stack):
            if command.startswith("push "):
                return Continue([command.removeprefix("push "), *stack])
            if command == "exit":
                return Exit("ok", stack)
            return Continue(stack)

        def prompt_text(self, stack):
            return [str(len(stack)), "> "]

    Stack.run([1])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, ClassVar

from .config import PromptOptions, Settings, resolve_options
from .engine import PromptEngine, run_blocking
from .readers import LineReader
from .types import InitResult, PromptText, State, Verdict


class Command(ABC):
    """Interactive command driven by the prompt engine."""

    declared_options: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **options: Any) -> None:
        super().__init_subclass__()
        unknown = sorted(set(options) - set(PromptOptions.model_fields))
        if unknown:
            raise TypeError(f"{cls.__name__}: unknown prompt options {', '.join(unknown)}")
        if "completions" in options:
            options["completions"] = tuple(options["completions"])
        cls.declared_options = {**cls.declared_options, **options}

    def __init__(self, options: PromptOptions | None = None) -> None:
        self.options = options or self.resolve_options()

    @classmethod
    def resolve_options(cls, settings: Settings | None = None) -> PromptOptions:
        return resolve_options(cls.declared_options, settings)

    @abstractmethod
    def init(self, args: Any) -> InitResult | Awaitable[InitResult]:
        """Build the initial state from the arguments given to ``run``."""

    def prompt_text(self, state: State) -> PromptText | Awaitable[PromptText]:
        return self.options.prompt

    @abstractmethod
    def handle_command(self, command: str, state: State) -> Verdict | Awaitable[Verdict]:
        """Process one line typed by the user."""

    @classmethod
    async def run_async(
        cls,
        args: Any = None,
        *,
        reader: LineReader | None = None,
        settings: Settings | None = None,
    ) -> Any:
        """Run a session and return its result. Safe to await from a handler."""
        command = cls(cls.resolve_options(settings))
        return await PromptEngine(command, reader=reader).run(args)

    @classmethod
    def run(
        cls,
        args: Any = None,
        *,
        reader: LineReader | None = None,
        settings: Settings | None = None,
    ) -> Any:
        """Blocking form of ``run_async``."""
        return run_blocking(cls.run_async(args, reader=reader, settings=settings))
