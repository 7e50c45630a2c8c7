"""Prompt loop engine.

One session renders a prompt, waits for a line under the configured input
mode and timeout, passes the line to the command and applies the verdict,
until the command exits, the read times out or input fails.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from .concurrency import wait_or_expire
from .config import PromptOptions
from .errors import InitContractError, NestedRunError, ReadTimeoutError, VerdictContractError
from .readers import LineReader, create_reader
from .types import Continue, Exit, InitError, InitOk, InitResult, Sentinel, State, render_prompt

T = TypeVar("T")

if TYPE_CHECKING:
    from .command import Command


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def parse_command(line: str) -> str:
    """Drop the trailing line terminator and nothing else."""
    return line.removesuffix("\n")


class PromptEngine:
    """Run one prompt session for a command."""

    def __init__(
        self,
        command: Command,
        options: PromptOptions | None = None,
        *,
        reader: LineReader | None = None,
    ) -> None:
        self.command = command
        self.options = options or command.options
        self.reader = reader or create_reader(self.options.input_mode, completions=self.options.completions)
        self._log = logger.bind(command=self.name)

    @property
    def name(self) -> str:
        return type(self.command).__name__

    async def run(self, args: Any = None) -> Any:
        """Initialize the command and loop until it exits.

        Returns the result of the exiting verdict, ``Sentinel.TIMEOUT``,
        ``Sentinel.COMMAND_ERROR`` or the ``InitError`` produced by ``init``.
        """
        initial = await self._initialize(args)
        if isinstance(initial, InitError):
            self._log.debug("session.init_error reason={!r}", initial.reason)
            return initial
        self._log.debug("session.start mode={} timeout={}", self.options.input_mode.value, self.options.timeout)
        return await self._loop(initial.state)

    async def _initialize(self, args: Any) -> InitResult:
        result = await _resolve(self.command.init(args))
        if isinstance(result, InitError):
            return result
        if not isinstance(result, InitOk):
            raise InitContractError(f"{self.name}.init returned {result!r}, expected InitOk or InitError")
        if result.continue_with is None:
            return result

        continuation = result.continue_with
        if isinstance(continuation, str):
            try:
                continuation = getattr(self.command, continuation)
            except AttributeError as exc:
                raise InitContractError(f"{self.name} has no continuation named {continuation!r}") from exc
        state = await _resolve(continuation(result.state))
        return InitOk(state)

    async def _loop(self, state: State) -> Any:
        while True:
            prompt = render_prompt(await _resolve(self.command.prompt_text(state)))
            try:
                line = await wait_or_expire(self.reader.read_line(prompt), self.options.timeout)
            except ReadTimeoutError:
                self._log.debug("session.timeout timeout={}", self.options.timeout)
                return Sentinel.TIMEOUT
            except Exception as exc:
                self._log.opt(exception=exc).error("session.input_error error={!r}", exc)
                return Sentinel.COMMAND_ERROR

            verdict = await _resolve(self.command.handle_command(parse_command(line), state))
            if isinstance(verdict, Continue):
                state = verdict.state
                continue
            if isinstance(verdict, Exit):
                self._log.debug("session.exit result={!r}", verdict.result)
                return verdict.result
            raise VerdictContractError(
                f"{self.name}.handle_command returned {verdict!r}, expected Continue or Exit"
            )


def run_blocking(coro: Coroutine[Any, Any, T]) -> T:
    """Run a session coroutine to completion from synchronous code."""
    if _running_loop() is not None:
        coro.close()
        raise NestedRunError("run() called inside a running event loop; await run_async() instead")
    return asyncio.run(coro)
