"""Line readers used by the prompt engine.

A reader writes the prompt, collects one line of text and hands it back
decoded, with line endings unified to ``\\n``. Terminal configuration such as
echo suppression lives here and nowhere else.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from collections.abc import Sequence
from typing import IO, Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.input import Input
from prompt_toolkit.output import Output

from .errors import InputError
from .types import InputMode


class LineReader(Protocol):
    """Acquire one line of text after writing ``prompt``."""

    async def read_line(self, prompt: str) -> str: ...


def normalize_line(raw: str | bytes, encoding: str = "utf-8") -> str:
    """Decode ``raw`` and unify ``\\r\\n`` and ``\\r`` line endings to ``\\n``."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise InputError(f"input is not valid {encoding}") from exc
    return raw.replace("\r\n", "\n").replace("\r", "\n")


class TerminalReader:
    """Interactive reader backed by prompt_toolkit.

    Hidden mode turns on password entry, so typed characters are never echoed.
    Cancelling a pending read exits the prompt and restores the terminal.
    """

    def __init__(
        self,
        mode: InputMode = InputMode.VISIBLE,
        *,
        completions: Sequence[str] = (),
        input: Input | None = None,
        output: Output | None = None,
    ) -> None:
        self.mode = mode
        self._completer = WordCompleter(list(completions)) if completions else None
        self._session: PromptSession[str] = PromptSession(input=input, output=output)

    async def read_line(self, prompt: str) -> str:
        text = await self._session.prompt_async(
            prompt,
            is_password=self.mode is InputMode.HIDDEN,
            completer=self._completer,
        )
        return normalize_line(text)


class StreamReader:
    """Reader over plain streams, for pipes and other non-terminal input.

    The prompt goes to ``stdout``; input is never written back in either mode.
    Each read runs ``readline`` on a daemon thread. A read abandoned on timeout
    keeps its thread until the stream yields a line, and that line is dropped.
    """

    def __init__(
        self,
        mode: InputMode = InputMode.VISIBLE,
        *,
        stdin: IO[str] | IO[bytes] | None = None,
        stdout: IO[str] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.mode = mode
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._encoding = encoding

    async def read_line(self, prompt: str) -> str:
        if prompt:
            self._stdout.write(prompt)
            self._stdout.flush()
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[str | bytes] = loop.create_future()
        thread = threading.Thread(target=self._read_into, args=(loop, fut), daemon=True)
        thread.start()
        raw = await fut
        if not raw:
            raise EOFError("end of input")
        return normalize_line(raw, self._encoding)

    def _read_into(self, loop: asyncio.AbstractEventLoop, fut: asyncio.Future[str | bytes]) -> None:
        try:
            raw = self._stdin.readline()
        except Exception as exc:
            _deliver(loop, fut, b"", exc)
            return
        _deliver(loop, fut, raw, None)


def _settle(fut: asyncio.Future[str | bytes], raw: str | bytes, error: Exception | None) -> None:
    if fut.done():
        return
    if error is not None:
        fut.set_exception(error)
    else:
        fut.set_result(raw)


def _deliver(
    loop: asyncio.AbstractEventLoop,
    fut: asyncio.Future[str | bytes],
    raw: str | bytes,
    error: Exception | None,
) -> None:
    try:
        loop.call_soon_threadsafe(_settle, fut, raw, error)
    except RuntimeError:
        # The session's loop is already closed.
        return


def create_reader(mode: InputMode, *, completions: Sequence[str] = ()) -> LineReader:
    """Pick the terminal reader for a TTY and the stream reader otherwise."""
    if sys.stdin.isatty():
        return TerminalReader(mode, completions=completions)
    return StreamReader(mode)
