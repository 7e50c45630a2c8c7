from __future__ import annotations

import asyncio
import io
from collections.abc import Iterable

import pytest
from rich.console import Console

from textophile.demo import output


class ScriptedReader:
    """Hand out pre-typed lines; once they run out, wait forever."""

    def __init__(self, lines: Iterable[str | BaseException] = ()) -> None:
        self.lines = list(lines)
        self.prompts: list[str] = []

    async def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            await asyncio.Event().wait()
        item = self.lines.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def scripted_reader() -> type[ScriptedReader]:
    return ScriptedReader


@pytest.fixture
def demo_output(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    buffer = io.StringIO()
    monkeypatch.setattr(output, "console", Console(file=buffer, highlight=False, width=120))
    return buffer
