from __future__ import annotations

import asyncio
import threading
import time
from typing import Any

import pytest
from loguru import logger

from textophile import (
    COMMAND_ERROR,
    TIMEOUT,
    Command,
    Continue,
    Exit,
    InitContractError,
    InitError,
    InitOk,
    NestedRunError,
    PromptEngine,
    Sentinel,
    VerdictContractError,
)


class ByeCommand(Command):
    def init(self, args: Any) -> InitOk:
        return InitOk(args)

    def handle_command(self, command: str, state: Any):
        if command == "exit":
            return Exit("bye", state)
        return Continue(state)


class CounterCommand(Command):
    def __init__(self, options=None) -> None:
        super().__init__(options)
        self.seen: list[int] = []

    def init(self, args: Any) -> InitOk:
        return InitOk(0)

    def prompt_text(self, count: int) -> str:
        self.seen.append(count)
        return f"{count}> "

    def handle_command(self, command: str, count: int):
        if command == "exit":
            return Exit(count, count)
        return Continue(count + 1)


class RecordingCommand(Command, timeout=0.2):
    def __init__(self, options=None) -> None:
        super().__init__(options)
        self.handled: list[str] = []

    def init(self, args: Any) -> InitOk:
        return InitOk(None)

    def handle_command(self, command: str, state: Any):
        self.handled.append(command)
        return Continue(state)


def test_exit_verdict_result_is_returned(scripted_reader) -> None:
    reader = scripted_reader(["exit\n"])

    assert ByeCommand.run(None, reader=reader) == "bye"
    assert reader.prompts == [""]


@pytest.mark.asyncio
async def test_state_is_threaded_between_iterations(scripted_reader) -> None:
    command = CounterCommand()
    reader = scripted_reader(["a\n", "b\n", "c\n", "exit\n"])

    result = await PromptEngine(command, reader=reader).run()

    assert result == 3
    assert command.seen == [0, 1, 2, 3]
    assert reader.prompts == ["0> ", "1> ", "2> ", "3> "]


@pytest.mark.asyncio
async def test_no_prompt_after_exit(scripted_reader) -> None:
    command = CounterCommand()
    reader = scripted_reader(["exit\n", "ignored\n"])

    assert await PromptEngine(command, reader=reader).run() == 0
    assert reader.prompts == ["0> "]
    assert reader.lines == ["ignored\n"]


@pytest.mark.asyncio
async def test_timeout_returns_sentinel_after_timeout(scripted_reader) -> None:
    command = RecordingCommand()
    reader = scripted_reader([])

    started = time.monotonic()
    result = await PromptEngine(command, reader=reader).run()
    elapsed = time.monotonic() - started

    assert result is TIMEOUT
    assert result == "timeout"
    assert 0.18 <= elapsed < 2
    assert command.handled == []


@pytest.mark.asyncio
async def test_timeout_after_several_commands(scripted_reader) -> None:
    command = RecordingCommand()
    reader = scripted_reader(["one\n", "two\n"])

    assert await PromptEngine(command, reader=reader).run() is Sentinel.TIMEOUT
    assert command.handled == ["one", "two"]
    assert len(reader.prompts) == 3


@pytest.mark.asyncio
async def test_line_finishing_after_timeout_is_dropped() -> None:
    finished = threading.Event()

    def slow_line() -> str:
        time.sleep(0.3)
        finished.set()
        return "late\n"

    class SlowReader:
        async def read_line(self, prompt: str) -> str:
            return await asyncio.to_thread(slow_line)

    command = RecordingCommand(RecordingCommand.resolve_options().model_copy(update={"timeout": 0.05}))

    assert await PromptEngine(command, reader=SlowReader()).run() is TIMEOUT
    await asyncio.to_thread(finished.wait, 2)
    await asyncio.sleep(0.05)
    assert command.handled == []


@pytest.mark.asyncio
async def test_input_fault_becomes_command_error(scripted_reader) -> None:
    messages: list[str] = []
    sink_id = logger.add(messages.append, level="ERROR", format="{message}")
    command = RecordingCommand()
    reader = scripted_reader(["fine\n", OSError("device gone")])
    try:
        result = await PromptEngine(command, reader=reader).run()
    finally:
        logger.remove(sink_id)

    assert result is COMMAND_ERROR
    assert result == "Command Error"
    assert command.handled == ["fine"]
    assert any("session.input_error" in message for message in messages)


@pytest.mark.asyncio
async def test_only_the_line_terminator_is_stripped(scripted_reader) -> None:
    command = RecordingCommand()
    reader = scripted_reader(["  Mixed Case  \n", "no newline", "two\n\n"])

    await PromptEngine(command, reader=reader).run()

    assert command.handled == ["  Mixed Case  ", "no newline", "two\n"]


@pytest.mark.asyncio
async def test_prompt_sequence_is_concatenated(scripted_reader) -> None:
    class ListPrompt(ByeCommand):
        def prompt_text(self, state: Any) -> list[str]:
            return ["[", str(state), "]", "> "]

    reader = scripted_reader(["exit\n"])
    await PromptEngine(ListPrompt(), reader=reader).run(7)

    assert reader.prompts == ["[7]> "]


@pytest.mark.asyncio
async def test_static_prompt_option_is_the_default_prompt(scripted_reader) -> None:
    class Static(ByeCommand, prompt="password: "):
        pass

    reader = scripted_reader(["exit\n"])
    await PromptEngine(Static(), reader=reader).run()

    assert reader.prompts == ["password: "]


@pytest.mark.asyncio
async def test_init_error_is_returned_without_prompting(scripted_reader) -> None:
    class Failing(ByeCommand):
        def init(self, args: Any) -> InitError:
            return InitError("no terminal")

    reader = scripted_reader(["exit\n"])
    result = await PromptEngine(Failing(), reader=reader).run()

    assert result == InitError("no terminal")
    assert reader.prompts == []


@pytest.mark.asyncio
async def test_init_continuation_by_name(scripted_reader) -> None:
    class Continued(CounterCommand):
        def init(self, args: Any) -> InitOk:
            return InitOk(args, continue_with="load")

        def load(self, value: int) -> int:
            return value * 10

    command = Continued()
    reader = scripted_reader(["exit\n"])

    assert await PromptEngine(command, reader=reader).run(4) == 40
    assert command.seen == [40]


@pytest.mark.asyncio
async def test_init_continuation_may_be_async_callable(scripted_reader) -> None:
    async def load(value: int) -> int:
        await asyncio.sleep(0)
        return value + 1

    class Continued(CounterCommand):
        def init(self, args: Any) -> InitOk:
            return InitOk(args, continue_with=load)

    reader = scripted_reader(["exit\n"])
    assert await PromptEngine(Continued(), reader=reader).run(1) == 2


@pytest.mark.asyncio
async def test_unknown_init_shape_is_a_contract_error(scripted_reader) -> None:
    class Broken(ByeCommand):
        def init(self, args: Any):
            return ("ok", args)

    with pytest.raises(InitContractError):
        await PromptEngine(Broken(), reader=scripted_reader([])).run()


@pytest.mark.asyncio
async def test_missing_continuation_is_a_contract_error(scripted_reader) -> None:
    class Broken(ByeCommand):
        def init(self, args: Any) -> InitOk:
            return InitOk(args, continue_with="missing")

    with pytest.raises(InitContractError):
        await PromptEngine(Broken(), reader=scripted_reader([])).run()


@pytest.mark.asyncio
async def test_unknown_verdict_is_a_contract_error(scripted_reader) -> None:
    class Broken(ByeCommand):
        def handle_command(self, command: str, state: Any):
            return state

    with pytest.raises(VerdictContractError):
        await PromptEngine(Broken(), reader=scripted_reader(["x\n"])).run()


@pytest.mark.asyncio
async def test_handler_exception_propagates(scripted_reader) -> None:
    class Broken(ByeCommand):
        def handle_command(self, command: str, state: Any):
            raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        await PromptEngine(Broken(), reader=scripted_reader(["x\n"])).run()


@pytest.mark.asyncio
async def test_async_handler_can_run_a_nested_session(scripted_reader) -> None:
    inner_reader = scripted_reader(["exit\n"])

    class Outer(ByeCommand):
        async def handle_command(self, command: str, state: Any):
            inner = await ByeCommand.run_async(None, reader=inner_reader)
            return Exit(f"{command}:{inner}", state)

    result = await PromptEngine(Outer(), reader=scripted_reader(["go\n"])).run()

    assert result == "go:bye"


@pytest.mark.asyncio
async def test_blocking_run_inside_event_loop_is_rejected(scripted_reader) -> None:
    with pytest.raises(NestedRunError):
        ByeCommand.run(None, reader=scripted_reader(["exit\n"]))


@pytest.mark.asyncio
async def test_session_events_carry_the_command_name(scripted_reader) -> None:
    records: list[dict[str, Any]] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        await PromptEngine(RecordingCommand(), reader=scripted_reader(["one\n"])).run()
    finally:
        logger.remove(sink_id)

    events = {record["message"].split()[0]: record["extra"].get("command") for record in records}
    assert events["session.start"] == "RecordingCommand"
    assert events["session.timeout"] == "RecordingCommand"
