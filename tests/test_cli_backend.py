import sys

import pytest

from config.models import BackendConfig
from core.llm.providers.cli_backend import SubprocessBackend
from core.llm.router import get_backend
from utils.errors import GenerationError, GenerationProcessError, GenerationTimeoutError


def python_backend(script, **kwargs):
    return SubprocessBackend(BackendConfig(command=sys.executable, args=["-c", script], **kwargs))


def test_get_provider_cli():
    backend = get_backend(BackendConfig(provider="cli"))
    assert isinstance(backend, SubprocessBackend)


@pytest.mark.asyncio
async def test_prompt_goes_to_stdin_and_stdout_comes_back():
    backend = python_backend("import sys; sys.stdout.write(sys.stdin.read().upper())")
    assert await backend.generate("summarize this") == "SUMMARIZE THIS"


@pytest.mark.asyncio
async def test_progress_callback_is_notified():
    messages = []
    backend = python_backend("import sys; sys.stdin.read(); print('done')")
    await backend.generate("prompt", progress=messages.append)
    assert messages


@pytest.mark.asyncio
async def test_non_zero_exit_raises_with_code():
    backend = python_backend("import sys; sys.stdin.read(); print('partial'); sys.exit(3)")
    with pytest.raises(GenerationProcessError, match="exited code 3") as excinfo:
        await backend.generate("prompt")
    assert excinfo.value.exit_code == 3


@pytest.mark.asyncio
async def test_stderr_is_not_captured(capfd):
    backend = python_backend("import sys; sys.stdin.read(); sys.stderr.write('auth warning'); print('report')")
    result = await backend.generate("prompt")
    assert result.strip() == "report"
    assert "auth warning" in capfd.readouterr().err


@pytest.mark.asyncio
async def test_missing_command():
    backend = SubprocessBackend(BackendConfig(command="definitely-not-a-real-llm-cli", args=[]))
    with pytest.raises(GenerationError, match="not found"):
        await backend.generate("prompt")


@pytest.mark.asyncio
async def test_timeout_kills_process():
    backend = python_backend("import time; time.sleep(30)", timeout_sec=0.5)
    with pytest.raises(GenerationTimeoutError):
        await backend.generate("prompt")
