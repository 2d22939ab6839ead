import asyncio
import shlex
from typing import Optional

from config.models import BackendConfig
from core.contracts.provider import GenerationBackend, ProgressCallback
from core.registry import backend_registry
from utils.errors import GenerationError, GenerationProcessError, GenerationTimeoutError
from utils.logger import logger


@backend_registry.register("cli")
class SubprocessBackend(GenerationBackend):
    """
    Runs an external generation CLI (gemini by default): the prompt goes to its
    stdin, the report comes back on its stdout. Its stderr is left attached to
    the operator's terminal.
    """

    def __init__(self, config: BackendConfig):
        self.config = config
        if not config.command:
            raise GenerationError("The cli back end requires `backend.command` to be set in the config.")
        self._argv = [config.command, *config.args]

    @property
    def display_name(self) -> str:
        return shlex.join(self._argv)

    async def _spawn(self) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                *self._argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=None,
            )
        except FileNotFoundError as e:
            raise GenerationError(f"Back end command '{self.config.command}' not found. Is it installed and on PATH?") from e
        except OSError as e:
            raise GenerationError(f"Failed to start back end '{self.display_name}': {e}") from e

    async def _communicate(self, process: asyncio.subprocess.Process, payload: bytes) -> bytes:
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(payload), timeout=self.config.timeout_sec)
            return stdout
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise GenerationTimeoutError(
                f"{self.config.command} did not finish within {self.config.timeout_sec} seconds"
            )

    async def generate(self, prompt: str, progress: Optional[ProgressCallback] = None) -> str:
        """
        Sends `prompt` to the back end process and returns everything it printed.

        Raises:
            GenerationProcessError: If the process exits with a non-zero code.
            GenerationTimeoutError: If `timeout_sec` is set and expires.
            GenerationError: If the process cannot be started.
        """
        process = await self._spawn()
        logger.info(f"Started back end '{self.display_name}' (pid {process.pid})")
        if progress:
            progress(f"Waiting for {self.config.command}...")

        stdout = await self._communicate(process, prompt.encode("utf-8"))
        if process.returncode != 0:
            raise GenerationProcessError(
                f"{self.config.command} exited code {process.returncode}",
                exit_code=process.returncode,
            )

        output = stdout.decode("utf-8", errors="replace")
        logger.info(f"Back end returned {len(output)} characters")
        return output
