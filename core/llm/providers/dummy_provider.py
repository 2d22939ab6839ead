import asyncio
from typing import Optional

from config.models import BackendConfig
from core.contracts.provider import GenerationBackend, ProgressCallback
from core.registry import backend_registry


@backend_registry.register("dummy")
class DummyProvider(GenerationBackend):
    """A dummy back end for tests and dry runs; records the prompts it receives."""

    def __init__(self, config: BackendConfig, response: str = "test response"):
        self.config = config
        self._response = response
        self.prompts = []

    async def generate(self, prompt: str, progress: Optional[ProgressCallback] = None) -> str:
        self.prompts.append(prompt)
        if progress:
            progress("Generating dummy worklog...")
        await asyncio.sleep(0)
        return self._response
