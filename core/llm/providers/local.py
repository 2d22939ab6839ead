import os
import json
from typing import Optional

import httpx

from config.models import BackendConfig
from core.contracts.provider import GenerationBackend, ProgressCallback
from core.registry import backend_registry
from utils.errors import GenerationError
from utils.logger import logger


@backend_registry.register("local")
class LocalProvider(GenerationBackend):
    """
    A back end for local OpenAI-compatible APIs (such as Ollama).
    """

    def __init__(self, config: BackendConfig):
        self.config = config

        # Local servers rarely need a key, but send one when configured.
        self._api_key = config.api_key or os.getenv("LOCAL_API_KEY", "ollama")

        self._base_url = config.base_url or os.getenv("OLLAMA_BASE_URL")
        if not self._base_url:
            raise GenerationError("Local back end requires a `base_url` to be set in the config.")

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout_sec,
        )

    async def _request(self, payload: dict) -> httpx.Response:
        try:
            response = await self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as e:
            raise GenerationError(f"Request to local back end timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            try:
                error_details = e.response.json()
                error_message = error_details.get("error", {}).get("message", e.response.text)
            except (json.JSONDecodeError, AttributeError):
                error_message = e.response.text
            raise GenerationError(f"Local back end API error ({e.response.status_code}): {error_message}") from e
        except httpx.RequestError as e:
            raise GenerationError(f"An unexpected network error occurred with the local back end: {e}") from e

    def _build_payload(self, prompt: str) -> dict:
        payload = {
            "model": self.config.name,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }
        payload.update(self.config.parameters)
        return payload

    async def generate(self, prompt: str, progress: Optional[ProgressCallback] = None) -> str:
        if progress:
            progress(f"Waiting for {self.config.name} at {self._base_url}...")
        logger.info(f"Calling local back end {self._base_url} with model {self.config.name}")
        try:
            response = await self._request(self._build_payload(prompt))
        finally:
            await self._client.aclose()
        data = response.json()
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Unexpected response from local back end: {data}") from e
