from typing import Callable, Optional, Protocol

ProgressCallback = Callable[[str], None]


class GenerationBackend(Protocol):
    """A protocol for the external text-generation back ends."""

    async def generate(self, prompt: str, progress: Optional[ProgressCallback] = None) -> str:
        """
        Turns a prompt into report text.

        Args:
            prompt: The full instruction payload.
            progress: Optional callback notified with short status messages.

        Returns:
            The raw text the back end produced.
        """
        ...
