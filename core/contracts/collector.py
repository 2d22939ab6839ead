from pathlib import Path
from typing import Protocol

from .models import CommitBatch, TimeWindow


class Collector(Protocol):
    """A protocol for classes that gather commit history for a window."""

    def collect(self, repo_path: Path, window: TimeWindow) -> CommitBatch:
        """Collects the capped commit batch for `window`."""
        ...
