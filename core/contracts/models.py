from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TimeWindow(BaseModel):
    """The inclusive lower bound for history selection: local midnight of one date."""
    model_config = ConfigDict(frozen=True)

    since: datetime

    def to_git(self) -> str:
        return self.since.isoformat()

    def __str__(self) -> str:
        return self.to_git()


class CommitRecord(BaseModel):
    hash: str
    diff: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


class CommitBatch(BaseModel):
    records: List[CommitRecord] = []
    total_in_window: int = 0  # commits found before the cap was applied

    @property
    def is_empty(self) -> bool:
        return not self.records


class WorklogReport(BaseModel):
    content: str


class ProjectContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    repo_path: Path
    output_folder: str = "worklogs"

    @property
    def output_dir(self) -> Path:
        return self.repo_path / self.output_folder


class WorklogResult(BaseModel):
    project: ProjectContext
    window: TimeWindow
    commit_count: int = 0
    path: Optional[Path] = None
