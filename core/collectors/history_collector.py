from pathlib import Path
from typing import List

from core.contracts.collector import Collector
from core.contracts.models import CommitBatch, CommitRecord, TimeWindow
from utils.git import DEFAULT_MAX_OUTPUT_BYTES, get_commit_diff, list_commit_hashes
from utils.logger import logger


class HistoryCollector(Collector):
    """
    Collects the commits of a window from a local Git repository, together with
    their full diffs, capped at `max_commits`.
    """

    def __init__(
        self,
        max_commits: int = 10,
        context_lines: int = 3,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        """
        Initializes the HistoryCollector.

        Args:
            max_commits: The most commits to fetch diffs for.
            context_lines: Lines of context in each diff.
            max_output_bytes: Largest single diff accepted.
        """
        if max_commits <= 0:
            raise ValueError("Number of commits (max_commits) must be a positive integer.")
        self._max_commits = max_commits
        self._context_lines = context_lines
        self._max_output_bytes = max_output_bytes

    def collect(self, repo_path: Path, window: TimeWindow) -> CommitBatch:
        """
        Lists the commits made since `window` and fetches the diff of the most
        recent `max_commits` of them, one at a time.

        Returns:
            The batch of records, most recent first. Empty when the window has no commits.

        Raises:
            HistoryQueryError: If a git query fails.
            OutputTooLargeError: If one diff exceeds the capture limit.
        """
        hashes = list_commit_hashes(repo_path, window.to_git())
        logger.info(f"Found {len(hashes)} commits in {repo_path} since {window}")
        if not hashes:
            return CommitBatch()

        kept = hashes[: self._max_commits]
        if len(kept) < len(hashes):
            logger.warning(f"Only the {len(kept)} most recent of {len(hashes)} commits will be included.")

        records: List[CommitRecord] = []
        for commit_hash in kept:
            diff = get_commit_diff(
                repo_path,
                commit_hash,
                context_lines=self._context_lines,
                max_output_bytes=self._max_output_bytes,
            )
            record = CommitRecord(hash=commit_hash, diff=diff)
            logger.debug(f"Fetched diff for {record.short_hash} ({len(diff)} chars)")
            records.append(record)

        return CommitBatch(records=records, total_in_window=len(hashes))
