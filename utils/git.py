import subprocess
from pathlib import Path
from typing import List, Union

from utils.errors import HistoryQueryError, OutputTooLargeError
from utils.logger import logger

DIFF_HEADER_FORMAT = "format:Commit: %H%nAuthor: %an%nDate: %ad%n"
DEFAULT_MAX_OUTPUT_BYTES = 20 * 1024 * 1024


def _run_git(repo_path: Union[str, Path], *args: str) -> subprocess.CompletedProcess:
    """
    Runs a read-only git command inside `repo_path` and returns the raw result.

    Raises:
        HistoryQueryError: If git is missing or exits with a non-zero code.
    """
    command = ["git", "-C", str(repo_path), *args]
    logger.debug(f"Running: {command}")
    try:
        result = subprocess.run(command, capture_output=True)
    except FileNotFoundError:
        raise HistoryQueryError("Git is not installed or not in PATH.")
    except OSError as e:
        raise HistoryQueryError(f"Failed to run git in {repo_path}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise HistoryQueryError(f"git {args[0]} failed in {repo_path} (exit {result.returncode}): {stderr}")
    return result


def list_commit_hashes(repo_path: Union[str, Path], since: str) -> List[str]:
    """
    Lists the full hashes of all commits made at or after `since`, most recent first.

    Args:
        repo_path: Path to the git repository.
        since: A timestamp git understands, e.g. an ISO-8601 string with offset.

    Returns:
        The commit hashes in the order `git log` reports them.

    Raises:
        HistoryQueryError: If the path is not a repository or the query fails.
    """
    result = _run_git(repo_path, "log", f"--since={since}", "--pretty=format:%H")
    output = result.stdout.decode("utf-8", errors="replace")
    return [line.strip() for line in output.splitlines() if line.strip()]


def get_commit_diff(
    repo_path: Union[str, Path],
    commit_hash: str,
    context_lines: int = 3,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> str:
    """
    Retrieves the unified diff of one commit, prefixed with hash/author/date lines.

    Args:
        repo_path: Path to the git repository.
        commit_hash: Hash of the commit.
        context_lines: Lines of context around each hunk.
        max_output_bytes: Largest diff accepted before giving up.

    Returns:
        The diff text with surrounding whitespace removed.

    Raises:
        OutputTooLargeError: If the diff exceeds `max_output_bytes`.
        HistoryQueryError: If the git command fails.
    """
    result = _run_git(
        repo_path,
        "show",
        commit_hash,
        f"--unified={context_lines}",
        f"--pretty={DIFF_HEADER_FORMAT}",
    )
    size = len(result.stdout)
    if size > max_output_bytes:
        raise OutputTooLargeError(
            f"Diff for commit {commit_hash} is {size} bytes, above the {max_output_bytes} byte limit. "
            f"Raise `history.max_output_bytes` in your config to include it.",
            size=size,
            limit=max_output_bytes,
        )
    return result.stdout.decode("utf-8", errors="replace").strip()
