import subprocess
import unittest
from unittest.mock import MagicMock, patch

from utils.errors import HistoryQueryError, OutputTooLargeError
from utils.git import get_commit_diff, list_commit_hashes


def _completed(returncode=0, stdout=b"", stderr=b""):
    process = MagicMock()
    process.returncode = returncode
    process.stdout = stdout
    process.stderr = stderr
    return process


class TestListCommitHashes(unittest.TestCase):

    @patch("subprocess.run")
    def test_lists_hashes_in_log_order(self, mock_run):
        mock_run.return_value = _completed(stdout=b"c3\nb2\na1")

        hashes = list_commit_hashes("/repo", "2025-03-15T00:00:00+00:00")

        self.assertEqual(hashes, ["c3", "b2", "a1"])
        mock_run.assert_called_once_with(
            ["git", "-C", "/repo", "log", "--since=2025-03-15T00:00:00+00:00", "--pretty=format:%H"],
            capture_output=True,
        )

    @patch("subprocess.run")
    def test_empty_window(self, mock_run):
        mock_run.return_value = _completed(stdout=b"")
        self.assertEqual(list_commit_hashes("/repo", "2025-03-15"), [])

    @patch("subprocess.run")
    def test_path_with_shell_metacharacters_is_passed_verbatim(self, mock_run):
        mock_run.return_value = _completed(stdout=b"")
        list_commit_hashes('/tmp/"; rm -rf ~; "', "2025-03-15")
        command = mock_run.call_args[0][0]
        self.assertEqual(command[2], '/tmp/"; rm -rf ~; "')
        self.assertNotIn("shell", mock_run.call_args[1])

    @patch("subprocess.run")
    def test_not_a_repository(self, mock_run):
        mock_run.return_value = _completed(returncode=128, stderr=b"fatal: not a git repository")

        with self.assertRaises(HistoryQueryError) as cm:
            list_commit_hashes("/nowhere", "2025-03-15")
        self.assertIn("not a git repository", str(cm.exception))

    @patch("subprocess.run", side_effect=FileNotFoundError)
    def test_git_not_found(self, mock_run):
        with self.assertRaises(HistoryQueryError) as cm:
            list_commit_hashes("/repo", "2025-03-15")
        self.assertIn("Git is not installed", str(cm.exception))


class TestGetCommitDiff(unittest.TestCase):

    @patch("subprocess.run")
    def test_diff_is_trimmed(self, mock_run):
        mock_run.return_value = _completed(stdout=b"\nCommit: abc\nAuthor: Ada\n\ndiff --git a/x b/x\n\n")

        diff = get_commit_diff("/repo", "abc")

        self.assertEqual(diff, "Commit: abc\nAuthor: Ada\n\ndiff --git a/x b/x")
        mock_run.assert_called_once_with(
            [
                "git", "-C", "/repo", "show", "abc", "--unified=3",
                "--pretty=format:Commit: %H%nAuthor: %an%nDate: %ad%n",
            ],
            capture_output=True,
        )

    @patch("subprocess.run")
    def test_context_lines_option(self, mock_run):
        mock_run.return_value = _completed(stdout=b"x")
        get_commit_diff("/repo", "abc", context_lines=10)
        self.assertIn("--unified=10", mock_run.call_args[0][0])

    @patch("subprocess.run")
    def test_output_too_large(self, mock_run):
        mock_run.return_value = _completed(stdout=b"x" * 101)

        with self.assertRaises(OutputTooLargeError) as cm:
            get_commit_diff("/repo", "abc", max_output_bytes=100)
        self.assertEqual(cm.exception.size, 101)
        self.assertEqual(cm.exception.limit, 100)
        self.assertIn("max_output_bytes", str(cm.exception))

    @patch("subprocess.run")
    def test_output_at_limit_is_accepted(self, mock_run):
        mock_run.return_value = _completed(stdout=b"x" * 100)
        self.assertEqual(get_commit_diff("/repo", "abc", max_output_bytes=100), "x" * 100)

    @patch("subprocess.run")
    def test_show_failure(self, mock_run):
        mock_run.return_value = _completed(returncode=128, stderr=b"fatal: bad object abc")
        with self.assertRaises(HistoryQueryError):
            get_commit_diff("/repo", "abc")


if __name__ == "__main__":
    unittest.main()
