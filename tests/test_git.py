# -*- coding: utf-8 -*-
"""
Tests for the git collaborator
"""

from unittest.mock import MagicMock, patch

from github_wiki_sidebar.git import COMMIT_MESSAGE, GitClient


def ok_runner():
    return MagicMock(return_value=MagicMock(returncode=0))


class TestGitClient:
    def test_pull_fetches_then_pulls(self, tmp_path):
        runner = ok_runner()
        assert GitClient(tmp_path, runner=runner).pull() == 0
        commands = [c.args[0] for c in runner.call_args_list]
        assert commands == [["git", "fetch", "origin"], ["git", "pull"]]
        assert all(c.kwargs["cwd"] == str(tmp_path) for c in runner.call_args_list)

    def test_push_sequence(self, tmp_path):
        runner = ok_runner()
        GitClient(tmp_path, runner=runner).push(branch="main")
        commands = [c.args[0] for c in runner.call_args_list]
        assert commands == [
            ["git", "add", "."],
            ["git", "commit", "-am", COMMIT_MESSAGE],
            ["git", "push", "origin", "main"],
        ]

    def test_failures_are_reported_not_raised(self, tmp_path, capsys):
        runner = MagicMock(return_value=MagicMock(returncode=1))
        code = GitClient(tmp_path, runner=runner).push()
        assert code == 1
        assert runner.call_count == 3
        assert "[warn] git commit" in capsys.readouterr().err

    def test_missing_binary(self, tmp_path, capsys):
        runner = MagicMock(side_effect=FileNotFoundError("git"))
        assert GitClient(tmp_path, runner=runner).pull() == 127
        assert "[warn]" in capsys.readouterr().err

    @patch("github_wiki_sidebar.git.shutil.which")
    def test_is_available(self, mock_which, tmp_path):
        mock_which.return_value = "/usr/bin/git"
        assert GitClient(tmp_path).is_available() is True
        mock_which.return_value = None
        assert GitClient(tmp_path).is_available() is False
