import logging
import shutil
import subprocess
import sys
from pathlib import Path

log = logging.getLogger(__name__)

COMMIT_MESSAGE = "Automatic update of _Sidebar.md from github-wiki-sidebar"
DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"


class GitClient:
    """
    Best-effort git sync of the wiki checkout.

    Commands print straight to the terminal. A failing command is reported
    and the run goes on; callers get the exit code.
    """

    def __init__(self, work_dir: Path, runner=subprocess.run):
        self.work_dir = work_dir
        self._runner = runner

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def run(self, *args: str) -> int:
        cmd = ["git", *args]
        log.debug("Running %s", " ".join(cmd))
        try:
            proc = self._runner(cmd, cwd=str(self.work_dir))
        except OSError as e:
            print(f"[warn] {' '.join(cmd)} failed: {e}", file=sys.stderr)
            return 127
        if proc.returncode != 0:
            print(f"[warn] {' '.join(cmd)} exited with {proc.returncode}", file=sys.stderr)
        return proc.returncode

    def pull(self, remote: str = DEFAULT_REMOTE) -> int:
        codes = [self.run("fetch", remote), self.run("pull")]
        return next((c for c in codes if c), 0)

    def push(self, message: str = COMMIT_MESSAGE, remote: str = DEFAULT_REMOTE,
             branch: str = DEFAULT_BRANCH) -> int:
        codes = [
            self.run("add", "."),
            self.run("commit", "-am", message),
            self.run("push", remote, branch),
        ]
        return next((c for c in codes if c), 0)
