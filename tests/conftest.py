"""
Shared fixtures: a throwaway wiki checkout and fake collaborators
"""

import pytest

from github_wiki_sidebar.render import SIDEBAR_FILE


@pytest.fixture
def wiki(tmp_path):
    """Wiki checkout with a few pages and a reserved file"""
    for name in ("Home.md", "guides.md", "guides-setup.md", "guides-faq.md", "other.md", "_Footer.md"):
        (tmp_path / name).write_text(f"# {name}\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a page\n", encoding="utf-8")
    return tmp_path


class FakeGit:
    def __init__(self, available=True):
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def pull(self):
        self.calls.append("pull")
        return 0

    def push(self, branch="master"):
        self.calls.append(f"push:{branch}")
        return 0


class FakeRenderer:
    def __init__(self, output="DONE", content="- [[Home]]\n"):
        self.output = output
        self.content = content
        self.seen_options = None
        self.calls = 0

    def render(self, work_dir):
        self.calls += 1
        options = work_dir / "options.json"
        self.seen_options = options.read_text(encoding="utf-8") if options.exists() else None
        if "DONE" in self.output:
            (work_dir / SIDEBAR_FILE).write_text(self.content, encoding="utf-8")
        return self.output


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


def scripted(*answers):
    """read() replacement feeding the given answers in order"""
    pending = list(answers)
    prompts = []

    def read(prompt=""):
        prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)

    read.prompts = prompts
    return read
