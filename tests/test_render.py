# -*- coding: utf-8 -*-
"""
Tests for the renderer collaborator and the built-in markdown renderer
"""

import json
import sys
from unittest.mock import MagicMock

from github_wiki_sidebar.options import Options
from github_wiki_sidebar.render import (
    DEFAULT_COMMAND,
    SIDEBAR_FILE,
    CommandRenderer,
    build_menu,
    main,
    render_sidebar,
    succeeded,
)


class TestCommandRenderer:
    def test_default_command_runs_builtin_module(self):
        renderer = CommandRenderer()
        assert renderer.command == DEFAULT_COMMAND
        assert renderer.command[:3] == [sys.executable, "-m", "github_wiki_sidebar.render"]
        assert "--template=markdown" in renderer.command

    def test_runs_in_wiki_and_returns_stdout(self, tmp_path):
        runner = MagicMock(return_value=MagicMock(returncode=0, stdout="_Sidebar.md written. DONE\n", stderr=""))
        output = CommandRenderer(["render", "--template=markdown"], runner=runner).render(tmp_path)
        assert succeeded(output)
        args, kwargs = runner.call_args
        assert args[0] == ["render", "--template=markdown"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True

    def test_failure_includes_stderr(self, tmp_path):
        runner = MagicMock(return_value=MagicMock(returncode=1, stdout="", stderr="boom"))
        output = CommandRenderer(["render"], runner=runner).render(tmp_path)
        assert not succeeded(output)
        assert "boom" in output

    def test_missing_executable_is_reported(self, tmp_path):
        runner = MagicMock(side_effect=FileNotFoundError("no such file"))
        output = CommandRenderer(["git-wiki-to-html"], runner=runner).render(tmp_path)
        assert not succeeded(output)
        assert output.startswith("git-wiki-to-html:")


class TestBuildMenu:
    def test_nests_by_separator(self):
        menu = build_menu(["guides-setup.md", "guides.md", "other.md"], "-")
        assert [e.name for e in menu] == ["guides", "other"]
        guides = menu[0]
        assert guides.page == "guides"
        assert [(c.name, c.page) for c in guides.children] == [("setup", "guides-setup")]

    def test_category_without_page(self):
        menu = build_menu(["api_auth.md", "api_users.md"], "_")
        assert len(menu) == 1
        assert menu[0].page is None
        assert [c.page for c in menu[0].children] == ["api_auth", "api_users"]


class TestRenderSidebar:
    def test_default_options(self):
        text = render_sidebar(Options(), ["Home.md", "other.md"])
        assert text == "- [[Home]]\n- [[other]]\n"

    def test_exclusion_order_and_nesting(self):
        options = Options(
            separator="-",
            link_template="[[%s]]",
            menu={"category-1": "### Menu\n{{{subitems}}}\n"},
            exclude=("Home.md",),
            order=("other.md",),
        )
        pages = ["Home.md", "guides-faq.md", "guides.md", "other.md"]
        assert render_sidebar(options, pages) == (
            "### Menu\n"
            "- [[other]]\n"
            "- [[guides]]\n"
            "  - [[guides-faq]]\n"
        )


class TestBuiltinMain:
    def test_writes_sidebar_and_reports_done(self, wiki, capsys):
        options = {"rules": {"exclude": ["guides.md"], "order": ["other.md"]}}
        (wiki / "options.json").write_text(json.dumps(options), encoding="utf-8")

        assert main([str(wiki), "--template=markdown"]) == 0
        assert succeeded(capsys.readouterr().out)
        assert (wiki / SIDEBAR_FILE).read_text(encoding="utf-8") == "- [[other]]\n- [[Home]]\n"

    def test_without_options_uses_defaults(self, wiki, capsys):
        assert main([str(wiki)]) == 0
        text = (wiki / SIDEBAR_FILE).read_text(encoding="utf-8")
        assert "- [[Home]]" in text
        assert "  - [[guides-setup]]" in text

    def test_missing_wiki_dir(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope")]) == 1
        assert not succeeded(capsys.readouterr().out)
