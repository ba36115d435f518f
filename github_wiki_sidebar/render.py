#!/usr/bin/env python3
"""
Sidebar renderers.

CommandRenderer runs a renderer process in the wiki checkout and hands back
what it printed; the job only looks for the DONE marker in it.

Run as a module this file is also the built-in renderer:

    python -m github_wiki_sidebar.render --template=markdown [wiki_dir]

It reads options.json from the wiki (or the defaults), nests the pages into
categories split on the separator and writes _Sidebar.md.
"""
import argparse
import logging
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from github_wiki_sidebar import SidebarError
from github_wiki_sidebar.options import (
    LINK_PLACEHOLDER,
    OPTIONS_FILE,
    SUBITEMS_PLACEHOLDER,
    Options,
    load_defaults,
    load_persisted,
    resolve,
)
from github_wiki_sidebar.pages import apply_order, filter_pages, list_pages, strip_ext

log = logging.getLogger(__name__)

# --- config ---
SIDEBAR_FILE = "_Sidebar.md"
SUCCESS_MARKER = "DONE"
TEMPLATES = ("markdown",)
DEFAULT_COMMAND = [sys.executable, "-m", "github_wiki_sidebar.render", "--template=markdown"]


def succeeded(output: str) -> bool:
    return SUCCESS_MARKER in output


class CommandRenderer:
    def __init__(self, command: Sequence[str] | None = None, runner=subprocess.run):
        self.command = list(command or DEFAULT_COMMAND)
        self._runner = runner

    def render(self, work_dir: Path) -> str:
        log.debug("Rendering with %s", " ".join(self.command))
        try:
            proc = self._runner(self.command, cwd=str(work_dir), capture_output=True, text=True)
        except OSError as e:
            return f"{self.command[0]}: {e}"
        output = proc.stdout or ""
        if proc.returncode != 0:
            output += proc.stderr or ""
        return output


# --- built-in markdown renderer ---
@dataclass
class MenuEntry:
    name: str
    page: str | None = None
    children: list = field(default_factory=list)


def build_menu(pages: Sequence[str], separator: str) -> list[MenuEntry]:
    """
    Nest pages by category: 'guides-setup.md' sits under 'guides' when the
    separator is '-'. Entries keep the position of their first page.
    """
    root: list[MenuEntry] = []
    for page in pages:
        stem = strip_ext(page)
        parts = [p for p in stem.split(separator) if p] if separator else []
        level, entry = root, None
        for part in parts or [stem]:
            entry = next((e for e in level if e.name == part), None)
            if entry is None:
                entry = MenuEntry(part)
                level.append(entry)
            level = entry.children
        entry.page = stem
    return root


def render_entries(entries: Sequence[MenuEntry], link_template: str, depth: int = 0) -> list[str]:
    lines = []
    indent = "  " * depth
    for entry in entries:
        label = link_template.replace(LINK_PLACEHOLDER, entry.page, 1) if entry.page else entry.name
        lines.append(f"{indent}- {label}")
        lines.extend(render_entries(entry.children, link_template, depth + 1))
    return lines


def render_sidebar(options: Options, pages: Sequence[str]) -> str:
    visible = filter_pages(pages, options.exclude, options.separator)
    ordered = apply_order(visible, options.order)
    items = "\n".join(render_entries(build_menu(ordered, options.separator), options.link_template))
    return options.menu_template.replace(SUBITEMS_PLACEHOLDER, items, 1)


def write_sidebar(work_dir: Path) -> Path:
    options = resolve(load_defaults(), load_persisted(work_dir / OPTIONS_FILE))
    content = render_sidebar(options, list(list_pages(work_dir)))
    target = work_dir / SIDEBAR_FILE
    target.write_text(content, encoding="utf-8")
    return target


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Write _Sidebar.md for a GitHub wiki checkout.")
    p.add_argument("wiki_dir", nargs="?", type=Path, default=Path("."), help="Wiki checkout (default: .)")
    p.add_argument("--template", choices=TEMPLATES, default="markdown", help="Output template")
    args = p.parse_args(argv)

    if not args.wiki_dir.is_dir():
        print(f"Path not found: {args.wiki_dir}", file=sys.stderr)
        return 1
    try:
        target = write_sidebar(args.wiki_dir)
    except (OSError, SidebarError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    print(f"{target.name} written. {SUCCESS_MARKER}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
