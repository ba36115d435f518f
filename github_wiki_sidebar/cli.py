#!/usr/bin/env python3
"""github-wiki-sidebar: generate a GitHub wiki _Sidebar.md with optional ordering and exclude list."""
import argparse
import logging
import os
import shlex
import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterable

from github_wiki_sidebar import (
    APP_NAME,
    GitUnavailableError,
    NoPagesLeftError,
    SidebarError,
    ValidationError,
    __version__,
)
from github_wiki_sidebar.git import DEFAULT_BRANCH, GitClient
from github_wiki_sidebar.job import JobOptions, run_job
from github_wiki_sidebar.options import (
    LINK_PLACEHOLDER,
    MENU_KEY,
    OPTIONS_FILE,
    Options,
    canonical_separator,
    display_separator,
    load_defaults,
    load_persisted,
    menu_template_for_display,
    menu_template_from_input,
    resolve,
    validate_menu_input,
    validate_separator,
    validate_template,
)
from github_wiki_sidebar.pages import (
    filter_pages,
    list_pages,
    order_to_indices,
    resolve_order,
    validate_order_input,
)
from github_wiki_sidebar.prompts import CHECKBOX, Question, ask
from github_wiki_sidebar.render import CommandRenderer

log = logging.getLogger(__name__)


def eprint(*a, **k):
    print(*a, **k, file=sys.stderr)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("DEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


# --- enquire mode ---
def build_questions(pages: list[str], saved: Options,
                    default_menu: str) -> tuple[list[Question], Callable[[dict], list[str]]]:
    """Questions for enquire mode plus the function giving the pages left to order."""

    def remaining(answers: dict) -> list[str]:
        return filter_pages(pages, answers.get("exclude", ()), canonical_separator(answers["separator"]))

    def order_message(answers: dict) -> str:
        listing = "\n".join(f"{i}) {name}" for i, name in enumerate(remaining(answers)))
        return ("Change the priority/order of the items in menu"
                " <space separated list of ids - ex: 0 2 3>\n" + listing + "\n---")

    questions = [
        Question(
            name="separator",
            message="Define the category separator for multi-level menu:",
            default=display_separator(saved.separator),
            validate=lambda value, answers: validate_separator(value),
        ),
        Question(
            name="linkTemplate",
            message="Define the format of the page links:",
            default=saved.link_template,
            validate=lambda value, answers: validate_template(value, LINK_PLACEHOLDER),
        ),
        Question(
            name=MENU_KEY,
            message="Define the _Sidebar.md content template:",
            default=menu_template_for_display(saved.menu_template),
            validate=lambda value, answers: validate_menu_input(value, default_menu),
        ),
        Question(
            name="exclude",
            message="Select the items to be excluded from menu:",
            kind=CHECKBOX,
            choices=pages,
            default=[p for p in pages if p in saved.exclude],
        ),
        Question(
            name="order",
            message=order_message,
            default=lambda answers: order_to_indices(saved.order, remaining(answers)),
            validate=lambda value, answers: validate_order_input(value, len(remaining(answers))),
            when=lambda answers: bool(remaining(answers)),
        ),
    ]
    return questions, remaining


def enquire_options(defaults: Options, persisted: dict, pages: Iterable[str], read=None, write=None) -> Options:
    pages = list(pages)
    saved = resolve(defaults, persisted)
    questions, remaining = build_questions(pages, saved, defaults.menu_template)
    answers = ask(questions, read=read, write=write)

    filtered = remaining(answers)
    if not filtered:
        raise NoPagesLeftError("No items left after excluded removed! <Exit>")

    overrides = {
        "separator": answers["separator"],
        "linkTemplate": answers["linkTemplate"],
        "menu": {MENU_KEY: menu_template_from_input(answers[MENU_KEY], defaults.menu_template)},
        "rules": {"exclude": answers["exclude"]},
    }
    order = resolve_order(answers.get("order", ""), filtered)
    if order is not None:
        overrides["rules"]["order"] = order
    return resolve(defaults, persisted, overrides)


# --- silent mode ---
def silent_options(args: argparse.Namespace, defaults: Options, persisted: dict) -> Options | None:
    """Saved options plus flag overrides; None when there is nothing to write."""
    overrides = {}
    if args.separator:
        check = validate_separator(display_separator(canonical_separator(args.separator)))
        if check is not True:
            raise ValidationError(check)
        overrides["separator"] = args.separator
    if args.link_template:
        overrides["linkTemplate"] = args.link_template
    if args.menu_template:
        check = validate_menu_input(args.menu_template, defaults.menu_template)
        if check is not True:
            raise ValidationError(check)
        overrides["menu"] = {MENU_KEY: menu_template_from_input(args.menu_template, defaults.menu_template)}

    if not persisted and not overrides:
        return None
    return resolve(defaults, persisted, overrides)


# --- argument parser ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=textwrap.dedent(
            """\
            Generates a GitHub wiki _Sidebar.md file with optional ordering and exclude list.

            Without --silent the job asks for every option step by step (enquire mode);
            press <Enter> to keep the default/saved value."""
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """Examples:\n  github-wiki-sidebar\n  github-wiki-sidebar --silent --git-push\n  github-wiki-sidebar --silent --separator=_ --link-template='[[%s]]'\n"""
        ),
    )
    parser.add_argument("--silent", action="store_true",
                        help="Update _Sidebar.md from the local options.json without asking")
    parser.add_argument("--git-push", action="store_true",
                        help="Pull before running the job and push the updates at the end")
    parser.add_argument("--git-branch", default=DEFAULT_BRANCH,
                        help=f"Branch pushed with --git-push (default: {DEFAULT_BRANCH})")
    parser.add_argument("--skip-credentials", action="store_true",
                        help="Leave out the hidden comment pointing to this package")
    parser.add_argument("--skip-options", action="store_true",
                        help="Do not keep options.json, it is removed after the run")
    parser.add_argument("--skip-save", "--skip-sidebar", dest="skip_save", action="store_true",
                        help="Do not generate _Sidebar.md")
    parser.add_argument("--separator", help="Silent mode: category separator")
    parser.add_argument("--link-template", help="Silent mode: page link format, %%s is the page name")
    parser.add_argument("--menu-template",
                        help="Silent mode: sidebar content template, %%s is the menu, \\n a new line")
    parser.add_argument("--renderer", help="Command rendering _Sidebar.md (default: built-in renderer)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# --- main entry ---
def main(argv=None, read=None, write=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    work_dir = Path.cwd()
    git = GitClient(work_dir)
    renderer = CommandRenderer(shlex.split(args.renderer) if args.renderer else None)
    mode = "silent" if args.silent else "enquire"
    log.debug("Executing job %s", mode)

    try:
        defaults = load_defaults()
        persisted = load_persisted(work_dir / OPTIONS_FILE)
        if args.git_push and not git.is_available():
            raise GitUnavailableError("Sorry, this option requires git to be installed!")

        print(f"//-- {APP_NAME}: {mode} mode")
        if args.silent:
            options = silent_options(args, defaults, persisted)
        else:
            print("Press <Enter> to leave the default/saved options unchanged\n")
            options = enquire_options(defaults, persisted, list_pages(work_dir), read=read, write=write)

        job = JobOptions(
            do_sidebar=not args.skip_save,
            do_clean=args.skip_options,
            options=options,
            do_git=args.git_push,
            skip_credentials=args.skip_credentials,
            git_branch=args.git_branch,
        )
        ok = run_job(job, work_dir, git, renderer)
    except ValidationError as e:
        eprint(f"[error] {e}")
        return 2
    except SidebarError as e:
        eprint(f"[error] {e}")
        return 1
    except (KeyboardInterrupt, EOFError):
        eprint("\nAborted.")
        return 130
    return 0 if ok else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
