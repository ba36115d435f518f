import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from github_wiki_sidebar.git import DEFAULT_BRANCH
from github_wiki_sidebar.options import OPTIONS_FILE, Options, save_options
from github_wiki_sidebar.render import SIDEBAR_FILE, succeeded

log = logging.getLogger(__name__)

CREDENTIALS = "\n[//]: # (generated by https://pypi.org/project/github-wiki-sidebar)\n"


@dataclass(frozen=True)
class JobOptions:
    do_sidebar: bool = True
    do_clean: bool = False
    options: Options | None = None
    do_git: bool = False
    skip_credentials: bool = False
    git_branch: str = DEFAULT_BRANCH


def append_credentials(sidebar: Path) -> None:
    try:
        with open(sidebar, "a", encoding="utf-8") as f:
            f.write(CREDENTIALS)
    except OSError as e:
        print(f"[warn] Could not stamp {sidebar.name}: {e}", file=sys.stderr)


def run_job(job: JobOptions, work_dir: Path, git, renderer) -> bool:
    """
    Pull, write options.json, render, clean up, push.

    Returns False when the renderer did not report success. Cleanup still
    happens in that case but nothing is pushed. OptionsError from writing
    the configuration ends the run.
    """
    options_path = work_dir / OPTIONS_FILE
    rendered = True

    if job.do_git:
        log.debug("Pulling updates from origin")
        git.pull()

    if job.options is not None:
        log.debug("Generating the custom %s file ...", OPTIONS_FILE)
        save_options(job.options, options_path)

    if job.do_sidebar:
        log.debug("Building the %s file ...", SIDEBAR_FILE)
        output = renderer.render(work_dir)
        rendered = succeeded(output)
        if rendered:
            if not job.skip_credentials:
                append_credentials(work_dir / SIDEBAR_FILE)
            print(f"\n{SIDEBAR_FILE} generated.")
        else:
            print(f"[error] Error generating {SIDEBAR_FILE}: {output}", file=sys.stderr)

    if job.do_clean:
        log.debug("Removing temporary %s file", OPTIONS_FILE)
        options_path.unlink(missing_ok=True)

    if job.do_git:
        if rendered:
            log.debug("Pushing updates to git")
            git.push(branch=job.git_branch)
        else:
            print("[warn] Nothing pushed, the sidebar was not generated.", file=sys.stderr)

    if rendered:
        print("\n//-- Job completed.")
    else:
        print("\n//-- Job completed with errors.")
    return rendered
