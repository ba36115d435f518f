import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from github_wiki_sidebar import ValidationError

log = logging.getLogger(__name__)

# --- config ---
# pages starting with '_' are reserved (_Sidebar.md, _Footer.md)
PAGE_GLOB = "[!_]*.md"
PAGE_EXT = ".md"
ORDER_INPUT_RE = re.compile(r"^[0-9]+(\s+[0-9]+)*$")
ORDER_INPUT_HINT = "Please enter a space separated list of numbers (ex: 0 2 1)"


# --- discovery ---
def list_pages(work_dir: Path) -> Iterator[str]:
    """Yield the wiki page file names found directly in work_dir, by name."""
    for p in sorted(work_dir.glob(PAGE_GLOB), key=lambda p: p.name):
        if p.is_file() and not p.name.startswith("."):
            yield p.name


def strip_ext(name: str) -> str:
    return name[: -len(PAGE_EXT)] if name.endswith(PAGE_EXT) else name


def is_excluded(page: str, exclude: Iterable[str], separator: str) -> bool:
    for entry in exclude:
        if page == entry or page.startswith(strip_ext(entry) + separator):
            return True
    return False


def filter_pages(pages: Iterable[str], exclude: Iterable[str], separator: str) -> list[str]:
    """
    Drop excluded pages, keeping the enumeration order.

    An entry excludes the page of the same name and, treated as a category,
    every page named '<entry without .md><separator>...'.
    """
    exclude = list(exclude)
    return [p for p in pages if not is_excluded(p, exclude, separator)]


def apply_order(pages: Sequence[str], order: Iterable[str]) -> list[str]:
    """Ordered pages first, the rest after them as enumerated."""
    available = set(pages)
    head = []
    for name in order:
        if name in available and name not in head:
            head.append(name)
    return head + [p for p in pages if p not in head]


# --- order selection ---
def validate_order_input(text: str, page_count: int):
    """True for '' or in-range indices, else the message to show."""
    text = text.strip()
    if text == "":
        return True
    if not ORDER_INPUT_RE.match(text):
        return ORDER_INPUT_HINT
    bad = [i for i in text.split() if int(i) >= page_count]
    if bad:
        return f"Unknown item id(s) {' '.join(bad)}, choose between 0 and {page_count - 1}"
    return True


def resolve_order(text: str, filtered: Sequence[str]) -> list[str] | None:
    """
    Map the indices typed by the user to page names of the filtered list.

    Returns None for empty input, which leaves the saved order untouched.
    Repeated indices keep their first position only.
    """
    check = validate_order_input(text, len(filtered))
    if check is not True:
        raise ValidationError(check)
    ids = text.split()
    if not ids:
        return None
    order = []
    for i in ids:
        name = filtered[int(i)]
        if name not in order:
            order.append(name)
    log.debug("Resolved order %s", order)
    return order


def order_to_indices(order: Iterable[str], filtered: Sequence[str]) -> str:
    """Saved order -> index answer for the order prompt."""
    return " ".join(str(filtered.index(name)) for name in order if name in filtered)
