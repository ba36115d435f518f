"""
Terminal question loop for enquire mode.

Each Question is plain data: what to ask, the default answer, a validator
returning True or the message to show, and an optional predicate deciding
from the previous answers whether the question is asked at all.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence

log = logging.getLogger(__name__)

INPUT = "input"
CHECKBOX = "checkbox"

# ascii digits only
ID_RE = re.compile(r"^[0-9]+$")


@dataclass
class Question:
    name: str
    message: Any  # str or callable(answers) -> str
    default: Any = None  # value or callable(answers)
    validate: Callable[[Any, dict], Any] | None = None
    when: Callable[[dict], bool] | None = None
    kind: str = INPUT
    choices: Any = None  # sequence or callable(answers) -> sequence, checkbox only


def _value(item, answers: dict):
    return item(answers) if callable(item) else item


def ask(questions: Sequence[Question], read=None, write=None) -> dict:
    """Ask the questions in order and return the answers by name."""
    read = read or input
    write = write or print
    answers = {}
    for q in questions:
        if q.when is not None and not q.when(answers):
            log.debug("Skipping question %s", q.name)
            continue
        if q.kind == CHECKBOX:
            answers[q.name] = _ask_checkbox(q, answers, read, write)
        else:
            answers[q.name] = _ask_input(q, answers, read, write)
    return answers


def _ask_input(q: Question, answers: dict, read, write) -> str:
    message = _value(q.message, answers)
    default = _value(q.default, answers)
    default = "" if default is None else str(default)
    while True:
        write(f"? {message}")
        raw = read(f"  ({default}) > " if default else "  > ")
        value = raw if raw != "" else default
        result = q.validate(value, answers) if q.validate else True
        if result is True:
            return value
        write(f">> {result}")


def _parse_checked(raw: str, count: int):
    ids = raw.split()
    if not all(ID_RE.match(i) for i in ids):
        return None
    picked = {int(i) for i in ids}
    if any(i >= count for i in picked):
        return None
    return picked


def _ask_checkbox(q: Question, answers: dict, read, write) -> list:
    """
    Numbered multi-select. Blank keeps the checked items, '-' unchecks all,
    otherwise the typed ids become the selection.
    """
    message = _value(q.message, answers)
    choices = list(_value(q.choices, answers) or ())
    checked = set(_value(q.default, answers) or ())
    while True:
        write(f"? {message}")
        for i, choice in enumerate(choices):
            mark = "x" if choice in checked else " "
            write(f"  {i}) [{mark}] {choice}")
        raw = read("  <space separated ids, '-' for none> > ").strip()
        if raw == "":
            picked = {i for i, c in enumerate(choices) if c in checked}
        elif raw == "-":
            picked = set()
        else:
            picked = _parse_checked(raw, len(choices))
            if picked is None:
                write(f">> Please enter ids between 0 and {len(choices) - 1}")
                continue
        value = [c for i, c in enumerate(choices) if i in picked]
        result = q.validate(value, answers) if q.validate else True
        if result is True:
            return value
        write(f">> {result}")
