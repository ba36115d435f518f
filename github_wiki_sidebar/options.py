"""
Configuration model for a wiki sidebar run.

Three layers make up the effective configuration:

- the bundled prototype (data/prototype-options.yml),
- the wiki's own options.json, when present,
- answers given in enquire mode or flags given in silent mode.

resolve() merges them in that order into an immutable Options value.
"""
import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from github_wiki_sidebar import OptionsError, ValidationError

log = logging.getLogger(__name__)

# --- config ---
DATA_DIR = Path(__file__).resolve().parent / "data"
PROTOTYPE_OPTIONS = DATA_DIR / "prototype-options.yml"
OPTIONS_FILE = "options.json"

LINK_PLACEHOLDER = "%s"
SUBITEMS_PLACEHOLDER = "{{{subitems}}}"
MENU_KEY = "category-1"

# ':' is not usable in Windows file names
SEPARATOR_RE = re.compile(r"^[a-z:#~ @_]+$", re.I)
SEPARATOR_RE_WIN32 = re.compile(r"^[a-z#~ @_]+$", re.I)


@dataclass(frozen=True)
class Options:
    separator: str = "-"
    link_template: str = "[[%s]]"
    # (key, template) pairs; a mapping given here is frozen in __post_init__
    menu: tuple = ((MENU_KEY, SUBITEMS_PLACEHOLDER + "\n"),)
    exclude: tuple = ()
    order: tuple = ()

    def __post_init__(self):
        menu = self.menu.items() if isinstance(self.menu, Mapping) else self.menu
        object.__setattr__(self, "menu", tuple((k, v) for k, v in menu))
        object.__setattr__(self, "exclude", tuple(self.exclude))
        object.__setattr__(self, "order", tuple(self.order))

    @property
    def menu_template(self) -> str:
        return dict(self.menu).get(MENU_KEY, SUBITEMS_PLACEHOLDER)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Options":
        base = cls()
        rules = data.get("rules") or {}
        menu = dict(base.menu)
        menu.update(data.get("menu") or {})
        return cls(
            separator=data.get("separator", base.separator),
            link_template=data.get("linkTemplate", base.link_template),
            menu=menu,
            exclude=rules.get("exclude") or (),
            order=rules.get("order") or (),
        )

    def to_dict(self) -> dict:
        return {
            "separator": self.separator,
            "linkTemplate": self.link_template,
            "menu": dict(self.menu),
            "rules": {
                "exclude": list(self.exclude),
                "order": list(self.order),
            },
        }


# --- separator ---
def canonical_separator(value: str) -> str:
    return re.sub(r"\s", "-", value)


def display_separator(value: str) -> str:
    return value.replace("-", " ")


def validate_separator(value: str):
    if sys.platform == "win32":
        return bool(SEPARATOR_RE_WIN32.match(value)) or "The following characters are allowed a-z#~ @_!"
    return bool(SEPARATOR_RE.match(value)) or "The following characters are allowed a-z:#~ @_!"


# --- templates ---
def validate_template(template: str, placeholder: str = LINK_PLACEHOLDER):
    """True when the placeholder occurs exactly once, else the message to show."""
    count = template.count(placeholder)
    if count == 0:
        return f"The {placeholder} is missing from your format!"
    if count > 1:
        return f"The {placeholder} must appear only once in your format!"
    return True


def check_template(template: str, placeholder: str = LINK_PLACEHOLDER) -> None:
    result = validate_template(template, placeholder)
    if result is not True:
        raise ValidationError(result)


def menu_template_for_display(stored: str) -> str:
    """Stored menu template -> one-line %s form shown in the prompt."""
    if SUBITEMS_PLACEHOLDER + "\n" in stored:
        text = stored.replace(SUBITEMS_PLACEHOLDER + "\n", LINK_PLACEHOLDER, 1)
    else:
        text = stored.replace(SUBITEMS_PLACEHOLDER, LINK_PLACEHOLDER, 1)
    return text.replace("\n", "\\n")


def menu_template_from_input(text: str, default_menu: str) -> str:
    """Inverse of menu_template_for_display; %s becomes the default menu body."""
    return text.replace("\\n", "\n").replace(LINK_PLACEHOLDER, default_menu, 1)


def validate_menu_input(text: str, default_menu: str):
    """The %s form must convert to a stored template with a single {{{subitems}}}."""
    result = validate_template(text, LINK_PLACEHOLDER)
    if result is not True:
        return result
    return validate_template(menu_template_from_input(text, default_menu), SUBITEMS_PLACEHOLDER)


# --- merge ---
def _merge_layer(merged: dict, layer: Mapping[str, Any]) -> dict:
    if "separator" in layer and layer["separator"] is not None:
        merged["separator"] = canonical_separator(layer["separator"])
    if layer.get("linkTemplate") is not None:
        merged["linkTemplate"] = layer["linkTemplate"]
    if layer.get("menu"):
        merged["menu"] = {**merged["menu"], **layer["menu"]}
    rules = layer.get("rules") or {}
    for key in ("exclude", "order"):
        # a full re-selection each run, never a union
        if rules.get(key) is not None:
            merged["rules"][key] = list(rules[key])
    return merged


def resolve(defaults: Options, persisted: Mapping[str, Any] | None = None,
            overrides: Mapping[str, Any] | None = None) -> Options:
    """
    Merge defaults < persisted < overrides into the effective configuration.

    Templates given as overrides must carry their placeholder exactly once,
    otherwise ValidationError is raised. Nothing is written to disk.
    """
    persisted = persisted or {}
    overrides = overrides or {}

    if overrides.get("linkTemplate") is not None:
        check_template(overrides["linkTemplate"], LINK_PLACEHOLDER)
    menu_override = (overrides.get("menu") or {}).get(MENU_KEY)
    if menu_override is not None:
        check_template(menu_override, SUBITEMS_PLACEHOLDER)

    merged = defaults.to_dict()
    for layer in (persisted, overrides):
        merged = _merge_layer(merged, layer)
    return Options.from_dict(merged)


# --- persistence ---
def load_defaults(path: Path = PROTOTYPE_OPTIONS) -> Options:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return Options.from_dict(data)


def _shape_problem(data) -> str | None:
    """Describe the first field of a loaded options.json with the wrong type."""
    if not isinstance(data, dict):
        return "expected an object"
    for key in ("separator", "linkTemplate"):
        if data.get(key) is not None and not isinstance(data[key], str):
            return f"'{key}' must be a string"
    menu = data.get("menu")
    if menu is not None:
        if not isinstance(menu, dict) or not all(isinstance(v, str) for v in menu.values()):
            return "'menu' must map names to templates"
    rules = data.get("rules")
    if rules is not None:
        if not isinstance(rules, dict):
            return "'rules' must be an object"
        for key in ("exclude", "order"):
            value = rules.get(key)
            if value is not None and (not isinstance(value, list)
                                      or not all(isinstance(v, str) for v in value)):
                return f"'rules.{key}' must be a list of page names"
    return None


def load_persisted(path: Path) -> dict:
    """
    Read the wiki's options.json.

    A missing, unreadable or unwritable file is not an error: the run
    starts from the defaults.
    """
    if not path.is_file() or not os.access(path, os.R_OK | os.W_OK):
        print(f"The {path.name} file is not present.")
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"[warn] Ignoring {path.name}: {e}", file=sys.stderr)
        return {}
    problem = _shape_problem(data)
    if problem:
        print(f"[warn] Ignoring {path.name}: {problem}", file=sys.stderr)
        return {}
    log.debug("Loaded %s", path)
    return data


def save_options(options: Options, path: Path) -> None:
    content = json.dumps(options.to_dict(), indent=2) + "\n"
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OptionsError(f"Failure running job! Could not write {path}: {e}") from e
    log.debug("Wrote %s", path)
