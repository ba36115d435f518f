"""Generate the _Sidebar.md navigation file of a GitHub wiki checkout."""

__version__ = "1.0.0"

APP_NAME = "github-wiki-sidebar"


class SidebarError(Exception):
    """Base class for errors that end a run with a message."""


class ValidationError(SidebarError):
    pass


class OptionsError(SidebarError):
    pass


class NoPagesLeftError(SidebarError):
    pass


class GitUnavailableError(SidebarError):
    pass
