"""Action file model, settings cascade, validation and action resolution."""

from .loader import load_action_file, loads, parse_action_file
from .model import (
    DEFAULT_START_PAGE,
    NO_COMMAND,
    QUIT,
    SAME_PAGE,
    ActionFile,
    Command,
    Entry,
    Executable,
    Group,
    Mode,
    NoCommand,
    OtherPage,
    Page,
    Quit,
    Return,
    SamePage,
    ShellScript,
)
from .resolver import Action, Run, RunBackground, RunExec, resolve_action, resolve_entry
from .settings import Color, Layout, Settings, SettingsAccumulator
from .validator import (
    DuplicatedShortcut,
    EmptyPage,
    ExecWithoutCommand,
    ExecWithReturn,
    NoRoot,
    UnknownPage,
    ValidationError,
    validate,
)

__all__ = [
    "DEFAULT_START_PAGE",
    "NO_COMMAND",
    "QUIT",
    "SAME_PAGE",
    "Action",
    "ActionFile",
    "Color",
    "Command",
    "DuplicatedShortcut",
    "EmptyPage",
    "Entry",
    "ExecWithReturn",
    "ExecWithoutCommand",
    "Executable",
    "Group",
    "Layout",
    "Mode",
    "NoCommand",
    "NoRoot",
    "OtherPage",
    "Page",
    "Quit",
    "Return",
    "Run",
    "RunBackground",
    "RunExec",
    "SamePage",
    "Settings",
    "SettingsAccumulator",
    "ShellScript",
    "UnknownPage",
    "ValidationError",
    "load_action_file",
    "loads",
    "parse_action_file",
    "resolve_action",
    "resolve_entry",
    "validate",
]
