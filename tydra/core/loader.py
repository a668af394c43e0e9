"""Build the action file model from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

import yaml

from ..errors import ActionFileError
from .model import (
    DEFAULT_PAGE_TITLE,
    NO_COMMAND,
    QUIT,
    SAME_PAGE,
    ActionFile,
    Command,
    Entry,
    Executable,
    Group,
    Mode,
    OtherPage,
    Page,
    Return,
    ShellScript,
)
from .settings import Color, Layout, Settings

_ROOT_KEYS = {"global", "pages"}
_PAGE_KEYS = {"title", "header", "footer", "settings", "groups"}
_GROUP_KEYS = {"title", "settings", "entries"}
_ENTRY_KEYS = {"title", "shortcut", "command", "shortcut_color", "mode", "return"}
_SETTINGS_KEYS = {"layout", "shortcut_color"}
_EXECUTABLE_KEYS = {"name", "args"}

E = TypeVar("E", Mode, Layout, Color)


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise ActionFileError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _check_keys(data: Mapping[str, Any], allowed: Iterable[str], where: str) -> None:
    unknown = sorted(str(key) for key in data if key not in allowed)
    if unknown:
        raise ActionFileError(f"{where}: unknown field(s) {', '.join(unknown)}")


def _optional_text(data: Mapping[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ActionFileError(f"{where}: {key} must be a string")
    return value


def _enum_value(kind: Type[E], value: Any, where: str) -> E:
    choices = ", ".join(member.value for member in kind)
    if not isinstance(value, str):
        raise ActionFileError(f"{where}: expected one of {choices}, got {value!r}")
    try:
        return kind(value)
    except ValueError:
        raise ActionFileError(f"{where}: unknown value {value!r} (expected one of {choices})") from None


def parse_settings(value: Any, where: str) -> Optional[Settings]:
    if value is None:
        return None
    data = _require_mapping(value, where)
    _check_keys(data, _SETTINGS_KEYS, where)
    layout = data.get("layout")
    color = data.get("shortcut_color")
    return Settings(
        layout=_enum_value(Layout, layout, f"{where}.layout") if layout is not None else None,
        shortcut_color=_enum_value(Color, color, f"{where}.shortcut_color") if color is not None else None,
    )


def parse_command(value: Any, where: str) -> Command:
    """Parse ``command``: null, shell script text or ``{name, args}``."""

    if value is None:
        return NO_COMMAND
    if isinstance(value, str):
        return ShellScript(value)
    if isinstance(value, dict):
        _check_keys(value, _EXECUTABLE_KEYS, where)
        name = value.get("name")
        if not isinstance(name, str) or not name:
            raise ActionFileError(f"{where}: executable commands need a name")
        args = value.get("args") or []
        if not isinstance(args, list):
            raise ActionFileError(f"{where}: args must be a list")
        return Executable(name=name, args=tuple(str(arg) for arg in args))
    raise ActionFileError(f"{where}: a command must be a string or a mapping with name and args")


def parse_return(value: Any, where: str) -> Return:
    """Parse ``return``: true is the same page, false/null quit, text a page name."""

    if value is None or value is False:
        return QUIT
    if value is True:
        return SAME_PAGE
    if isinstance(value, str):
        return OtherPage(value)
    raise ActionFileError(f"{where}: return must be a boolean or a page name")


def _parse_shortcut(value: Any, where: str) -> str:
    if isinstance(value, bool) or value is None:
        raise ActionFileError(f"{where}: shortcut must be a single character")
    text = str(value)
    if len(text) != 1:
        raise ActionFileError(f"{where}: shortcut must be a single character, got {text!r}")
    return text


def parse_entry(value: Any, where: str) -> Entry:
    data = _require_mapping(value, where)
    _check_keys(data, _ENTRY_KEYS, where)
    title = data.get("title")
    if not isinstance(title, str):
        raise ActionFileError(f"{where}: entries need a title")
    color = data.get("shortcut_color")
    mode = data.get("mode")
    return Entry(
        title=title,
        shortcut=_parse_shortcut(data.get("shortcut"), where),
        command=parse_command(data.get("command"), f"{where}.command"),
        shortcut_color=_enum_value(Color, color, f"{where}.shortcut_color") if color is not None else None,
        mode=_enum_value(Mode, mode, f"{where}.mode") if mode is not None else Mode.NORMAL,
        return_to=parse_return(data.get("return"), f"{where}.return"),
    )


def _parse_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ActionFileError(f"{where}: expected a list")
    return value


def parse_group(value: Any, where: str) -> Group:
    data = _require_mapping(value, where)
    _check_keys(data, _GROUP_KEYS, where)
    entries = _parse_list(data.get("entries"), f"{where}.entries")
    return Group(
        title=_optional_text(data, "title", where),
        settings=parse_settings(data.get("settings"), f"{where}.settings"),
        entries=tuple(parse_entry(item, f"{where}.entries[{idx}]") for idx, item in enumerate(entries)),
    )


def parse_page(value: Any, where: str) -> Page:
    data = _require_mapping(value, where)
    _check_keys(data, _PAGE_KEYS, where)
    groups = _parse_list(data.get("groups"), f"{where}.groups")
    return Page(
        title=_optional_text(data, "title", where) or DEFAULT_PAGE_TITLE,
        header=_optional_text(data, "header", where),
        footer=_optional_text(data, "footer", where),
        settings=parse_settings(data.get("settings"), f"{where}.settings"),
        groups=tuple(parse_group(item, f"{where}.groups[{idx}]") for idx, item in enumerate(groups)),
    )


def parse_action_file(data: Any) -> ActionFile:
    """Build an :class:`ActionFile` from an already-decoded YAML document."""

    root = _require_mapping(data, "action file")
    _check_keys(root, _ROOT_KEYS, "action file")
    if "pages" not in root:
        raise ActionFileError("action file: missing pages")
    pages_data = _require_mapping(root["pages"], "pages")

    pages: Dict[str, Page] = {}
    for name, page in pages_data.items():
        pages[str(name)] = parse_page(page, f"pages.{name}")

    return ActionFile(
        pages=pages,
        global_settings=parse_settings(root.get("global"), "global") or Settings(),
    )


def loads(text: str) -> ActionFile:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ActionFileError(f"invalid YAML: {exc}") from exc
    return parse_action_file(data)


def load_action_file(path: Union[str, Path]) -> ActionFile:
    """Read and parse the action file at ``path``."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ActionFileError(f"could not read file: {exc.strerror or exc}") from exc
    return loads(text)


__all__ = [
    "load_action_file",
    "loads",
    "parse_action_file",
    "parse_command",
    "parse_entry",
    "parse_group",
    "parse_page",
    "parse_return",
    "parse_settings",
]
