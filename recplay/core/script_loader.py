from __future__ import annotations

"""Playback script schema and loader
------------------------------------
Selenium IDE style scripts: a list of (command, target, value) steps kept in
YAML. Files may hold several scripts as multiple YAML documents.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
import os
import re

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from recplay.selectors.errors import InvalidLocatorError
from recplay.selectors.locator import parse_locator


class Command(str, Enum):
    # navigation / windows
    open = "open"
    blank = "blank"
    back = "back"
    forward = "forward"
    refresh = "refresh"
    maximize = "maximize"
    minimize = "minimize"
    full_screen = "full_screen"
    maximize_to_screen = "maximize_to_screen"
    zoom = "zoom"
    switch_to_frame = "switch_to_frame"
    switch_to_parent_frame = "switch_to_parent_frame"
    switch_to_default_content = "switch_to_default_content"
    alert_accept = "alert_accept"
    alert_dismiss = "alert_dismiss"
    execute_script = "execute_script"
    # elements
    click = "click"
    js_click = "js_click"
    double_click = "double_click"
    right_click = "right_click"
    move_to = "move_to"
    send_keys = "send_keys"
    clear = "clear"
    submit = "submit"
    select = "select"
    focus = "focus"
    blur = "blur"
    hide = "hide"
    show = "show"
    highlight = "highlight"
    scroll_into_view = "scroll_into_view"
    trigger = "trigger"
    drag_and_drop = "drag_and_drop"
    # waits
    pause = "pause"
    wait_for_visible = "wait_for_visible"
    wait_for_enabled = "wait_for_enabled"
    wait_for_not_visible = "wait_for_not_visible"
    wait_for_text_to_include = "wait_for_text_to_include"
    wait_for_text_to_exclude = "wait_for_text_to_exclude"
    wait_for_title = "wait_for_title"
    wait_for_url = "wait_for_url"
    # output / annotations
    describe = "describe"
    save_screenshot = "save_screenshot"
    clear_drawings = "clear_drawings"
    draw_arrow = "draw_arrow"
    draw_color_fill = "draw_color_fill"
    draw_flyover = "draw_flyover"
    draw_redmark = "draw_redmark"
    draw_select = "draw_select"
    draw_text = "draw_text"


class TargetKind(str, Enum):
    none = "none"
    locator = "locator"
    text = "text"


# command -> (what target holds, value required, value is a locator)
_COMMAND_SHAPES: Dict[Command, tuple[TargetKind, bool, bool]] = {
    Command.open: (TargetKind.text, False, False),
    Command.zoom: (TargetKind.text, False, False),
    Command.switch_to_frame: (TargetKind.text, False, False),
    Command.execute_script: (TargetKind.text, False, False),
    Command.pause: (TargetKind.text, False, False),
    Command.wait_for_title: (TargetKind.text, False, False),
    Command.wait_for_url: (TargetKind.text, False, False),
    Command.describe: (TargetKind.text, False, False),
    Command.save_screenshot: (TargetKind.text, False, False),
    Command.send_keys: (TargetKind.locator, True, False),
    Command.trigger: (TargetKind.locator, True, False),
    Command.wait_for_text_to_include: (TargetKind.locator, True, False),
    Command.wait_for_text_to_exclude: (TargetKind.locator, True, False),
    Command.draw_text: (TargetKind.locator, True, False),
    Command.drag_and_drop: (TargetKind.locator, True, True),
    Command.draw_arrow: (TargetKind.locator, True, True),
}

_NO_TARGET = {
    Command.blank,
    Command.back,
    Command.forward,
    Command.refresh,
    Command.maximize,
    Command.minimize,
    Command.full_screen,
    Command.maximize_to_screen,
    Command.switch_to_parent_frame,
    Command.switch_to_default_content,
    Command.alert_accept,
    Command.alert_dismiss,
    Command.clear_drawings,
}


def command_shape(command: Command) -> tuple[TargetKind, bool, bool]:
    if command in _COMMAND_SHAPES:
        return _COMMAND_SHAPES[command]
    if command in _NO_TARGET:
        return TargetKind.none, False, False
    # the remaining element commands take a locator and an optional value
    return TargetKind.locator, False, False


# ---------- Models ----------


class Step(BaseModel):
    command: Command
    target: Optional[str] = Field(default=None, description="Locator, URL, text... depending on command")
    value: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None, description="Human-friendly step label")
    optional: bool = Field(default=False, description="If true, ignore failure and continue")

    @field_validator("target", "value", mode="before")
    @classmethod
    def _scalar_to_str(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @model_validator(mode="after")
    def _check_shape(self) -> "Step":
        kind, needs_value, value_is_locator = command_shape(self.command)
        if kind != TargetKind.none and not self.target:
            raise ValueError(f"'{self.command.value}' needs a target")
        if needs_value and self.value is None:
            raise ValueError(f"'{self.command.value}' needs a value")
        try:
            if kind == TargetKind.locator:
                parse_locator(self.target)
            if value_is_locator:
                parse_locator(self.value)
        except InvalidLocatorError as e:
            raise ValueError(str(e)) from e
        return self

    @property
    def label(self) -> str:
        return self.name or " ".join(p for p in (self.command.value, self.target) if p)


class Script(BaseModel):
    version: str = Field(default="1")
    name: str = Field(..., description="Script name, used for the run directory")
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    steps: list[Step] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


# ---------- Helpers ----------

_ENV_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _subst_env(obj: Any) -> Any:
    """Replace ${VAR} in every string; unknown variables are left as-is."""
    if isinstance(obj, str):
        return _ENV_RE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _validate(data: Any, path: Path, doc_index: Optional[int] = None) -> Script:
    where = f"'{path}'" if doc_index is None else f"'{path}' (document {doc_index})"
    if not isinstance(data, dict):
        raise ValueError(f"Script {where} must be a mapping/object at the top level.")
    data = dict(data)
    data.setdefault("name", path.stem if doc_index in (None, 1) else f"{path.stem}_{doc_index}")
    try:
        return Script.model_validate(_subst_env(data))
    except ValidationError as ve:
        lines = [f"Invalid script {where}:"]
        for e in ve.errors():
            loc = ".".join(str(p) for p in e.get("loc", []))
            lines.append(f"  - {loc}: {e.get('msg', 'invalid value')}")
        raise ValueError("\n".join(lines)) from ve


# ---------- Public API ----------


def load_script(path: Path | str) -> Script:
    """Load a single-document script file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Script file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {p}: {ye}") from ye
    return _validate(data, p)


def load_scripts_file(path: Path | str) -> list[Script]:
    """Load one or more scripts from a YAML file (multi-document aware)."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Script file not found: {p}")
    try:
        docs = list(yaml.safe_load_all(p.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {p}: {ye}") from ye

    scripts = [_validate(d, p, idx) for idx, d in enumerate(docs, start=1) if d is not None]
    if not scripts:
        raise ValueError(f"No script documents found in {p}")
    return scripts


def find_script_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


__all__ = [
    "Command",
    "TargetKind",
    "Step",
    "Script",
    "command_shape",
    "load_script",
    "load_scripts_file",
    "find_script_files",
]
