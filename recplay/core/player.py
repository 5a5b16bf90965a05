from __future__ import annotations

"""Script player
----------------
Plays a validated script against a fresh Session, one step at a time, and
leaves a per-run log and manifest under RUNS_DIR/<script>/<timestamp>/.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from recplay.core.script_loader import Command, Script, Step, load_script
from recplay.core.session import Session
from recplay.utils.config import Settings, get_settings
from recplay.utils.logger import (
    bound,
    file_logging,
    get_logger,
    log_with_context,
)
from recplay.utils.timing import Stopwatch, measure, sleep_ms

SessionFactory = Callable[[Settings], Session]

# commands whose Session method takes the step value as second argument
_TAKES_VALUE = {
    Command.send_keys,
    Command.trigger,
    Command.drag_and_drop,
    Command.highlight,
    Command.wait_for_text_to_include,
    Command.wait_for_text_to_exclude,
    Command.draw_arrow,
    Command.draw_color_fill,
    Command.draw_flyover,
    Command.draw_text,
}


@dataclass
class RunContext:
    """Filesystem locations for the current run."""
    run_dir: Path
    log_path: Path
    manifest_path: Path


def _ts() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")


def _offsets(value: Optional[str]) -> Tuple[int, ...]:
    """'10,20' -> (10, 20); no value means no offset."""
    if not value:
        return ()
    x, _, y = value.partition(",")
    return int(x.strip() or 0), int(y.strip() or 0)


def _as_bool(value: str) -> bool:
    return value.strip().lower() not in ("false", "0", "no", "off", "")


def step_arguments(step: Step) -> Tuple[Any, ...]:
    """Positional arguments for the Session method named by `step.command`."""
    cmd, target, value = step.command, step.target, step.value
    if cmd == Command.zoom:
        return (float(target),)
    if cmd == Command.switch_to_frame:
        return (int(target) if target.isdigit() else target,)
    if cmd == Command.wait_for_not_visible:
        return (target,) if value is None else (target, float(value))
    if cmd == Command.scroll_into_view:
        return (target,) if value is None else (target, _as_bool(value))
    if cmd in (Command.double_click, Command.right_click, Command.move_to, Command.draw_select):
        return (target, *_offsets(value))
    if cmd == Command.draw_redmark:
        return (target,) if not value else (target, *(int(p) for p in value.split(",")))
    if cmd in _TAKES_VALUE and value is not None:
        return (target, value)
    return () if target is None else (target,)


def execute_step(session: Session, step: Step) -> Any:
    """Run one step. Errors propagate to the caller."""
    if step.command == Command.pause:
        sleep_ms(int(step.target))
        return None
    return getattr(session, step.command.value)(*step_arguments(step))


class Player:
    """Runs scripts in their own browser session and records the outcome."""

    def __init__(self, settings: Optional[Settings] = None, session_factory: Optional[SessionFactory] = None):
        self.settings = settings or get_settings()
        self.session_factory: SessionFactory = session_factory or (lambda s: Session(settings=s))
        self.log = get_logger(__name__)
        self.last_run_dir: Optional[Path] = None

    def _prepare_run_dir(self, script: Script) -> RunContext:
        base = self.settings.RUNS_DIR / script.name / _ts()
        base.mkdir(parents=True, exist_ok=True)
        self.last_run_dir = base
        return RunContext(run_dir=base, log_path=base / "run.log", manifest_path=base / "manifest.json")

    def _write_manifest(self, script: Script, ctx: RunContext, result: Dict[str, Any], steps: List[Dict[str, Any]]) -> None:
        doc = {
            "script": script.name,
            "description": script.description or "",
            "tags": script.tags,
            "browser": self.settings.BROWSER.value,
            "locale": self.settings.LOCALE,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "total_steps": len(script.steps),
            "ok": result["ok"],
            "steps": steps,
        }
        if not result["ok"]:
            doc["error"] = result.get("error")
            doc["failed_step"] = result.get("failed_step")
        ctx.manifest_path.write_text(json.dumps(doc, indent=2), encoding="utf-8")

    @measure("run_script", level="INFO")
    def run_script(self, script: Script) -> dict:
        """Play every step of `script` and return a small result dict.

        Returns {"ok": bool, "run_dir": str, ...}; on failure the dict also
        carries "error", "error_type" and "failed_step". The browser is quit
        whatever happens.
        """
        ctx = self._prepare_run_dir(script)
        with file_logging(ctx.log_path), bound(script=script.name):
            result, steps_meta = self._play(script, ctx)
        self._write_manifest(script, ctx, result, steps_meta)
        return result

    def _play(self, script: Script, ctx: RunContext) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        steps_meta: List[Dict[str, Any]] = []
        failed_step_info: Optional[Dict[str, Any]] = None
        run_log = log_with_context(self.log, run_dir=str(ctx.run_dir))
        result: Dict[str, Any]
        try:
            run_log.info(f"Starting script: {script.name} (steps={len(script.steps)})")
            with self.session_factory(self.settings) as session:
                for idx, step in enumerate(script.steps, start=1):
                    step_log = log_with_context(run_log, step_index=idx, command=step.command.value)
                    step_log.info(f"Step {idx}/{len(script.steps)}: {step.label}")
                    record: Dict[str, Any] = {
                        "step_number": idx,
                        "command": step.command.value,
                        "target": step.target,
                        "value": step.value,
                        "description": step.label,
                    }
                    with Stopwatch() as sw:
                        try:
                            execute_step(session, step)
                        except Exception as step_err:
                            record["elapsed_ms"] = sw.elapsed_ms()
                            if not step.optional:
                                record["status"] = "failed"
                                steps_meta.append(record)
                                failed_step_info = {"index": idx, "command": step.command.value, "name": step.name}
                                raise
                            step_log.warning(f"Optional step failed, continuing: {step_err}")
                            record["status"] = "skipped"
                            record["error"] = str(step_err)
                            steps_meta.append(record)
                            continue
                    record["elapsed_ms"] = sw.elapsed_ms()
                    record["status"] = "ok"
                    steps_meta.append(record)
            run_log.info(f"Script finished: {script.name}")
            result = {"ok": True, "run_dir": str(ctx.run_dir)}
        except Exception as e:
            run_log.exception("Script failed:")
            result = {"ok": False, "error": str(e), "run_dir": str(ctx.run_dir), "error_type": e.__class__.__name__}
            if failed_step_info:
                result["failed_step"] = failed_step_info
        return result, steps_meta


def run_script(script: Path | str | Script, settings: Optional[Settings] = None) -> dict:
    sc = load_script(script) if isinstance(script, (str, Path)) else script
    return Player(settings=settings or get_settings()).run_script(sc)
