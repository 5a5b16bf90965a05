from __future__ import annotations

"""Command-line interface
------------------------
List, validate and play back recplay scripts, check how a locator parses,
and print the effective configuration.
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click

from recplay.core.player import Player
from recplay.core.script_loader import Script, find_script_files, load_scripts_file
from recplay.selectors.errors import InvalidLocatorError
from recplay.selectors.locator import Strategy, parse_locator, split_nth
from recplay.utils.config import get_settings
from recplay.utils.logger import bound, get_logger, set_log_level


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _collect(targets: List[str], scripts_dir: Optional[str], recursive: bool) -> List[Path]:
    paths: List[Path] = []
    if targets:
        for p in (Path(t).resolve() for t in targets):
            if p.is_dir():
                paths.extend(find_script_files(p, recursive=True))
            else:
                paths.append(p)
    elif scripts_dir:
        paths.extend(find_script_files(Path(scripts_dir), recursive=recursive))
    return paths


def _report(sc: Script, res: dict) -> None:
    if res.get("ok"):
        click.echo(f"OK  {sc.name} -> run_dir={res.get('run_dir', '-')}")
        return
    failed = res.get("failed_step") or {}
    step_desc = ""
    if failed:
        step_desc = f" [step {failed.get('index', '?')} {failed.get('command', '')} {failed.get('name') or ''}]"
    prefix = f"{res['error_type']}: " if res.get("error_type") else ""
    click.echo(f"ERR {sc.name}{step_desc} -> {prefix}{res.get('error', 'unknown error')}")


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="recplay")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    data = get_settings().model_dump(mode="json")
    if data.get("AUTH_PASSWORD"):
        data["AUTH_PASSWORD"] = "***"
    _echo_json(data)


@cli.command("locate")
@click.argument("locator")
def cmd_locate(locator: str):
    """Show how LOCATOR resolves (strategy, By value, selector, :eq index)."""
    try:
        loc = parse_locator(locator)
    except InvalidLocatorError as e:
        click.echo(f"ERR {e}", err=True)
        sys.exit(2)
    base, nth = split_nth(loc.selector) if loc.strategy == Strategy.css else (loc.selector, None)
    _echo_json({
        "strategy": loc.strategy.value,
        "by": loc.by,
        "selector": base,
        "index": nth,
    })


@cli.command("list")
@click.option(
    "--dir", "scripts_dir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=lambda: str(get_settings().SCRIPTS_DIR),
    show_default=True,
    help="Directory containing script YAML files",
)
@click.option("--recursive/--no-recursive", default=True, show_default=True)
@click.option("--tag", "filter_tag", type=str, default=None, help="Only scripts carrying this tag")
def cmd_list(scripts_dir: str, recursive: bool, filter_tag: Optional[str]):
    """List scripts available in a directory."""
    rows = []
    for fp in find_script_files(Path(scripts_dir), recursive=recursive):
        try:
            scripts = load_scripts_file(fp)
        except (OSError, ValueError):
            # `validate` reports the details
            continue
        rows.extend((fp, sc) for sc in scripts if not filter_tag or filter_tag in sc.tags)

    if not rows:
        click.echo("No scripts found.")
        return

    click.echo(f"Found {len(rows)} script(s):\n")
    for fp, sc in rows:
        tags = f" [{', '.join(sc.tags)}]" if sc.tags else ""
        click.echo(f" - {sc.name}{tags}  ({len(sc.steps)} steps)  <- {fp}")


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "scripts_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True), help="Validate all scripts under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], scripts_dir: Optional[str], recursive: bool):
    """Validate scripts from files or a directory (supports multi-doc YAML)."""
    if not targets and not scripts_dir:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in _collect(targets, scripts_dir, recursive):
        try:
            for sc in load_scripts_file(fp):
                click.echo(f"OK  {fp}  ->  {sc.name} ({len(sc.steps)} steps)")
        except (OSError, ValueError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("run")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "scripts_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Run all scripts found under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
@click.option("--tag", "filter_tag", type=str, default=None, help="Only run scripts carrying this tag")
@click.option("--json-out", type=click.Path(dir_okay=False), default=None, help="Write a JSON summary to this file")
def cmd_run(
    targets: List[str],
    scripts_dir: Optional[str],
    recursive: bool,
    filter_tag: Optional[str],
    json_out: Optional[str],
):
    """
    Play back one or more scripts, each in its own browser session.

    Examples:
      recplay run scripts/search.yaml
      recplay run --dir scripts --tag smoke
    """
    settings = get_settings()
    log = get_logger(__name__)

    if not targets and not scripts_dir:
        click.echo("Nothing to run. Provide file(s) or --dir.")
        sys.exit(2)

    results: List[dict] = []
    queue: List[tuple[Path, Script]] = []
    for fp in _collect(targets, scripts_dir, recursive):
        try:
            scripts = load_scripts_file(fp)
        except (OSError, ValueError) as e:
            log.error(f"Cannot load {fp}: {e}")
            results.append({"ok": False, "error": str(e), "script_file": str(fp)})
            click.echo(f"ERR {fp} -> {e}")
            continue
        queue.extend((fp, sc) for sc in scripts if not filter_tag or filter_tag in sc.tags)

    if not queue and not results:
        click.echo("No scripts matched.")
        sys.exit(1)

    click.echo(f"Running {len(queue)} script(s)...")
    player = Player(settings=settings)
    with bound(run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")):
        for fp, sc in queue:
            res = player.run_script(sc)
            res.setdefault("script", sc.name)
            res.setdefault("script_file", str(fp))
            results.append(res)
            _report(sc, res)

    ok_count = sum(1 for r in results if r.get("ok"))
    fail_count = len(results) - ok_count
    click.echo(f"Done. OK={ok_count}  FAIL={fail_count}")

    if json_out:
        outp = Path(json_out).resolve()
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(json.dumps({"results": results}, indent=2), encoding="utf-8")
        click.echo(f"Wrote summary: {outp}")

    sys.exit(0 if fail_count == 0 else 1)


def main() -> None:
    cli(prog_name="recplay")


if __name__ == "__main__":
    main()
