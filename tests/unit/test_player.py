import json
from pathlib import Path

from recplay.core.player import Player, execute_step, step_arguments
from recplay.core.script_loader import Script, Step
from recplay.core.session import Session


def make_player(settings, driver, console):
    return Player(settings=settings, session_factory=lambda s: Session(settings=s, driver=driver, console=console))


def script(*steps, name="demo"):
    return Script(name=name, steps=[Step(**st) for st in steps])


def test_successful_run_writes_manifest(settings, driver, console):
    sc = script(
        {"command": "open", "target": "https://example.com"},
        {"command": "send_keys", "target": "name=q", "value": "recplay"},
        {"command": "click", "target": "css=li:eq(1)"},
        {"command": "save_screenshot", "target": "results"},
    )
    res = make_player(settings, driver, console).run_script(sc)

    assert res["ok"] is True
    run_dir = Path(res["run_dir"])
    assert run_dir.parent.parent == settings.RUNS_DIR
    assert (run_dir / "run.log").exists()
    manifest = json.loads((run_dir / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["script"] == "demo"
    assert [st["status"] for st in manifest["steps"]] == ["ok"] * 4
    assert driver.visited == ["https://example.com"]
    assert driver.elements[("css selector", "li")][1].clicks == 1
    assert (settings.SCREEN_DIR / "en" / "results.png").exists()
    assert driver.quit_calls == 1


def test_failed_step_stops_run_and_quits(settings, driver, console):
    sc = script(
        {"command": "open", "target": "https://example.com"},
        {"command": "send_keys", "target": "id=missing", "value": "x", "name": "type into nothing"},
        {"command": "refresh"},
    )
    res = make_player(settings, driver, console).run_script(sc)

    assert res["ok"] is False
    assert res["error_type"] == "NotFoundError"
    assert res["failed_step"] == {"index": 2, "command": "send_keys", "name": "type into nothing"}
    assert "id=missing" in res["error"]
    assert driver.quit_calls == 1
    manifest = json.loads((Path(res["run_dir"]) / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["ok"] is False
    assert [st["status"] for st in manifest["steps"]] == ["ok", "failed"]


def test_optional_step_failure_is_skipped(settings, driver, console):
    sc = script(
        {"command": "send_keys", "target": "id=missing", "value": "x", "optional": True},
        {"command": "open", "target": "https://example.com/after"},
    )
    res = make_player(settings, driver, console).run_script(sc)
    assert res["ok"] is True
    assert driver.visited == ["https://example.com/after"]


def test_step_arguments_coercion():
    assert step_arguments(Step(command="zoom", target="1.5")) == (1.5,)
    assert step_arguments(Step(command="switch_to_frame", target="2")) == (2,)
    assert step_arguments(Step(command="switch_to_frame", target="main")) == ("main",)
    assert step_arguments(Step(command="double_click", target="id=go", value="5, 7")) == ("id=go", 5, 7)
    assert step_arguments(Step(command="scroll_into_view", target="id=go", value="false")) == ("id=go", False)
    assert step_arguments(Step(command="wait_for_not_visible", target="id=go", value="2")) == ("id=go", 2.0)
    assert step_arguments(Step(command="draw_redmark", target="id=go", value="1,2,3,4")) == ("id=go", 1, 2, 3, 4)
    assert step_arguments(Step(command="highlight", target="id=go", value="#0f0")) == ("id=go", "#0f0")
    assert step_arguments(Step(command="click", target="id=go", value="ignored")) == ("id=go",)
    assert step_arguments(Step(command="back")) == ()


def test_pause_sleeps(monkeypatch, settings, driver, console):
    slept = []
    monkeypatch.setattr("recplay.core.player.sleep_ms", slept.append)
    execute_step(Session(settings=settings, driver=driver, console=console), Step(command="pause", target="150"))
    assert slept == [150]
