from pathlib import Path
import textwrap

import pytest

from recplay.core.script_loader import (
    Command,
    TargetKind,
    command_shape,
    load_script,
    load_scripts_file,
)


def test_load_scripts_file_multiple_docs(tmp_path: Path):
    yml = textwrap.dedent(
        """
        version: "1"
        name: search
        steps:
          - command: open
            target: "https://example.com/one"
          - command: send_keys
            target: name=q
            value: recplay
        ---
        version: "1"
        steps:
          - command: click
            target: css=li:eq(1)
        """
    )
    f = tmp_path / "multi.yaml"
    f.write_text(yml, encoding="utf-8")

    scripts = load_scripts_file(f)
    assert len(scripts) == 2
    assert scripts[0].name == "search" and len(scripts[0].steps) == 2
    assert scripts[1].name == "multi_2"
    assert scripts[1].steps[0].command == Command.click


def test_single_doc_name_defaults_to_file_stem(tmp_path: Path):
    f = tmp_path / "login_flow.yml"
    f.write_text("steps:\n  - command: refresh\n", encoding="utf-8")
    sc = load_script(f)
    assert sc.name == "login_flow"
    assert sc.steps[0].target is None


def test_env_substitution_and_scalar_values(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("RECPLAY_TEST_HOST", "staging.example.com")
    f = tmp_path / "env.yaml"
    f.write_text(
        textwrap.dedent(
            """
            steps:
              - command: open
                target: "https://${RECPLAY_TEST_HOST}/login?next=${NOT_SET_ANYWHERE}"
              - command: pause
                target: 250
            """
        ),
        encoding="utf-8",
    )
    sc = load_script(f)
    assert sc.steps[0].target == "https://staging.example.com/login?next=${NOT_SET_ANYWHERE}"
    assert sc.steps[1].target == "250"


def test_invalid_locator_is_rejected_at_load_time(tmp_path: Path):
    f = tmp_path / "bad.yaml"
    f.write_text("steps:\n  - command: click\n    target: foo=bar\n", encoding="utf-8")
    with pytest.raises(ValueError) as ei:
        load_script(f)
    assert "Invalid script" in str(ei.value)
    assert "foo=bar" in str(ei.value)


def test_missing_value_is_rejected(tmp_path: Path):
    f = tmp_path / "novalue.yaml"
    f.write_text("steps:\n  - command: send_keys\n    target: name=q\n", encoding="utf-8")
    with pytest.raises(ValueError, match="needs a value"):
        load_script(f)


def test_missing_target_is_rejected(tmp_path: Path):
    f = tmp_path / "notarget.yaml"
    f.write_text("steps:\n  - command: click\n", encoding="utf-8")
    with pytest.raises(ValueError, match="needs a target"):
        load_script(f)


def test_empty_file_has_no_documents(tmp_path: Path):
    f = tmp_path / "empty.yaml"
    f.write_text("---\n", encoding="utf-8")
    with pytest.raises(ValueError, match="No script documents"):
        load_scripts_file(f)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_script(tmp_path / "nope.yaml")


def test_command_shapes():
    assert command_shape(Command.open) == (TargetKind.text, False, False)
    assert command_shape(Command.back) == (TargetKind.none, False, False)
    assert command_shape(Command.drag_and_drop) == (TargetKind.locator, True, True)
    assert command_shape(Command.hide) == (TargetKind.locator, False, False)
