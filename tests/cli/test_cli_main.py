# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the formeval CLI entry point."""

import json
import sys
from pathlib import Path

import pytest

from formeval.cli.main import main

# ###############
# Helpers
# ###############

_SCHEMA = {
    "name": "Order",
    "fields": [
        {
            "id": "qty",
            "type": "number",
            "order": 0,
            "defaultValue": 2,
            "validationRules": [{"type": "required", "message": "Quantity is required"}],
        },
        {"id": "price", "type": "number", "order": 1},
        {
            "id": "total",
            "type": "number",
            "order": 2,
            "isDerived": True,
            "derivedLogic": {"parentFields": ["qty", "price"], "type": "custom", "formula": "qty * price"},
        },
        {"id": "dob", "type": "date", "order": 3},
        {
            "id": "age",
            "type": "number",
            "order": 4,
            "isDerived": True,
            "derivedLogic": {"parentFields": ["dob"], "type": "age"},
        },
    ],
}


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run the CLI with *args* and return its exit code."""
    monkeypatch.setattr(sys, "argv", ["formeval", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    code = exc_info.value.code
    return 0 if code is None else int(code)


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    return _write_json(tmp_path / "order.json", _SCHEMA)


# ###############
# Public Interface
# ###############


def test_main_no_args_prints_help_and_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0
    assert "usage: formeval" in capsys.readouterr().out


# -------- check tests --------


def test_check_clean_schema(schema_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """check reports success for a well-formed schema."""
    assert _run(monkeypatch, "check", str(schema_file)) == 0
    assert "Schema 'Order' with 5 field(s): no issues found." in capsys.readouterr().out


def test_check_reports_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """check prints every structural error and exits with code 1."""
    broken = _write_json(
        tmp_path / "broken.json",
        {"fields": [{"id": "a", "type": "number", "order": 0}, {"id": "a", "type": "select", "order": 2}]},
    )
    assert _run(monkeypatch, "check", str(broken)) == 1
    err = capsys.readouterr().err
    assert "Duplicate field id 'a'." in err
    assert "not a contiguous 0-based sequence" in err
    assert "has no options" in err


def test_check_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """check exits with code 1 when the schema file does not exist."""
    assert _run(monkeypatch, "check", str(tmp_path / "missing.json")) == 1
    assert "File not found" in capsys.readouterr().err


# -------- evaluate tests --------


def test_evaluate_with_values(
    schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    """evaluate overlays values on defaults, recomputes, and prints a JSON report."""
    monkeypatch.chdir(tmp_path)
    values = _write_json(tmp_path / "values.json", {"price": "2.5", "dob": "2000-10-20"})

    assert _run(monkeypatch, "evaluate", str(schema_file), str(values), "--today", "2026-10-19") == 0
    report = json.loads(capsys.readouterr().out)
    assert report["values"]["qty"] == 2
    assert report["values"]["total"] == 5
    assert report["values"]["age"] == 25
    assert report["errors"] == {}
    assert report["isValid"] is True


def test_evaluate_defaults_only(schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """Without a value file, only the defaults are evaluated."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "evaluate", str(schema_file)) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["values"] == {"qty": 2, "total": 0, "age": 0}


def test_evaluate_reports_validation_errors(
    schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    """A failing rule produces an error entry and exit code 1."""
    monkeypatch.chdir(tmp_path)
    values = _write_json(tmp_path / "values.json", {"qty": "  "})

    assert _run(monkeypatch, "evaluate", str(schema_file), str(values)) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["errors"] == {"qty": "Quantity is required"}
    assert report["isValid"] is False


def test_evaluate_uses_config_today(
    schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    """The reference date is read from .formeval.yaml in the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".formeval.yaml").write_text("today: 2030-01-01\n", encoding="utf-8")
    values = _write_json(tmp_path / "values.json", {"dob": "2000-06-01"})

    assert _run(monkeypatch, "evaluate", str(schema_file), str(values)) == 0
    assert json.loads(capsys.readouterr().out)["values"]["age"] == 29


def test_evaluate_invalid_today(schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """An unparseable --today value is an error."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "evaluate", str(schema_file), "--today", "tomorrow") == 1
    assert "invalid --today date 'tomorrow'" in capsys.readouterr().err


def test_evaluate_invalid_config(schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """An explicit config file with an unknown key is an error."""
    config = tmp_path / "engine.yaml"
    config.write_text("colour: blue\n", encoding="utf-8")
    assert _run(monkeypatch, "evaluate", str(schema_file), "--config", str(config)) == 1
    assert "unknown field(s): colour" in capsys.readouterr().err


def test_evaluate_invalid_values_file(
    schema_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    """A value file holding a list is rejected."""
    monkeypatch.chdir(tmp_path)
    values = _write_json(tmp_path / "values.json", [1, 2])
    assert _run(monkeypatch, "evaluate", str(schema_file), str(values)) == 1
    assert "values must be a mapping" in capsys.readouterr().err


# -------- init-config tests --------


def test_init_config_creates_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init-config writes the default config into the given directory."""
    assert _run(monkeypatch, "init-config", str(tmp_path)) == 0
    content = (tmp_path / ".formeval.yaml").read_text(encoding="utf-8")
    assert "log-level: WARNING" in content


def test_init_config_default_directory_uses_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init-config with no directory argument uses the current working directory."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "init-config") == 0
    assert (tmp_path / ".formeval.yaml").exists()


def test_init_config_fails_if_file_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init-config exits with code 1 rather than overwrite an existing config."""
    (tmp_path / ".formeval.yaml").write_text("max-passes: 3\n", encoding="utf-8")
    assert _run(monkeypatch, "init-config", str(tmp_path)) == 1
    assert (tmp_path / ".formeval.yaml").read_text(encoding="utf-8") == "max-passes: 3\n"


def test_init_config_fails_for_missing_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init-config exits with code 1 when the directory does not exist."""
    assert _run(monkeypatch, "init-config", str(tmp_path / "nope")) == 1
