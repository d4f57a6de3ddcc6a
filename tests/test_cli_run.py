from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from apps.cli.main import app

runner = CliRunner()

_TEMPLATES = "GET %s %d\n\nuser %s logged in\n"
_FULL_LOG = "GET /a 200\nuser bob logged in\nGET /b 500\n"


def _write_inputs(root: Path, *, templates: str = _TEMPLATES, full_log: str = _FULL_LOG) -> None:
    (root / "templates.txt").write_text(templates, encoding="utf-8")
    (root / "full.log").write_text(full_log, encoding="utf-8")


def _run_args(root: Path, *extra: str, full_log: str = "full.log") -> list[str]:
    return [
        "run",
        "--templates-path",
        str(root / "templates.txt"),
        "--full-log-path",
        str(root / full_log),
        "--min-log-path",
        str(root / "min.log"),
        *extra,
    ]


def test_cli_encode_then_decode_round_trip(tmp_path: Path) -> None:
    _write_inputs(tmp_path)

    encode = runner.invoke(app, _run_args(tmp_path))
    assert encode.exit_code == 0
    assert (tmp_path / "min.log").read_bytes() == (
        b"0CS2:/aCI200|C\n1CS3:bobC\n0CS2:/bCI500|C\n"
    )
    assert "records_written=3" in encode.output

    decode = runner.invoke(app, _run_args(tmp_path, "--decode", full_log="restored.log"))
    assert decode.exit_code == 0
    assert (tmp_path / "restored.log").read_text(encoding="utf-8") == _FULL_LOG


def test_cli_refuses_existing_output_without_overwrite(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    (tmp_path / "min.log").write_bytes(b"keep me")

    result = runner.invoke(app, _run_args(tmp_path))

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (tmp_path / "min.log").read_bytes() == b"keep me"


def test_cli_force_alias_overwrites_existing_output(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    (tmp_path / "min.log").write_bytes(b"stale")

    result = runner.invoke(app, _run_args(tmp_path, "-f"))

    assert result.exit_code == 0
    assert "overwriting existing outputs: min.log" in result.output
    assert (tmp_path / "min.log").read_bytes().startswith(b"0CS2:/a")


def test_cli_missing_input_returns_config_error(tmp_path: Path) -> None:
    (tmp_path / "templates.txt").write_text(_TEMPLATES, encoding="utf-8")

    result = runner.invoke(app, _run_args(tmp_path))

    assert result.exit_code == 1
    assert "ConfigError" in result.output
    assert not (tmp_path / "min.log").exists()


def test_cli_bad_template_returns_2(tmp_path: Path) -> None:
    _write_inputs(tmp_path, templates="ok %d\nbad%\n")

    result = runner.invoke(app, _run_args(tmp_path))

    assert result.exit_code == 2
    assert "dangling escape" in result.output
    assert "templates line 2" in result.output


def test_cli_malformed_record_returns_3(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    (tmp_path / "min.log").write_bytes(b"0CS2/aCI200|C\n")

    result = runner.invoke(app, _run_args(tmp_path, "--decode", full_log="out.log"))

    assert result.exit_code == 3
    assert "RecordFormatError" in result.output


def test_cli_template_mismatch_returns_4(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    (tmp_path / "min.log").write_bytes(b"1CI5|C\n")

    result = runner.invoke(app, _run_args(tmp_path, "--decode", full_log="out.log"))

    assert result.exit_code == 4
    assert "IntegrityError" in result.output


def test_cli_unmatched_lines_warn_and_continue(tmp_path: Path) -> None:
    _write_inputs(tmp_path, full_log="GET /a 200\nnoise here\n")

    result = runner.invoke(app, _run_args(tmp_path))

    assert result.exit_code == 0
    assert "WARNING(unmatched): log lines dropped (count=1, mode=warn)." in result.output
    assert "dropped: line 2: noise here" in result.output
    assert (tmp_path / "min.log").read_bytes() == b"0CS2:/aCI200|C\n"


def test_cli_strict_unmatched_mode_returns_5(tmp_path: Path) -> None:
    _write_inputs(tmp_path, full_log="noise\n")
    config = tmp_path / "settings.yaml"
    config.write_text("unmatched_mode: error\n", encoding="utf-8")

    result = runner.invoke(app, _run_args(tmp_path, "--config", str(config)))

    assert result.exit_code == 5
    assert "UnmatchedLineError" in result.output


def test_cli_json_report(tmp_path: Path) -> None:
    _write_inputs(tmp_path)

    result = runner.invoke(app, _run_args(tmp_path, "--report", "json"))

    assert result.exit_code == 0
    payload_line = next(line for line in result.output.splitlines() if line.startswith("{"))
    payload = json.loads(payload_line)
    assert payload["mode"] == "encode"
    assert payload["records_written"] == 3


def test_cli_invalid_report_mode(tmp_path: Path) -> None:
    _write_inputs(tmp_path)

    result = runner.invoke(app, _run_args(tmp_path, "--report", "xml"))

    assert result.exit_code == 1
    assert "--report must be one of" in result.output
    assert not (tmp_path / "min.log").exists()


def test_cli_check_templates_lists_layout(tmp_path: Path) -> None:
    _write_inputs(tmp_path)

    result = runner.invoke(
        app, ["check-templates", "--templates-path", str(tmp_path / "templates.txt")]
    )

    assert result.exit_code == 0
    assert "0: 'GET ' <token> ' ' <int> '' (holes=2)" in result.output
    assert "1: 'user ' <token> ' logged in' (holes=1)" in result.output
    assert "2 templates parsed" in result.output


def test_cli_check_templates_bad_pattern(tmp_path: Path) -> None:
    _write_inputs(tmp_path, templates="%q\n")

    result = runner.invoke(
        app, ["check-templates", "--templates-path", str(tmp_path / "templates.txt")]
    )

    assert result.exit_code == 2
    assert "bad param spec %q" in result.output
