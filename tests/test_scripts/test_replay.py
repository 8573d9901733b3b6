"""Tests for the replay CLI."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from scripts.replay import load_readings, main, parse_args

SAMPLE = Path(__file__).resolve().parents[2] / "config" / "sample_readings.json"


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "readings.json"
    path.write_text(json.dumps(payload))
    return path


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return int(exc.value.code or 0)


class TestLoadReadings:
    def test_list_form(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [
            {"asset_id": "A", "metric_id": "m", "timestamp": 1, "value": 2},
        ])
        readings = load_readings(path)
        assert len(readings) == 1
        assert readings[0].value == 2.0

    def test_object_form(self) -> None:
        readings = load_readings(SAMPLE)
        assert len(readings) == 10
        assert readings[0].asset_id == "PUMP-402"

    def test_invalid_reading(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"asset_id": "A", "metric_id": "m"}])
        with pytest.raises(ValidationError):
            load_readings(path)


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args(["readings.json"])
        assert args.readings == "readings.json"
        assert args.status == "ALL"
        assert args.config is None
        assert args.log_level is None


class TestReplay:
    def test_sample_replay(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run([str(SAMPLE), "--config", str(tmp_path / "missing.yaml")])
        out = capsys.readouterr().out
        assert code == 0
        assert "Replaying 10 readings" in out
        assert "OPENED" in out
        assert "CLOSED" in out
        assert "Replay complete: 3 alerts, 2 still open" in out

    def test_status_filter(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run([
            str(SAMPLE),
            "--config", str(tmp_path / "missing.yaml"),
            "--status", "CRITICAL",
        ])
        out = capsys.readouterr().out
        assert code == 0
        assert "ALERTS (CRITICAL)" in out
        assert "No alerts matching the current filter settings." in out

    def test_closed_alerts_listed_as_normal(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _run([
            str(SAMPLE),
            "--config", str(tmp_path / "missing.yaml"),
            "--status", "normal",
        ])
        out = capsys.readouterr().out
        assert "Max Pressure on PUMP-402 (CLOSED)" in out
        assert "peak=CRITICAL" in out

    def test_unknown_status(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run([
            str(SAMPLE),
            "--config", str(tmp_path / "missing.yaml"),
            "--status", "SEVERE",
        ])
        assert code == 2
        assert "unknown status filter" in capsys.readouterr().err

    def test_unknown_metric_aborts(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = _write(tmp_path, [
            {"asset_id": "A", "metric_id": "Humidity", "timestamp": 1, "value": 2},
        ])
        code = _run([str(path), "--config", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "Replay aborted" in capsys.readouterr().err

    def test_conflicting_duplicate_aborts(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = _write(tmp_path, [
            {"asset_id": "A", "metric_id": "Max_Pressure_psi", "timestamp": 1, "value": 1000},
            {"asset_id": "A", "metric_id": "Max_Pressure_psi", "timestamp": 1, "value": 1001},
        ])
        code = _run([str(path), "--config", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "not after" in capsys.readouterr().err

    def test_missing_readings_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            str(tmp_path / "absent.json"),
            "--config", str(tmp_path / "missing.yaml"),
        ])
        assert code == 1
        assert "Cannot load readings" in capsys.readouterr().err

    def test_malformed_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "readings.json"
        path.write_text("{not json")
        code = _run([str(path), "--config", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "Cannot load readings" in capsys.readouterr().err

    def test_nan_value_rejected(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "readings.json"
        path.write_text(
            '[{"asset_id": "A", "metric_id": "Max_Pressure_psi",'
            ' "timestamp": 1, "value": NaN}]'
        )
        code = _run([str(path), "--config", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "Cannot load readings" in capsys.readouterr().err

    def test_config_file_applies(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(
            "thresholds:\n"
            "  policies:\n"
            "    - metric_id: Max_Pressure_psi\n"
            "      mode: SINGLE_UPPER\n"
            "      upper: 2000\n"
        )
        path = _write(tmp_path, [
            {"asset_id": "A", "metric_id": "Max_Pressure_psi", "timestamp": 1, "value": 1500},
        ])
        code = _run([str(path), "--config", str(config)])
        out = capsys.readouterr().out
        assert code == 0
        assert "Policies: 1" in out
        assert "Replay complete: 0 alerts, 0 still open" in out
