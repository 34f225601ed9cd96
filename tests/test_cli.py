"""Tests for the command-line entry point."""
import json
import logging

import pytest
import structlog

from shiftplan.cli import main


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("shiftplan").handlers.clear()
    logging.getLogger("shiftplan").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def request_file(request_payload, tmp_path):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(request_payload), encoding="utf-8")
    return path


class TestCli:
    """Tests for shiftplan.cli.main."""

    def test_text_summary(self, request_file, capsys):
        assert main(["--input", str(request_file)]) == 0
        out = capsys.readouterr().out
        assert "Summary:" in out
        assert "store-1" in out
        assert "Assignments: 21 rows" in out

    def test_json_output(self, request_file, capsys):
        assert main(["--input", str(request_file), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["seed"] == 42
        assert data["summary"]["employees"] == 3
        assert len(data["reports"]) == 3
        assert data["warnings"] == []

    def test_seed_override_and_output(self, request_file, tmp_path, capsys):
        out_path = tmp_path / "plan.json"
        assert main(["--input", str(request_file), "--seed", "7", "--output", str(out_path), "--json"]) == 0
        capsys.readouterr()
        assert json.loads(out_path.read_text(encoding="utf-8"))["seed"] == 7

    def test_grid(self, request_file, capsys):
        assert main(["--input", str(request_file), "--grid"]) == 0
        out = capsys.readouterr().out
        assert "holiday" in out
        assert "vacation" in out

    def test_invalid_input_exit_code(self, request_payload, tmp_path, capsys):
        request_payload["week_start"] = "2026-01-21"
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(request_payload), encoding="utf-8")
        assert main(["--input", str(path)]) == 2
        assert "Invalid input" in capsys.readouterr().out

    def test_unreadable_input_exit_code(self, tmp_path, capsys):
        assert main(["--input", str(tmp_path / "nope.json")]) == 2
        assert "Invalid input" in capsys.readouterr().out

    def test_log_file(self, request_file, tmp_path, capsys):
        log_file = tmp_path / "logs" / "run.log"
        assert main(["--input", str(request_file), "--log-file", str(log_file), "-v", "--json"]) == 0
        capsys.readouterr()
        assert log_file.exists()
        assert "employee_allocated" in log_file.read_text(encoding="utf-8")

    def test_missing_input_flag(self):
        with pytest.raises(SystemExit):
            main([])
