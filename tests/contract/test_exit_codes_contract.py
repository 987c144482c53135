from __future__ import annotations

from pathlib import Path

import pytest

from cellmark.cli import main as cli_main
from cellmark.cli.__main__ import EXIT_ANOMALIES, EXIT_FATAL, EXIT_SUCCESS
from cellmark.excel.writer import WorkbookEncodeError
from cellmark.logging.init import reset_logging

"""Exit code contract: 0 success, 1 fatal (config/open/save), 2 recovered anomalies."""


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def test_exit_code_values():
    assert (EXIT_SUCCESS, EXIT_FATAL, EXIT_ANOMALIES) == (0, 1, 2)


def test_exit_code_success(sample_xlsx: Path):
    assert cli_main([str(sample_xlsx)]) == EXIT_SUCCESS


def test_exit_code_unreadable_input(temp_workdir: Path, capsys):
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"\x00\x01not a workbook")
    assert cli_main([str(bad)]) == EXIT_FATAL
    assert "ERROR open:" in capsys.readouterr().out


def test_exit_code_config_error(sample_xlsx: Path, temp_workdir: Path, capsys):
    cfg = temp_workdir / "config" / "broken.yml"
    cfg.write_text("search_debounce_ms: -5\n", encoding="utf-8")
    assert cli_main([str(sample_xlsx), "--config", str(cfg)]) == EXIT_FATAL
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_save_error(sample_xlsx: Path, temp_workdir: Path, monkeypatch, capsys):
    def fail(*args, **kwargs):
        raise WorkbookEncodeError("read-only filesystem")

    monkeypatch.setattr("cellmark.services.orchestrator.write_sheets", fail)
    assert cli_main([str(sample_xlsx)]) == EXIT_FATAL
    assert "ERROR save: read-only filesystem" in capsys.readouterr().out


def test_no_save_and_output_are_exclusive(sample_xlsx: Path):
    with pytest.raises(SystemExit):
        cli_main([str(sample_xlsx), "--no-save", "--output", "x.xlsx"])
