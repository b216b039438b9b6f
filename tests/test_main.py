"""Tests for main.py helper functions."""
import os
from datetime import date
from pathlib import Path
from unittest.mock import patch, AsyncMock, MagicMock
import pytest


def test_check_sheets_config_configured():
    """Test the config check passes when URL and sheet id are set."""
    from main import check_sheets_config
    from src.config.settings import Settings
    from src.sheets import SheetsSettings

    settings = Settings(
        sheets=SheetsSettings(script_url="https://script.example/exec", sheet_id="sheet-1")
    )

    assert check_sheets_config(settings) is True


def test_check_sheets_config_missing_sheet_id(caplog):
    """Test the config check warns instead of exiting when unconfigured."""
    from main import check_sheets_config
    from src.config.settings import Settings
    from src.sheets import SheetsSettings

    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(sheets=SheetsSettings(script_url="https://script.example/exec"))

    assert check_sheets_config(settings) is False
    assert "Google Sheets not configured" in caplog.text


def test_load_and_validate_config_credentials_from_yaml(tmp_path):
    """Test credentials in the config file work with an empty environment."""
    from main import check_sheets_config, load_and_validate_config

    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        "journal:\n"
        f"  export_dir: {tmp_path / 'exports'}\n"
        "sheets:\n"
        "  script_url: https://script.example/exec\n"
        "  sheet_id: abc\n"
    )

    with patch.dict(os.environ, {}, clear=True):
        settings = load_and_validate_config(config_file)

    assert settings.sheets.script_url == "https://script.example/exec"
    assert settings.sheets.sheet_id == "abc"
    assert check_sheets_config(settings) is True


def test_load_and_validate_config_without_credentials(tmp_path):
    """Test a config without credentials still loads."""
    from main import load_and_validate_config

    config_file = tmp_path / "settings.yaml"
    config_file.write_text(f"journal:\n  export_dir: {tmp_path / 'exports'}\n")

    with patch.dict(os.environ, {}, clear=True):
        settings = load_and_validate_config(config_file)

    assert settings.sheets.is_configured is False


def test_create_data_dirs(tmp_path):
    """Test export directory creation."""
    from main import create_data_dirs
    from src.config.settings import Settings
    from src.journal.settings import JournalSettings

    settings = Settings(journal=JournalSettings(export_dir=str(tmp_path / "data" / "exports")))
    create_data_dirs(settings)

    assert (tmp_path / "data" / "exports").exists()


def test_load_and_validate_config_success(tmp_path):
    """Test successful config loading and validation."""
    from main import load_and_validate_config

    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        "system:\n"
        "  name: Test Journal\n"
        "journal:\n"
        f"  export_dir: {tmp_path / 'exports'}\n"
    )

    with patch.dict(os.environ, {
        "GOOGLE_SCRIPT_URL": "https://script.example/exec",
        "GOOGLE_SHEET_ID": "sheet-1",
    }, clear=True):
        settings = load_and_validate_config(config_file)

        assert settings.system.name == "Test Journal"
        assert settings.sheets.sheet_id == "sheet-1"
        assert (tmp_path / "exports").exists()


def test_load_and_validate_config_missing_file(tmp_path):
    """Test config loading fails when the YAML file is missing."""
    from main import load_and_validate_config

    with patch.dict(os.environ, {
        "GOOGLE_SCRIPT_URL": "https://script.example/exec",
        "GOOGLE_SHEET_ID": "sheet-1",
    }):
        with pytest.raises(SystemExit):
            load_and_validate_config(tmp_path / "missing.yaml")


def test_load_and_validate_config_invalid_yaml(tmp_path):
    """Test config loading fails on invalid settings."""
    from main import load_and_validate_config

    config_file = tmp_path / "settings.yaml"
    config_file.write_text("proxy:\n  port: -1\n")

    with patch.dict(os.environ, {
        "GOOGLE_SCRIPT_URL": "https://script.example/exec",
        "GOOGLE_SHEET_ID": "sheet-1",
    }):
        with pytest.raises(SystemExit):
            load_and_validate_config(config_file)


def test_initialize_journal():
    """Test journal creation uses the configured transport."""
    from main import initialize_journal
    from src.config.settings import Settings
    from src.journal import JournalManager
    from src.sheets import SheetsSettings

    settings = Settings(
        sheets=SheetsSettings(script_url="https://script.example/exec", sheet_id="s", mode="proxy")
    )

    journal = initialize_journal(settings)

    assert isinstance(journal, JournalManager)


def test_parse_args_export():
    from main import parse_args

    args = parse_args(["export", "trades.json", "--format", "json"])

    assert args.command == "export"
    assert args.filename == "trades.json"
    assert args.format == "json"


def test_parse_args_defaults_to_report():
    from main import parse_args

    args = parse_args([])

    assert args.command is None
    assert args.config == Path("config/settings.yaml")


def test_format_report():
    from main import format_report
    from src.journal.models import AnalyticsReport, StrategyPerformance, TradingMetrics

    metrics = TradingMetrics(
        total_trades=2, winning_trades=1, losing_trades=1,
        total_pnl=50.0, win_rate=0.5, avg_win=100.0, avg_loss=-50.0,
        profit_factor=2.0, max_drawdown=50.0, best_trade=None, worst_trade=None,
    )
    report = AnalyticsReport(
        metrics=metrics,
        strategies=[StrategyPerformance(strategy="Breakout", trades=2, pnl=50.0, win_rate=0.5)],
    )

    lines = format_report(report)

    assert "Win rate:       50.0%" in lines
    assert "Profit factor:  2.00" in lines
    assert lines[-1] == "  Breakout: 2 trades, P&L 50.00, win rate 50.0%"


@pytest.mark.asyncio
async def test_run_report_queries_journal():
    from main import run_report
    from src.journal.models import AnalyticsReport, DaySummary, TradingMetrics

    journal = MagicMock()
    journal.get_analytics = AsyncMock(return_value=AnalyticsReport(
        metrics=TradingMetrics(0, 0, 0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, None, None)
    ))
    journal.get_daily_summary = AsyncMock(return_value=DaySummary(day=date.today(), count=0, pnl=0.0))

    await run_report(journal)

    journal.get_analytics.assert_awaited_once()
    journal.get_daily_summary.assert_awaited_once_with(date.today())


def test_main_exits_on_sheets_error(tmp_path):
    from main import main
    from src.sheets import TransportError

    journal = MagicMock()
    journal.get_analytics = AsyncMock(side_effect=TransportError("Network error"))

    with patch("main.load_and_validate_config") as load_config, \
            patch("main.initialize_journal", return_value=journal):
        load_config.return_value = MagicMock()
        with pytest.raises(SystemExit) as exc_info:
            main(["report"])

    assert exc_info.value.code == 1


def test_main_export_exits_when_unconfigured():
    from main import main

    settings = MagicMock()
    settings.sheets.is_configured = False

    with patch("main.load_and_validate_config", return_value=settings), \
            patch("main.initialize_journal") as initialize:
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "trades.csv"])

    assert exc_info.value.code == 1
    initialize.assert_not_called()


def test_main_report_runs_when_unconfigured():
    from main import main

    settings = MagicMock()
    settings.sheets.is_configured = False

    with patch("main.load_and_validate_config", return_value=settings), \
            patch("main.initialize_journal") as initialize, \
            patch("main.run_report", new=AsyncMock()) as run_report:
        main(["report"])

    initialize.assert_called_once_with(settings)
    run_report.assert_awaited_once()
