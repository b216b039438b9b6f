"""Main entry point for the trading journal."""
import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from src.config.settings import Settings
from src.journal import AnalyticsReport, JournalManager
from src.sheets import GoogleSheetsClient, SheetsError
from src.sheets.proxy import create_app


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def check_sheets_config(settings: Settings) -> bool:
    """Check that the remote store has a script URL and a sheet id.

    Both may come from GOOGLE_SCRIPT_URL / GOOGLE_SHEET_ID or from the
    sheets section of the config file. Without them remote reads return no
    data and writes fail.
    """
    if settings.sheets.is_configured:
        return True

    logger.warning("Google Sheets not configured: remote reads return no data")
    logger.warning("Set GOOGLE_SCRIPT_URL and GOOGLE_SHEET_ID in .env or the sheets section of the config")
    return False


def create_data_dirs(settings: Settings) -> None:
    """Create required data directories if they don't exist."""
    Path(settings.journal.export_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Data directories verified")


def load_and_validate_config(config_path: Path = Path("config/settings.yaml")) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If config file missing or YAML parsing fails.
    """
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.system.log_level.upper())
    create_data_dirs(settings)

    return settings


def initialize_journal(settings: Settings) -> JournalManager:
    """Create the Sheets client and the journal manager on top of it."""
    client = GoogleSheetsClient(settings.sheets)
    logger.info(f"✓ Google Sheets client initialized ({client.transport.name} transport)")

    journal = JournalManager(client=client, settings=settings.journal)
    logger.info("✓ JournalManager initialized")
    return journal


def format_report(report: AnalyticsReport) -> list[str]:
    """Render an analytics report as log lines."""
    m = report.metrics
    lines = [
        f"Total trades:   {m.total_trades} ({m.winning_trades} won / {m.losing_trades} lost)",
        f"Total P&L:      {m.total_pnl:,.2f}",
        f"Win rate:       {m.win_rate:.1%}",
        f"Average win:    {m.avg_win:,.2f}",
        f"Average loss:   {m.avg_loss:,.2f}",
        f"Profit factor:  {m.profit_factor:.2f}",
        f"Max drawdown:   {m.max_drawdown:,.2f}",
    ]
    for item in report.strategies:
        lines.append(
            f"  {item.strategy}: {item.trades} trades, "
            f"P&L {item.pnl:,.2f}, win rate {item.win_rate:.1%}"
        )
    return lines


async def run_report(journal: JournalManager) -> None:
    report = await journal.get_analytics()
    logger.info("=" * 60)
    for line in format_report(report):
        logger.info(line)
    today = await journal.get_daily_summary(date.today())
    logger.info(f"Today: {today.count} trades, P&L {today.pnl:,.2f}")
    logger.info("=" * 60)


async def run_export(journal: JournalManager, filename: str, fmt: str | None) -> None:
    path = await journal.export_trades(filename, fmt)
    logger.info(f"✓ Trades written to {path}")


def run_proxy(settings: Settings) -> None:
    """Serve the development proxy until interrupted."""
    app = create_app(settings.sheets)
    logger.info(f"Starting Sheets proxy on {settings.proxy.host}:{settings.proxy.port}")
    uvicorn.run(app, host=settings.proxy.host, port=settings.proxy.port)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Google Sheets trading journal")
    parser.add_argument("--config", type=Path, default=Path("config/settings.yaml"))
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("report", help="log performance metrics")
    export = sub.add_parser("export", help="export trades to a file")
    export.add_argument("filename")
    export.add_argument("--format", choices=["csv", "json"], default=None)
    sub.add_parser("proxy", help="run the development proxy")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = load_and_validate_config(args.config)
    logger.info(f"Starting {settings.system.name} v{settings.system.version}")

    configured = check_sheets_config(settings)
    if args.command == "proxy":
        run_proxy(settings)
        return

    if args.command == "export" and not configured:
        logger.error("Export needs the remote store; refusing to write an empty snapshot")
        sys.exit(1)

    journal = initialize_journal(settings)
    try:
        if args.command == "export":
            asyncio.run(run_export(journal, args.filename, args.format))
        else:
            asyncio.run(run_report(journal))
    except SheetsError as e:
        logger.error(f"Journal request failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
