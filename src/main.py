"""Entry point for the CCD tax export.

Usage:
    python -m src.main -a <account> [-a <account> ...] [--output rows.csv]
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from config.settings import settings
from src.export.csv_writer import write_rows, write_rows_to_path
from src.ledger.pipeline import ExportResult, run_export
from src.parsers.wallet_proxy.client import WalletProxyClient
from src.utils.logger import setup_logger


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export Concordium account history as tax-reporting CSV rows"
    )
    parser.add_argument(
        "-a", "--account", dest="accounts", action="append", required=True,
        help="Owned account address (repeat for several accounts)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="CSV file (default: stdout)"
    )
    parser.add_argument(
        "--limit", type=_positive_int, default=settings.page_limit,
        help="Transactions per wallet-proxy request",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    return parser.parse_args(argv)


def exit_status(result: ExportResult, accounts: Sequence[str]) -> int:
    """0 if at least one account was drained, 1 if every account failed."""
    if len(result.failed_accounts) >= len(set(accounts)):
        return 1
    return 0


async def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logger(json_logs=settings.json_logs, level=args.log_level)
    logger.info(
        f"Exporting {len(args.accounts)} accounts from {settings.wallet_proxy_url}"
    )

    async with WalletProxyClient(
        base_url=settings.wallet_proxy_url,
        max_rps=settings.wallet_proxy_max_rps,
        timeout=settings.wallet_proxy_timeout_sec,
    ) as client:
        result = await run_export(
            client,
            args.accounts,
            limit=args.limit,
            currency=settings.export_currency,
            concurrency=settings.fetch_concurrency,
        )

    if args.output is not None:
        write_rows_to_path(result.rows, args.output)
    else:
        write_rows(result.rows, sys.stdout)

    if result.is_partial:
        logger.warning(
            f"Partial export: {result.skipped_count} transactions skipped, "
            f"failed accounts: {sorted(result.failed_accounts) or 'none'}"
        )
    return exit_status(result, args.accounts)


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
