import os
import sys

from loguru import logger


def setup_logger(*, json_logs: bool = False, level: str = "INFO") -> None:
    """Configure loguru for the exporter.

    The CSV is written to stdout, so every console record goes to stderr and
    `ccd-export ... > rows.csv` captures rows only.
    Console level controlled by LOG_LEVEL env (default: INFO); modules tag
    their lines with `[WALLET_PROXY]`, `[LEDGER]` or `[EXPORT]`.
    json_logs switches both sinks to structured records for log shippers.
    The daily file sink keeps DEBUG page traffic (cursor, count, limit per
    request) so a short or stalled pagination can be traced after the run.
    """

    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    logger.add(
        "logs/ccd_export_{time:YYYY-MM-DD}.log",
        rotation="10 MB",
        retention="7 days",
        compression="gz",
        level="DEBUG",
        serialize=json_logs,
    )
