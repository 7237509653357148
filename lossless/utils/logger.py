"""
Logging for the lossless auction.

All loggers hang off the "lossless" root, one per subsystem:

    lossless.auction   - accepted bids, refunds, finalization, withdrawals,
                         and every rejected operation (WARNING)
    lossless.custody   - value entering and leaving custody accounts
    lossless.accounts  - transfers, failed payments, receive hook failures
    lossless.ledger    - recorded deposits
    lossless.clock     - wall clock stepping backwards
    lossless.events    - subscribers that raised
    lossless.cli       - command line entry point

Modules grab their logger at import time, which installs a default INFO
console setup. The CLI then calls setup_logging() with the configured level
and file options, replacing that default.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

LOG_FILE_NAME = "lossless.log"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LosslessLogger:
    """Owns the handlers of the "lossless" logger tree"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Install console (and optionally file) handlers on "lossless".

        Args:
            level: Threshold for the whole tree; WARNING keeps only rejected
                operations and failed payments
            log_dir: Directory for lossless.log. If None, uses ./logs
            log_to_file: Also write uncolored lines to lossless.log
            force: Reconfigure even if logging was already set up
        """
        if cls._initialized and not force:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger("lossless")
        root_logger.setLevel(level)
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()

        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s" + LOG_FORMAT.replace(" %(message)s", "%(reset)s %(message)s"),
                datefmt=DATE_FORMAT,
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            )
        )
        root_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / LOG_FILE_NAME)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Logger for one auction subsystem.

        Args:
            name: Subsystem name ('auction', 'custody', 'accounts', ...)

        Returns:
            The "lossless.<name>" logger
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"lossless.{name}")


def get_logger(name: str) -> logging.Logger:
    """Logger for one auction subsystem"""
    return LosslessLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Apply the configured logging, replacing the import-time default"""
    LosslessLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file, force=True)
