"""
Logging utility functions for graph construction and analysis.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from cadastre_graph.config import settings


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    log_file: Optional[Union[str, Path]] = None,
    level: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days"
):
    """
    Route cadastre_graph logging to stderr and, optionally, a rotating file.

    Args:
        log_file: Path to log file (defaults to CADASTRE_LOG_FILE, none if unset)
        level: Log level (defaults to CADASTRE_LOG_LEVEL)
        rotation: Log rotation setting
        retention: Log retention setting

    Returns:
        Logger instance
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip"
        )

    return logger


def log_graph_summary(summary, logger_instance=None) -> None:
    """
    Log vertex and edge counts of both graphs.

    Args:
        summary: GraphSummary to report
        logger_instance: Logger to use (defaults to module logger)
    """
    log = logger_instance or logger

    log.info("=== Graph Summary ===")
    log.info(f"  Parcels: {summary.parcel_count:,}")
    log.info(f"  Parcel adjacencies: {summary.parcel_edge_count:,}")
    log.info(f"  Owners with neighbours: {summary.owner_count:,}")
    log.info(f"  Owner adjacencies: {summary.owner_edge_count:,}")

    if summary.parcel_count > 0:
        avg_degree = 2 * summary.parcel_edge_count / summary.parcel_count
        log.info(f"  Average parcel degree: {avg_degree:.2f}")


class ProgressLogger:
    """
    Percentage progress of a scan that checks items and counts hits.

    Messages go out at debug level, e.g.
    "Adjacency scan: 40% (400/1,000 pairs, 12 adjacent)".
    """

    def __init__(
        self,
        total: int,
        description: str = "Scan",
        unit: str = "items",
        matched_label: str = "matched",
        log_every: int = 10,
        logger_instance=None
    ):
        self.total = total
        self.description = description
        self.unit = unit
        self.matched_label = matched_label
        self.log_every = log_every
        self.log = logger_instance or logger
        self.current = 0
        self.matched = 0
        self.last_logged_pct = -log_every

    def update(self, n: int = 1, matched: int = 0) -> None:
        """Record n checked items, matched of which were hits."""
        self.current += n
        self.matched += matched
        pct = (self.current / self.total * 100) if self.total > 0 else 100

        if pct >= self.last_logged_pct + self.log_every:
            self.log.debug(
                f"{self.description}: {pct:.0f}% "
                f"({self.current:,}/{self.total:,} {self.unit}, {self.matched:,} {self.matched_label})"
            )
            self.last_logged_pct = int(pct / self.log_every) * self.log_every

    def finish(self) -> None:
        self.log.debug(
            f"{self.description}: {self.current:,} {self.unit} checked, "
            f"{self.matched:,} {self.matched_label}"
        )
