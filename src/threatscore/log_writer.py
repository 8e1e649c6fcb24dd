"""
Logging system for the threat scoring engine.

This module provides structured logging that separates the complete
activity log from the record of detected threats.
"""

# src/threatscore/log_writer.py
import json
import logging
import os
import pathlib
import threading
from collections import Counter, deque
from datetime import datetime, timezone
from typing import Any, Dict, List

logger = logging.getLogger("threatscore")

RUN_LOG = "run.log"
DETECTION_LOG = "detections.log"
SEVERITIES = ("critical", "high", "medium", "low", "info")


def configure_logging(log_dir: str = "logs", level: int = logging.INFO) -> None:
    """
    Send the package's activity log to <log_dir>/run.log.

    Called once by the API server and the command line; library users who
    configure logging themselves can skip it.

    Args:
        log_dir: Directory for run.log; created if missing
        level: Minimum level written to run.log
    """
    pathlib.Path(log_dir).mkdir(parents=True, exist_ok=True)
    run_log = os.path.abspath(pathlib.Path(log_dir) / RUN_LOG)

    for handler in logger.handlers:
        if getattr(handler, "baseFilename", None) == run_log:
            return

    handler = logging.FileHandler(run_log, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


class LogWriter:
    """
    Handles dual-purpose logging for the threat scoring engine.

    This class manages two types of output:
    1. Activity log - every verdict, through the "threatscore" logger
    2. Detection log (NDJSON) - only verdicts with a threat level above 0

    The logging strategy ensures that:
    - Operators see high and critical threats as warnings
    - Benign events stay at debug level and do not spam the log
    - Detected threats are kept as structured data for automated analysis

    Attributes:
        path: Path to the NDJSON detection log file

    Example:
        >>> writer = LogWriter("logs/detections.log")
        >>> writer.write(verdict)
        >>> writer.get_stats()["total_detections"]
        1
    """

    def __init__(self, path: str) -> None:
        """
        Initialize the LogWriter.

        Args:
            path: File path for the NDJSON detection log; its parent
                  directory is created if it doesn't exist
        """
        pathlib.Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self._lock = threading.Lock()

    def write(self, verdict) -> None:
        """
        Record a verdict.

        Args:
            verdict: Verdict produced by ThreatDetector
        """
        summary = (f"{verdict.rule_name} level={verdict.threat_level} "
                   f"severity={verdict.severity} event={verdict.event_id} "
                   f"type={verdict.event_type}")

        if verdict.threat and verdict.severity in ("critical", "high"):
            logger.warning("ALERT %s", summary)
        elif verdict.threat:
            logger.info("THREAT %s", summary)
        else:
            logger.debug("NORMAL %s", summary)

        if not verdict.threat:
            return

        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **verdict.to_dict(),
        }
        try:
            with self._lock, open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")  # NDJSON format
        except OSError as e:
            logger.error("Failed to write detection log: %s", e)

    def read_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Return the last records of the detection log, oldest first.

        Raises:
            ValueError: If a record in the returned window is not valid JSON
        """
        if limit <= 0:
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                lines = deque((line for line in f if line.strip()), maxlen=limit)
        except FileNotFoundError:
            return []
        return [json.loads(line) for line in lines]

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about logged detections.

        Returns:
            Dictionary with the total count and a count per severity
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = [json.loads(line) for line in f if line.strip()]
        except (OSError, json.JSONDecodeError):
            records = []

        counts = Counter(record.get("severity", "info") for record in records)
        stats = {"total_detections": len(records)}
        for severity in SEVERITIES:
            stats[severity] = counts.get(severity, 0)
        return stats
