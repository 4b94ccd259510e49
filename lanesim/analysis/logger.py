# Logging setup and per-generation metric sinks

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

LOGGER_NAME = "lanesim"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: Optional[str] = None) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the ``lanesim`` logger.

    Calling it again replaces the previous handlers, so repeated runs in
    one process do not duplicate output.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives everything from DEBUG up

    Returns:
        The package logger
    """
    console_level = logging.getLevelName(level.upper())
    if not isinstance(console_level, int):
        raise ValueError(f"Unknown logging level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.setLevel(console_level)

    logger.addHandler(_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S"))

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file), logging.DEBUG, FILE_FORMAT))

    return logger


class MetricsLogger:
    """Append one CSV row per generation; dump the full history as JSON on request."""

    def __init__(self, log_dir: Path):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.log_dir / "metrics.csv"
        self.json_path = self.log_dir / "metrics.json"

        self.history: List[Dict[str, Any]] = []
        self._columns: List[str] = []

    def log(self, generation: int, metrics: Dict[str, float]) -> None:
        row = {"generation": generation, "timestamp": datetime.now().isoformat()}
        row.update(metrics)
        self.history.append(row)

        new_file = not self._columns
        if new_file:
            # Columns are fixed by the first generation
            self._columns = list(row)

        with open(self.csv_path, "w" if new_file else "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self._columns, extrasaction="ignore")
            if new_file:
                writer.writeheader()
            writer.writerow(row)

    def save_summary(self) -> None:
        self.json_path.write_text(json.dumps(self.history, indent=2))

    def get_metric_series(self, metric_name: str) -> List[float]:
        return [row[metric_name] for row in self.history if metric_name in row]

    def get_latest(self, metric_name: str) -> Optional[float]:
        series = self.get_metric_series(metric_name)
        return series[-1] if series else None


class ExperimentLogger:
    """One training run: ``<base_dir>/<timestamp>_<name>/{logs,checkpoints}``."""

    def __init__(
        self,
        experiment_name: str,
        base_dir: Path = Path("experiments"),
        level: str = "INFO",
    ):
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.experiment_dir = Path(base_dir) / f"{stamp}_{experiment_name}"
        self.logs_dir = self.experiment_dir / "logs"
        self.checkpoints_dir = self.experiment_dir / "checkpoints"
        for directory in (self.logs_dir, self.checkpoints_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.logger = setup_logging(level, self.logs_dir / "train.log")
        self.metrics = MetricsLogger(self.logs_dir)

    def save_config(self, config: Dict[str, Any]) -> None:
        with open(self.experiment_dir / "config.yaml", "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    def log_metrics(self, generation: int, metrics: Dict[str, float]) -> None:
        self.metrics.log(generation, metrics)
