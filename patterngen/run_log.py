"""JSONL logging of generation statistics, one directory per run."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional


def _default_run_name() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")


class RunLogger:
    """Appends scalar records to ``<log_dir>/<run_name>/events.jsonl``."""

    def __init__(self, log_dir: Path | str, run_name: Optional[str] = None) -> None:
        self.base_dir = Path(log_dir)
        self.run_name = run_name or _default_run_name()
        self.run_dir = self.base_dir / self.run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.run_dir / "events.jsonl"
        self._handle = self.log_path.open("a", encoding="utf-8")

    # ------------------------------------------------------------------ API
    def log_scalar(self, tag: str, value: float, step: Optional[int] = None) -> None:
        record = {
            "type": "scalar",
            "tag": tag,
            "value": float(value),
            "step": step,
            "timestamp": time.time(),
        }
        self._handle.write(json.dumps(record) + "\n")
        self._handle.flush()

    def log_scalars(self, main_tag: str, values: Mapping[str, float], step: Optional[int] = None) -> None:
        for key, val in values.items():
            self.log_scalar(f"{main_tag}/{key}", val, step)

    def flush(self) -> None:
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()

    # Context manager support ----------------------------------------------
    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_run_logger(log_dir: Path | str, *, run_name: Optional[str] = None) -> RunLogger:
    return RunLogger(log_dir=log_dir, run_name=run_name)


__all__ = ["RunLogger", "create_run_logger"]
