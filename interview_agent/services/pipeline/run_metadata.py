"""Run metadata tracking for the interview table pipeline."""

import time
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from interview_agent.core.config import PipelineConfig


class StageOutcome(str, Enum):
    OK = "ok"
    ABSENT = "absent"      # completion failed or answer unusable
    TIMEOUT = "timeout"    # Timeout Guard fired
    SKIPPED = "skipped"    # an input from an earlier stage was absent


class RunMetadata:
    """
    Encapsulates run metadata.

    Responsibilities:
    - Track per-stage outcome and duration
    - Manage run state
    - Format metadata for logging or API responses
    """

    def __init__(self, run_id: str, config: PipelineConfig):
        """
        Initialize run metadata.

        Args:
            run_id: Correlation id of the run
            config: Configuration the run was started with
        """
        self.run_id = run_id
        self.timestamp = datetime.now().isoformat()
        self.status = "running"
        self.stages: List[Dict[str, Any]] = []
        self.errors: List[Dict[str, Any]] = []
        self.start_time = time.perf_counter()
        self.config = {
            "model": config.model,
            "structured_output": config.structured_output,
            "failure_policy": config.failure_policy,
            "agent_timeout": config.agent_timeout,
            "stage_delay": config.stage_delay,
        }

    def record_stage(self, stage: str, outcome: StageOutcome, duration: float = 0.0) -> None:
        self.stages.append({
            "stage": stage,
            "outcome": outcome.value,
            "duration_seconds": round(duration, 2),
        })

    def stage_outcome(self, stage: str) -> Optional[StageOutcome]:
        for entry in self.stages:
            if entry["stage"] == stage:
                return StageOutcome(entry["outcome"])
        return None

    def add_error(self, stage: str, error: str) -> None:
        self.errors.append({"stage": stage, "error": error})

    def mark_success(self) -> None:
        """Mark run as successful (a table was produced, possibly partial)."""
        self.status = "success"

    def mark_failed(self) -> None:
        """Mark run as failed (no table)."""
        self.status = "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "status": self.status,
            "stages": self.stages,
            "errors": self.errors,
            "duration_seconds": round(time.perf_counter() - self.start_time, 2),
            "config": self.config,
        }
