"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Workflow runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _optional_positive_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip() or raw.strip() == "0":
        return None
    return int(raw)


def _flag(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class WorkflowSettings:
    """Explicit settings used by the parallel scheduler and sequential runner."""

    operation_timeout_s: float | None = 300.0
    max_parallelism: int | None = None
    max_rounds: int = 20
    cancel_on_failure: bool = True
    follow_up_prompt: str = "continue"

    def __post_init__(self) -> None:
        if self.operation_timeout_s is not None and self.operation_timeout_s <= 0:
            raise ValueError("operation_timeout_s must be > 0")
        if self.max_parallelism is not None and self.max_parallelism < 1:
            raise ValueError("max_parallelism must be >= 1")
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be >= 1")

    @staticmethod
    def from_env() -> "WorkflowSettings":
        """Load settings from environment variables."""
        return WorkflowSettings(
            operation_timeout_s=float(os.getenv("TOOLGRAPH_OPERATION_TIMEOUT_S", "300")),
            max_parallelism=_optional_positive_int(os.getenv("TOOLGRAPH_MAX_PARALLELISM")),
            max_rounds=int(os.getenv("TOOLGRAPH_MAX_ROUNDS", "20")),
            cancel_on_failure=_flag(os.getenv("TOOLGRAPH_CANCEL_ON_FAILURE"), True),
            follow_up_prompt=os.getenv("TOOLGRAPH_FOLLOW_UP_PROMPT", "continue"),
        )
