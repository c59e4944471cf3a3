from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple


@dataclass(frozen=True)
class ImageStatistics:
    """Normalized luma statistics of one source image."""

    mean: float
    stddev: float
    source_path: Path


class StrategyKind(enum.Enum):
    DARK_RESCUE = "dark_rescue"
    LOCAL_ENHANCE = "local_enhance"
    NONE = "none"
    FIXED_STRETCH = "fixed_stretch"


@dataclass(frozen=True)
class EnhancementStep:
    name: str
    params: Tuple[Tuple[str, Any], ...] = ()

    @property
    def kwargs(self) -> dict[str, Any]:
        return dict(self.params)


@dataclass(frozen=True)
class EnhancementStrategy:
    kind: StrategyKind
    label: str
    steps: Tuple[EnhancementStep, ...] = ()


class OutcomeStatus(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class ProcessingOutcome:
    source_path: Path
    status: OutcomeStatus
    statistics: Optional[ImageStatistics] = None
    strategy_label: Optional[str] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate of every outcome in a batch, ordered by source filename."""

    outcomes: Tuple[ProcessingOutcome, ...] = field(default_factory=tuple)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[ProcessingOutcome]) -> "BatchSummary":
        ordered = sorted(outcomes, key=lambda outcome: outcome.source_path.name)
        return cls(outcomes=tuple(ordered))

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def output_names(self) -> Tuple[str, ...]:
        return tuple(outcome.output_path.name for outcome in self.outcomes if outcome.output_path)
