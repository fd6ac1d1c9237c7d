"""Per-item results and the aggregated run summary."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Outcome(str, Enum):
    MIGRATED = "migrated"
    NOOP = "noop"
    SKIPPED = "skipped"
    FAILED = "failed"


class Phase(str, Enum):
    DATABASE = "database"
    SESSIONS = "sessions"
    USER_DATA = "user_data"


@dataclass
class MigrationResult:
    """Outcome of one unit of work: a table, a session folder or a data entry."""
    phase: Phase
    name: str
    outcome: Outcome
    changed: int = 0
    found: List[str] = field(default_factory=list)
    detail: Optional[str] = None

    @classmethod
    def migrated(cls, phase: Phase, name: str, changed: int = 1, found: List[str] = None) -> "MigrationResult":
        return cls(phase, name, Outcome.MIGRATED, changed=changed, found=list(found or []))

    @classmethod
    def noop(cls, phase: Phase, name: str, reason: str = None) -> "MigrationResult":
        return cls(phase, name, Outcome.NOOP, detail=reason)

    @classmethod
    def skipped(cls, phase: Phase, name: str, reason: str) -> "MigrationResult":
        return cls(phase, name, Outcome.SKIPPED, detail=reason)

    @classmethod
    def failed(cls, phase: Phase, name: str, error: str, found: List[str] = None) -> "MigrationResult":
        return cls(phase, name, Outcome.FAILED, found=list(found or []), detail=error)

    @property
    def is_warning(self) -> bool:
        return self.outcome in (Outcome.SKIPPED, Outcome.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "phase": self.phase.value,
            "name": self.name,
            "outcome": self.outcome.value,
            "changed": self.changed,
        }
        if self.found:
            data["found"] = self.found
        if self.detail:
            data["detail"] = self.detail
        return data


@dataclass
class MigrationSummary:
    """Everything a run did, in the order it was done."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    results: List[MigrationResult] = None
    notes: Dict[str, str] = None

    def __post_init__(self):
        if self.results is None:
            self.results = []
        if self.notes is None:
            self.notes = {}

    def for_phase(self, phase: Phase) -> List[MigrationResult]:
        return [r for r in self.results if r.phase == phase]

    @property
    def rows_changed(self) -> int:
        return sum(r.changed for r in self.for_phase(Phase.DATABASE) if r.outcome == Outcome.MIGRATED)

    @property
    def sessions_renamed(self) -> int:
        return sum(1 for r in self.for_phase(Phase.SESSIONS) if r.outcome == Outcome.MIGRATED)

    @property
    def files_copied(self) -> int:
        return sum(1 for r in self.for_phase(Phase.USER_DATA) if r.outcome == Outcome.MIGRATED)

    @property
    def warnings(self) -> List[MigrationResult]:
        return [r for r in self.results if r.is_warning]

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for serialization."""
        data = {
            "started_at": self.started_at.isoformat(),
            "rows_changed": self.rows_changed,
            "sessions_renamed": self.sessions_renamed,
            "files_copied": self.files_copied,
            "warnings": len(self.warnings),
            "results": [r.to_dict() for r in self.results],
            "notes": self.notes,
        }
        if self.completed_at:
            data["completed_at"] = self.completed_at.isoformat()
        return data
