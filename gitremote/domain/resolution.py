"""
Result objects for batch resolution across many repositories.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class ResolutionStatus(Enum):
    """Outcome of resolving one repository."""
    SUCCESS = "success"
    PARTIAL = "partial"   # One query answered, the other failed
    FAILED = "failed"


@dataclass
class RepoResolution:
    """
    What was learned about one repository.

    A query that was not requested leaves its field as None; a query that
    failed records its message under `errors` keyed by query name.
    """
    repo: str
    prefix: str = ""
    default_branch: Optional[str] = None
    latest_tag: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    error_types: Dict[str, str] = field(default_factory=dict)
    requested: List[str] = field(default_factory=list)

    @property
    def status(self) -> ResolutionStatus:
        if not self.errors:
            return ResolutionStatus.SUCCESS
        if len(self.errors) < len(self.requested):
            return ResolutionStatus.PARTIAL
        return ResolutionStatus.FAILED

    def record_error(self, query: str, exc: Exception) -> None:
        self.errors[query] = str(exc)
        self.error_types[query] = type(exc).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            'repo': self.repo,
            'status': self.status.value,
        }
        if self.prefix:
            result['prefix'] = self.prefix
        if 'default_branch' in self.requested:
            result['default_branch'] = self.default_branch
        if 'latest_tag' in self.requested:
            result['latest_tag'] = self.latest_tag
        if self.errors:
            result['errors'] = dict(self.errors)
            result['error_types'] = dict(self.error_types)
        return result


@dataclass
class ResolutionSummary:
    """Counts for a batch run."""
    total: int = 0
    successful: int = 0
    partial: int = 0
    failed: int = 0
    details: List[RepoResolution] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if every repository resolved completely."""
        return self.partial == 0 and self.failed == 0

    def add(self, resolution: RepoResolution) -> None:
        self.details.append(resolution)
        self.total += 1
        status = resolution.status
        if status == ResolutionStatus.SUCCESS:
            self.successful += 1
        elif status == ResolutionStatus.PARTIAL:
            self.partial += 1
        else:
            self.failed += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'successful': self.successful,
            'partial': self.partial,
            'failed': self.failed,
        }
