"""Data models shared by the loader, resolver, scanner and reporting code."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from constants import Constants


class ScanPhase(Enum):
    """Sequential phases of a scan run."""
    LOADING_IOCS = "loading_iocs"
    RESOLVING_PATHS = "resolving_paths"
    SCANNING = "scanning"
    REPORTING = "reporting"
    DONE = "done"


class VisitOutcome(Enum):
    """Decision a tree visitor returns for each filesystem node."""
    DESCEND = "descend"
    SKIP_SUBTREE = "skip_subtree"
    RECORD = "record"


@dataclass(frozen=True)
class ManifestRecord:
    """Minimal fields read from an installed package manifest."""
    name: Optional[str]
    version: Optional[str]

    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.version)


@dataclass(frozen=True)
class MatchRecord:
    """An installed package whose name and version appear in the IOC set."""
    name: str
    version: str
    directory: str

    def __str__(self) -> str:
        return f"{Constants.MATCH_PREFIX} {self.name}@{self.version}: {self.directory}"

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version, "directory": self.directory}


@dataclass
class ScanResult:
    """Matches found under one root plus a soft error if the walk could not start."""
    root: str
    matches: List[MatchRecord] = field(default_factory=list)
    error: Optional[str] = None
    skipped: bool = False
    manifests_checked: int = 0
