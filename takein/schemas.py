"""
Takein Data Schemas - Single Source of Truth

All data structures shared by the analyze, execute and state layers are
defined here.
"""

from dataclasses import dataclass, field
from typing import Dict, List


# ============================================================================
# CONSTANTS
# ============================================================================

# Directory sources stop counting their files once the count exceeds this.
FILE_COUNT_CAP = 1000

# Reported instead of an exact count when the cap was exceeded.
FILE_COUNT_CAPPED = -1

# Format of the DATE variable injected into every environment map.
DATE_FORMAT = "%y%m%d"

# Key that discards its fragment, and the wildcard divider.
DISCARD_KEY = "_"
DIVIDER_KEY = "..."

METHODS = ("link", "copy")


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class IntakeConfig:
    """
    Operator settings for one intake.

    Separator and key lists are kept as the whitespace separated strings the
    operator typed; the list properties split them on demand.

    Used by: commands → analyzer.py, state/io.py
    """
    path_separators: str = "/"
    path_keys: str = "_ _ _ _ SHOW ... NAME"
    name_separators: str = ". _"
    name_keys: str = "SEQ SCENE SHOT PART VER ..."
    destination: str = "/mnt/storm/show/${SHOW}/shot/${SEQ}/${SCENE}_${SHOT}/out/"

    @property
    def path_seps(self) -> List[str]:
        return self.path_separators.split()

    @property
    def path_key_list(self) -> List[str]:
        return self.path_keys.split()

    @property
    def name_seps(self) -> List[str]:
        return self.name_separators.split()

    @property
    def name_key_list(self) -> List[str]:
        return self.name_keys.split()

    def to_dict(self) -> dict:
        return {
            "path_separators": self.path_separators,
            "path_keys": self.path_keys,
            "name_separators": self.name_separators,
            "name_keys": self.name_keys,
            "destination": self.destination,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'IntakeConfig':
        """Build from a loaded document. Unknown keys are ignored."""
        config = cls()
        for key in config.to_dict():
            value = data.get(key)
            if value is not None:
                setattr(config, key, str(value))
        return config


# ============================================================================
# ANALYZER OUTPUT (Analysis Layer → Execution Layer)
# ============================================================================

@dataclass
class SourceEntry:
    """
    An existing source path that resolved to a destination directory.

    file_count is only meaningful for directories; it holds FILE_COUNT_CAPPED
    when the directory holds more than FILE_COUNT_CAP files.
    """
    path: str
    is_dir: bool
    dest_dir: str
    file_count: int = 0
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def capped(self) -> bool:
        return self.file_count == FILE_COUNT_CAPPED

    @property
    def file_count_label(self) -> str:
        if self.capped:
            return f"{FILE_COUNT_CAP}+"
        return str(self.file_count)


@dataclass
class InvalidSource:
    """An existing source that could not be tokenized or resolved."""
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path} ({self.reason})"


@dataclass
class DestinationGroup:
    """Sources resolving to the same destination directory, in path order."""
    dest_dir: str
    exists: bool
    sources: List[SourceEntry] = field(default_factory=list)


@dataclass
class IntakePlan:
    """
    Full result of one analysis.

    Every existing, successfully resolved source appears in exactly one
    group; group keys are distinct resolved paths.
    """
    today: str
    not_found: List[str] = field(default_factory=list)
    invalid: List[InvalidSource] = field(default_factory=list)
    groups: Dict[str, DestinationGroup] = field(default_factory=dict)
    analyzed: bool = False

    @property
    def sources(self) -> List[SourceEntry]:
        """All grouped sources, sorted by path."""
        found = [s for g in self.groups.values() for s in g.sources]
        return sorted(found, key=lambda s: s.path)

    def sorted_groups(self) -> List[DestinationGroup]:
        """Groups sorted by destination path; sources keep path order."""
        return [self.groups[d] for d in sorted(self.groups)]


# ============================================================================
# EXECUTION OUTPUT
# ============================================================================

@dataclass
class MaterializedFile:
    source: str
    dest: str
    status: str  # linked | copied | skipped


@dataclass
class MaterializationReport:
    method: str
    files: Dict[str, List[MaterializedFile]] = field(default_factory=dict)

    def add(self, dest_dir: str, item: MaterializedFile):
        self.files.setdefault(dest_dir, []).append(item)

    @property
    def created(self) -> int:
        return sum(1 for items in self.files.values() for f in items if f.status != "skipped")

    @property
    def skipped(self) -> int:
        return sum(1 for items in self.files.values() for f in items if f.status == "skipped")
