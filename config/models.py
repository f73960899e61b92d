"""Configuration and result models for the description matching system."""

from dataclasses import dataclass
from typing import Optional, Union
from enum import Enum
from multiprocessing import cpu_count

class ExclusionPolicy(str, Enum):
    """Which candidates a source record may never be matched with."""
    NONE = "none"
    EXCLUDE_SAME_INDEX = "exclude_same_index"
    EXCLUDE_SAME_ID = "exclude_same_id"

    @classmethod
    def coerce(cls, value: Union[str, "ExclusionPolicy"]) -> "ExclusionPolicy":
        """Accept enum members and their string values alike."""
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Exclusion policy must not be None")
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ', '.join(member.value for member in cls)
            raise ValueError(
                f"Unknown exclusion policy: {value!r} (expected one of {allowed})"
            ) from None

@dataclass(frozen=True)
class Record:
    """A single identifier/description pair taken from a sheet."""
    id: str
    description: str

@dataclass(frozen=True)
class MatchResult:
    """Best match found for one source record."""
    source_id: str
    source_description: str
    match_id: str
    match_description: str
    similarity: float  # percentage, rounded to 2 decimals

@dataclass(frozen=True)
class MatchConfig:
    """Configuration for a matching run."""
    exclusion_policy: Optional[ExclusionPolicy] = None
    min_similarity: float = 0.0
    worker_threads: int = 1
    chunk_rows: int = 512  # source rows scored per block
    log_significant_terms: int = 0  # 0 disables term logging

    def __post_init__(self):
        """Normalise the policy and thread count."""
        if self.exclusion_policy is not None:
            object.__setattr__(
                self,
                'exclusion_policy',
                ExclusionPolicy.coerce(self.exclusion_policy)
            )
        if not -1.0 <= self.min_similarity <= 1.0:
            raise ValueError(
                f"min_similarity must be within [-1, 1], got {self.min_similarity}"
            )
        if self.chunk_rows < 1:
            raise ValueError(f"chunk_rows must be positive, got {self.chunk_rows}")
        object.__setattr__(
            self,
            'worker_threads',
            self.worker_threads if self.worker_threads > 0 else cpu_count()
        )

    def policy_for(self, self_set: bool) -> ExclusionPolicy:
        """Policy to apply, defaulting by operating mode."""
        if self.exclusion_policy is not None:
            return self.exclusion_policy
        return ExclusionPolicy.EXCLUDE_SAME_INDEX if self_set else ExclusionPolicy.NONE

@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for locating record columns in a sheet."""
    id_column: str = 'id'
    description_column: str = 'description'
    case_insensitive: bool = True
    sheet_name: Union[int, str] = 0
