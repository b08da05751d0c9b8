"""Data models for TransVi."""

from dataclasses import dataclass, field
from typing import Any, List

# Length of one audio segment. The splitter cuts at this length and the merger
# offsets fragment timestamps by it, so both must read it from here.
SEGMENT_SECONDS = 30

@dataclass
class Segment:
    """One fixed-length slice of the source audio and where its subtitles go."""
    ordinal: int
    input_path: str
    output_path: str

    @property
    def offset_ms(self) -> int:
        return segment_offset_ms(self.ordinal)

@dataclass
class SubtitleEntry:
    """A single subtitle block. Times are whole milliseconds so equal starts compare equal."""
    index: int
    start_ms: int
    end_ms: int
    text: str

@dataclass
class TaskFailure:
    """A worker task that raised, paired with the item it was processing."""
    item: Any
    error: BaseException

@dataclass
class PoolResult:
    """Outcome of a worker pool run."""
    total: int
    failures: List[TaskFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

def segment_offset_ms(ordinal: int) -> int:
    """Start of segment `ordinal` (1-based) in whole-track milliseconds."""
    return (ordinal - 1) * SEGMENT_SECONDS * 1000
