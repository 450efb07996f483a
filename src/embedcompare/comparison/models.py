"""Data models for pairwise distance comparison."""

from dataclasses import dataclass
from enum import Enum


@dataclass
class TextPair:
    """One row under comparison.

    Attributes:
        index: Stable identity of the row within a session
        query_text: Text embedded as the query side
        stored_text: Text embedded as the stored side
    """

    index: int
    query_text: str = ""
    stored_text: str = ""

    @property
    def is_complete(self) -> bool:
        """True when both texts are non-blank and the pair can be compared."""
        return bool(self.query_text.strip() and self.stored_text.strip())


class EntryState(Enum):
    """Lifecycle of one (pair, model) slot."""

    UNSET = "unset"
    PENDING = "pending"
    VALUE = "value"
    ERROR = "error"


@dataclass(frozen=True)
class DistanceEntry:
    """State of one slot in the distance matrix."""

    state: EntryState = EntryState.UNSET
    value: float | None = None
    reason: str | None = None

    @classmethod
    def pending(cls) -> "DistanceEntry":
        return cls(EntryState.PENDING)

    @classmethod
    def of(cls, value: float) -> "DistanceEntry":
        return cls(EntryState.VALUE, value=float(value))

    @classmethod
    def failed(cls, reason: str) -> "DistanceEntry":
        return cls(EntryState.ERROR, reason=reason)

    @property
    def has_value(self) -> bool:
        return self.state is EntryState.VALUE


UNSET = DistanceEntry()


@dataclass(frozen=True)
class BoxPlotStats:
    """Five-number summary of one set of distances."""

    min: float
    q1: float
    median: float
    q3: float
    max: float
    count: int


@dataclass(frozen=True)
class ModelSummary:
    """Derived statistics for one model.

    Attributes:
        model: Model identifier
        threshold: Separating threshold, None when no related pair has a value
        related: Box-plot summary of related distances, None if empty
        unrelated: Box-plot summary of unrelated distances, None if empty
    """

    model: str
    threshold: float | None
    related: BoxPlotStats | None
    unrelated: BoxPlotStats | None
