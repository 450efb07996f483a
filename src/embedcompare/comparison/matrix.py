"""In-memory store of (pair, model) distance entries."""

import logging
from collections.abc import Callable, Iterator

from .models import UNSET, DistanceEntry

logger = logging.getLogger(__name__)

SlotKey = tuple[int, str]


class DistanceValues:
    """Restartable lazy view over the computed distances of one model.

    Every iteration rescans the matrix, so the view always reflects the
    current entries and can be consumed any number of times.
    """

    def __init__(
        self,
        entries: dict[SlotKey, DistanceEntry],
        model: str,
        where: Callable[[int], bool] | None = None,
    ) -> None:
        self._entries = entries
        self._model = model
        self._where = where

    def __iter__(self) -> Iterator[float]:
        indices = sorted(
            pair_index for pair_index, model in self._entries if model == self._model
        )
        for pair_index in indices:
            if self._where is not None and not self._where(pair_index):
                continue
            entry = self._entries.get((pair_index, self._model), UNSET)
            if entry.has_value:
                yield entry.value


class DistanceMatrix:
    """Mapping of (pair index, model) to the state of its distance.

    Keys are tuples, so model identifiers containing separators such as
    ``BAAI/bge-small-en-v1.5`` never collide with pair indices.
    """

    def __init__(self) -> None:
        self._entries: dict[SlotKey, DistanceEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, pair_index: int, model: str) -> DistanceEntry:
        """Return the entry for a slot, UNSET if it was never written."""
        return self._entries.get((pair_index, model), UNSET)

    def set_pending(self, pair_index: int, model: str) -> None:
        self._entries[(pair_index, model)] = DistanceEntry.pending()

    def set_value(self, pair_index: int, model: str, value: float) -> None:
        self._entries[(pair_index, model)] = DistanceEntry.of(value)

    def set_error(self, pair_index: int, model: str, reason: str) -> None:
        self._entries[(pair_index, model)] = DistanceEntry.failed(reason)

    def reset(self, pair_index: int, model: str) -> None:
        self._entries[(pair_index, model)] = UNSET

    def invalidate(self, pair_index: int) -> None:
        """Reset every entry of a pair, across all models, to UNSET."""
        for key in [key for key in self._entries if key[0] == pair_index]:
            self._entries[key] = UNSET
        logger.debug(f"Invalidated distances for pair {pair_index}")

    def invalidate_model(self, model: str) -> None:
        """Reset every entry of a model, across all pairs, to UNSET."""
        for key in [key for key in self._entries if key[1] == model]:
            self._entries[key] = UNSET
        logger.debug(f"Invalidated distances for model {model}")

    def discard(self, pair_index: int) -> None:
        """Forget a deleted pair entirely."""
        for key in [key for key in self._entries if key[0] == pair_index]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def values_for(
        self, model: str, where: Callable[[int], bool] | None = None
    ) -> DistanceValues:
        """Return computed distances of a model in ascending pair order.

        Args:
            model: Model identifier
            where: Optional predicate over pair index selecting a subset

        Returns:
            Restartable lazy sequence of floats, VALUE entries only
        """
        return DistanceValues(self._entries, model, where)
