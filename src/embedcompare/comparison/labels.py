"""Ground-truth relatedness labels keyed by pair index."""

from collections.abc import Mapping

TRUE_LABELS = frozenset({"yes", "related"})


def parse_related_label(raw: object) -> bool:
    """Parse an imported Related cell.

    Only "yes" and "related" (any case) count as related; empty cells,
    "no" and any other text are unrelated.
    """
    if raw is None:
        return False
    return str(raw).strip().lower() in TRUE_LABELS


class RelatednessLabels:
    """Mutable set of related/unrelated labels. Unknown pairs are unrelated."""

    def __init__(self) -> None:
        self._labels: dict[int, bool] = {}

    def get(self, pair_index: int) -> bool:
        return self._labels.get(pair_index, False)

    def set(self, pair_index: int, related: bool) -> None:
        self._labels[pair_index] = bool(related)

    def discard(self, pair_index: int) -> None:
        self._labels.pop(pair_index, None)

    def bulk_load(self, mapping: Mapping[int, bool]) -> None:
        """Replace every label at once; indices absent from mapping reset to False."""
        self._labels = {index: bool(related) for index, related in mapping.items()}

    def related_indices(self) -> list[int]:
        return sorted(index for index, related in self._labels.items() if related)

    def as_dict(self) -> dict[int, bool]:
        return dict(self._labels)
