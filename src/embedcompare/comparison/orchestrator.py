"""Comparison orchestrator - owns pairs, labels and the distance matrix.

Coordinates recomputation when inputs change. Edits invalidate the affected
slots; ``recompute`` pulls fresh embeddings from the injected provider for
every slot left UNSET (or ERROR) and writes the resulting distances back,
unless the slot was invalidated again while its fetch was in flight.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from ..embeddings.distance import cosine_distance
from ..embeddings.models import Embedding
from ..errors import ComparisonError
from ..providers.base import EmbeddingProvider
from .labels import RelatednessLabels
from .matrix import DistanceMatrix, SlotKey
from .models import (
    BoxPlotStats,
    DistanceEntry,
    EntryState,
    ModelSummary,
    TextPair,
)
from .stats import ThresholdEngine

logger = logging.getLogger(__name__)

DEFAULT_SLOTS = ("model1", "model2", "model3")
TEXT_FIELDS = ("query_text", "stored_text")


class ComparisonOrchestrator:
    """Single owner of the comparison state.

    Holds the ordered pair list, the RelatednessLabels, the DistanceMatrix
    and the mapping of model slots to model identifiers. All mutations go
    through this object so every edit can invalidate exactly the slots that
    depend on it.

    Each slot's version is the pair generation combined with the model
    generation. Text edits bump the former, unbinding a model bumps the
    latter, and a fetch only writes its result if the version it started
    with is still current.

    Example:
        orchestrator = ComparisonOrchestrator(ModelRouter(), ["text-embedding-3-small"])
        orchestrator.add_pair("cat", "feline", related=True)
        orchestrator.add_pair("cat", "car")
        await orchestrator.recompute()
        orchestrator.threshold("text-embedding-3-small")
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        models: Sequence[str | None] = (),
        slots: Sequence[str] = DEFAULT_SLOTS,
    ) -> None:
        """Initialize orchestrator.

        Args:
            provider: Collaborator that turns (text, model) into embeddings
            models: Models bound to the slots in order; None leaves a slot empty
            slots: Names of the model slots
        """
        self.provider = provider
        self.matrix = DistanceMatrix()
        self.labels = RelatednessLabels()
        self.engine = ThresholdEngine(self.matrix, self.labels)

        self._pairs: dict[int, TextPair] = {}
        self._next_index = 0

        slot_names = list(slots)
        for extra in range(len(slot_names), len(models)):
            slot_names.append(f"model{extra + 1}")
        self._slots: dict[str, str | None] = dict.fromkeys(slot_names)
        for slot, model in zip(slot_names, models):
            self._slots[slot] = model or None

        self._pair_generation: defaultdict[int, int] = defaultdict(int)
        self._model_generation: defaultdict[str, int] = defaultdict(int)
        self._last_computed: dict[SlotKey, tuple[str, str, str]] = {}

        # Embeddings are content addressed, so they never go stale
        self._embeddings: dict[tuple[str, str], Embedding] = {}
        self._inflight: dict[tuple[str, str], asyncio.Task] = {}

    # Pairs

    @property
    def pairs(self) -> list[TextPair]:
        return [self._pairs[index] for index in sorted(self._pairs)]

    def pair(self, pair_index: int) -> TextPair:
        """Return a pair by index.

        Raises:
            KeyError: If no pair has this index
        """
        if pair_index not in self._pairs:
            raise KeyError(f"No pair with index {pair_index}")
        return self._pairs[pair_index]

    def add_pair(
        self, query_text: str = "", stored_text: str = "", related: bool = False
    ) -> TextPair:
        pair = TextPair(self._next_index, query_text, stored_text)
        self._next_index += 1
        self._pairs[pair.index] = pair
        if related:
            self.labels.set(pair.index, True)
        return pair

    def remove_pair(self, pair_index: int) -> None:
        self.pair(pair_index)
        del self._pairs[pair_index]
        self._pair_generation[pair_index] += 1
        self.matrix.discard(pair_index)
        self.labels.discard(pair_index)
        self._forget_computed(lambda key: key[0] == pair_index)

    def edit_text(
        self,
        pair_index: int,
        query_text: str | None = None,
        stored_text: str | None = None,
    ) -> bool:
        """Edit one or both texts of a pair.

        Any actual change resets every distance of the pair, across all
        models, to UNSET.

        Returns:
            True if a text changed and the pair was invalidated
        """
        pair = self.pair(pair_index)
        changed = False
        if query_text is not None and query_text != pair.query_text:
            pair.query_text = query_text
            changed = True
        if stored_text is not None and stored_text != pair.stored_text:
            pair.stored_text = stored_text
            changed = True

        if changed:
            self._pair_generation[pair_index] += 1
            self.matrix.invalidate(pair_index)
            self._forget_computed(lambda key: key[0] == pair_index)
        return changed

    def bulk_import(self, rows: Iterable[tuple[str, str, bool]]) -> list[TextPair]:
        """Replace every pair and label with imported rows.

        Args:
            rows: (query_text, stored_text, related) tuples

        Returns:
            The newly created pairs
        """
        for pair_index in self._pairs:
            self._pair_generation[pair_index] += 1
        self._pairs.clear()
        self.matrix.clear()
        self._last_computed.clear()

        labels: dict[int, bool] = {}
        created = []
        for query_text, stored_text, related in rows:
            pair = self.add_pair(query_text, stored_text)
            labels[pair.index] = related
            created.append(pair)
        self.labels.bulk_load(labels)

        logger.debug(f"Imported {len(created)} pairs")
        return created

    def bulk_fill(self, field: str, text: str) -> int:
        """Fill one text column from newline-separated text.

        Blank lines are skipped. Rows are added when there are more lines
        than pairs; existing pairs beyond the last line are left untouched.

        Args:
            field: "query_text" or "stored_text"
            text: One text per line

        Returns:
            Number of lines applied
        """
        if field not in TEXT_FIELDS:
            raise ValueError(f"field must be one of {TEXT_FIELDS}, got {field!r}")

        chunks = [line for line in text.split("\n") if line.strip()]
        pairs = self.pairs
        while len(pairs) < len(chunks):
            pairs.append(self.add_pair())

        for pair, chunk in zip(pairs, chunks):
            self.edit_text(pair.index, **{field: chunk})
        return len(chunks)

    # Labels

    def set_label(self, pair_index: int, related: bool) -> None:
        self.pair(pair_index)
        self.labels.set(pair_index, related)

    def toggle_label(self, pair_index: int) -> bool:
        related = not self.labels.get(pair_index)
        self.set_label(pair_index, related)
        return related

    # Models

    @property
    def slots(self) -> dict[str, str | None]:
        return dict(self._slots)

    def active_models(self) -> list[str]:
        """Bound models in slot order, without duplicates."""
        return list(dict.fromkeys(model for model in self._slots.values() if model))

    def set_model(self, slot: str, model: str | None) -> None:
        """Bind a model to a slot, or clear the slot with None.

        Distances of the model leaving the slot are reset unless another
        slot still binds it.
        """
        previous = self._slots.get(slot)
        model = model or None
        self._slots[slot] = model
        if previous is None or previous == model:
            return

        if previous not in self._slots.values():
            self._model_generation[previous] += 1
            self.matrix.invalidate_model(previous)
            self._forget_computed(lambda key: key[1] == previous)

    # Distances

    def entry(self, pair_index: int, model: str) -> DistanceEntry:
        return self.matrix.get(pair_index, model)

    def is_applicable(self, pair_index: int) -> bool:
        """False for pairs with a blank text, which are never computed."""
        return self.pair(pair_index).is_complete

    def _version(self, pair_index: int, model: str) -> tuple[int, int]:
        return (self._pair_generation[pair_index], self._model_generation[model])

    def _is_current(
        self, pair_index: int, model: str, version: tuple[int, int]
    ) -> bool:
        return (
            pair_index in self._pairs
            and model in self._slots.values()
            and self._version(pair_index, model) == version
        )

    def _forget_computed(self, predicate) -> None:
        for key in [key for key in self._last_computed if predicate(key)]:
            del self._last_computed[key]

    def _needs_compute(self, pair: TextPair, model: str) -> bool:
        if not pair.is_complete:
            return False

        entry = self.matrix.get(pair.index, model)
        if entry.state is EntryState.PENDING:
            return False
        if entry.has_value:
            triple = (pair.query_text.strip(), pair.stored_text.strip(), model)
            if self._last_computed.get((pair.index, model)) == triple:
                return False
        return True

    async def recompute(
        self, pair_index: int | None = None, model: str | None = None
    ) -> int:
        """Compute every eligible slot concurrently.

        Slots with a blank text, slots already in flight and slots whose
        inputs are unchanged since their last successful computation are
        skipped. Failures are recorded as ERROR entries and never raised.

        Args:
            pair_index: Restrict to one pair
            model: Restrict to one bound model

        Returns:
            Number of slots computed
        """
        pairs = [self.pair(pair_index)] if pair_index is not None else self.pairs
        models = self.active_models()
        if model is not None:
            models = [m for m in models if m == model]

        self._prune_embeddings()
        targets = [
            (pair, m) for m in models for pair in pairs if self._needs_compute(pair, m)
        ]
        if not targets:
            return 0

        logger.debug(
            f"Recomputing {len(targets)} slots across {len(models)} models"
        )
        await asyncio.gather(*(self._compute_slot(pair, m) for pair, m in targets))
        return len(targets)

    async def _compute_slot(self, pair: TextPair, model: str) -> None:
        pair_index = pair.index
        version = self._version(pair_index, model)
        query_text = pair.query_text.strip()
        stored_text = pair.stored_text.strip()

        self.matrix.set_pending(pair_index, model)
        try:
            query_embedding, stored_embedding = await asyncio.gather(
                self._embed(query_text, model), self._embed(stored_text, model)
            )
            distance = cosine_distance(query_embedding, stored_embedding)
        except asyncio.CancelledError:
            if self._is_current(pair_index, model, version):
                self.matrix.reset(pair_index, model)
            raise
        except Exception as e:
            if not self._is_current(pair_index, model, version):
                logger.debug(f"Discarding stale failure for {(pair_index, model)}")
                return
            if not isinstance(e, ComparisonError):
                logger.error(f"Unexpected error for pair {pair_index}, {model}: {e!r}")
            else:
                logger.warning(f"Pair {pair_index}, {model}: {e}")
            self.matrix.set_error(pair_index, model, str(e))
            return

        if not self._is_current(pair_index, model, version):
            logger.debug(f"Discarding stale distance for {(pair_index, model)}")
            return

        self.matrix.set_value(pair_index, model, distance)
        self._last_computed[(pair_index, model)] = (query_text, stored_text, model)

    async def _embed(self, text: str, model: str) -> Embedding:
        key = (text, model)
        cached = self._embeddings.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch(text, model))
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._fetch_done(key, done))
        # Shielded so one cancelled slot does not cancel a fetch others share
        return await asyncio.shield(task)

    async def _fetch(self, text: str, model: str) -> Embedding:
        embedding = await self.provider.generate(text, model)
        self._embeddings[(text, model)] = embedding
        return embedding

    def _fetch_done(self, key: tuple[str, str], task: asyncio.Task) -> None:
        self._inflight.pop(key, None)
        # Marks the exception retrieved when every awaiter was cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Embedding fetch for {key} failed: {task.exception()!r}")

    def _prune_embeddings(self) -> None:
        """Forget embeddings of texts or models no longer in use."""
        texts = {
            text.strip()
            for pair in self._pairs.values()
            for text in (pair.query_text, pair.stored_text)
        }
        models = set(self.active_models())
        stale = [
            key
            for key in self._embeddings
            if key[0] not in texts or key[1] not in models
        ]
        for key in stale:
            del self._embeddings[key]
        if stale:
            logger.debug(f"Evicted {len(stale)} unused embeddings")

    # Derived statistics

    def threshold(self, model: str) -> float | None:
        return self.engine.compute_threshold(model)

    def box_plot(self, model: str, related: bool) -> BoxPlotStats | None:
        return self.engine.box_plot(model, related)

    def summary(self) -> list[ModelSummary]:
        """Threshold and box-plot statistics for every active model."""
        return [
            ModelSummary(
                model=model,
                threshold=self.threshold(model),
                related=self.box_plot(model, related=True),
                unrelated=self.box_plot(model, related=False),
            )
            for model in self.active_models()
        ]
