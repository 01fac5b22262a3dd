"""
Model generations and the current-generation reference.

A generation is an immutable snapshot of a trained classifier plus the
category mappings it was trained with. The ``GenerationManager`` holds
the one generation currently being served and replaces it atomically.
"""

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

from rdfserving.errors import InternalInconsistencyError
from rdfserving.example import CategoryMapping
from rdfserving.generation.classifier import Classifier
from rdfserving.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Generation:
    """
    One trained-model snapshot.

    Attributes:
        classifier: Trained classifier.
        category_mappings: Column index -> category mapping, for every
            categorical column including the target.
        generation_id: Identifier of the snapshot (e.g., directory name).
        loaded_at: ISO timestamp when the generation was loaded.
    """

    classifier: Classifier
    category_mappings: Mapping[int, CategoryMapping]
    generation_id: str = "0"
    loaded_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "category_mappings",
            MappingProxyType(dict(self.category_mappings)),
        )

    def mapping_for(self, column: int) -> CategoryMapping:
        """Return the category mapping of a categorical column.

        Raises:
            InternalInconsistencyError: If the generation has no mapping
                for the column.
        """
        mapping = self.category_mappings.get(column)
        if mapping is None:
            raise InternalInconsistencyError(
                f"No category mapping for categorical column {column}"
            )
        return mapping


class GenerationManager:
    """
    Holds the current generation and swaps it atomically.

    Readers take ``current`` once per request and use that snapshot for
    the whole request. Writers serialize on a lock; reading never blocks.
    """

    def __init__(self, generation: Generation | None = None) -> None:
        self._current = generation
        self._swap_lock = threading.Lock()

    @property
    def current(self) -> Generation | None:
        """The generation being served, or None if none is loaded."""
        return self._current

    @property
    def is_ready(self) -> bool:
        return self._current is not None

    def swap(self, generation: Generation) -> Generation | None:
        """Install a new generation and return the previous one."""
        with self._swap_lock:
            previous = self._current
            self._current = generation
        log.info(
            "Swapped generation",
            generation_id=generation.generation_id,
            previous_id=previous.generation_id if previous else None,
        )
        return previous

    def clear(self) -> Generation | None:
        """Unload the current generation."""
        with self._swap_lock:
            previous = self._current
            self._current = None
        log.info("Cleared generation")
        return previous

    def load(
        self,
        model_path: str | Path,
        categories_path: Path | None = None,
        target_column: int | None = None,
    ) -> Generation:
        """Load a generation from disk (or MLflow) and make it current."""
        from rdfserving.generation.persistence import load_generation

        generation = load_generation(
            model_path, categories_path=categories_path, target_column=target_column
        )
        self.swap(generation)
        return generation
