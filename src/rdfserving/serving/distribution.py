"""Rendering of per-category probability distributions."""

from collections.abc import Iterator, Sequence

import numpy as np

from rdfserving.errors import InternalInconsistencyError
from rdfserving.example import CategoryMapping


def format_decimal(value: float) -> str:
    """
    Render a probability (or any float) as a locale-independent decimal.

    Uses the shortest representation that round-trips, always with a
    fractional part (``1`` -> ``"1.0"``, ``0.7`` -> ``"0.7"``). Numpy
    scalars keep their own precision, so a float32 0.7 also renders as
    ``"0.7"``.
    """
    if not isinstance(value, np.floating):
        value = np.float64(value)
    return np.format_float_positional(value, unique=True, trim="0")


def iter_distribution_lines(
    probabilities: Sequence[float] | np.ndarray,
    target_mapping: CategoryMapping,
) -> Iterator[str]:
    """
    Yield one ``"<name>,<probability>\\n"`` line per category ID.

    Lines are produced lazily, in ascending category ID order.

    Raises:
        InternalInconsistencyError: If a category ID has no name in the
            target mapping.
    """
    for category_id, probability in enumerate(probabilities):
        name = target_mapping.name_of(category_id)
        if name is None:
            raise InternalInconsistencyError(
                f"No name for target category ID {category_id}"
            )
        yield f"{name},{format_decimal(probability)}\n"


def encode_distribution(
    probabilities: Sequence[float] | np.ndarray,
    target_mapping: CategoryMapping,
) -> str:
    """Render the whole distribution as one string."""
    return "".join(iter_distribution_lines(probabilities, target_mapping))
