"""
Classifier outcomes.

A prediction is a tagged variant: ``CategoricalPrediction`` carries a
dense probability array indexed by category ID, ``NumericPrediction``
carries a scalar. Both expose ``feature_type`` so callers branch on the
tag.
"""

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from rdfserving.example.features import FeatureType


@dataclass(frozen=True, eq=False)
class CategoricalPrediction:
    """
    Probability of each target category.

    Attributes:
        probabilities: Probability per category ID (index = ID).
    """

    probabilities: np.ndarray
    feature_type: FeatureType = field(default=FeatureType.CATEGORICAL, init=False)

    def __post_init__(self) -> None:
        # Own copy, at the classifier's float precision
        probabilities = np.array(self.probabilities, copy=True)
        if not np.issubdtype(probabilities.dtype, np.floating):
            probabilities = probabilities.astype(np.float64)
        if probabilities.ndim != 1:
            msg = f"Probabilities must be one-dimensional, got shape {probabilities.shape}"
            raise ValueError(msg)
        probabilities.setflags(write=False)
        object.__setattr__(self, "probabilities", probabilities)

    @property
    def most_probable_category_id(self) -> int:
        """Category ID with the highest probability (lowest ID on ties)."""
        return int(np.argmax(self.probabilities))


@dataclass(frozen=True)
class NumericPrediction:
    """Scalar outcome of a regression model."""

    value: float
    feature_type: FeatureType = field(default=FeatureType.NUMERIC, init=False)


Prediction = Union[CategoricalPrediction, NumericPrediction]
