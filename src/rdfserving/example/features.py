"""
Typed features and examples.

A feature is one slot of an instance's input vector. Every feature
carries a ``feature_type`` tag so consumers can dispatch on the tag.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union


class FeatureType(str, Enum):
    """Kind of value held by a feature or a prediction."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    IGNORED = "ignored"


@dataclass(frozen=True)
class NumericFeature:
    """Floating-point feature value."""

    value: float
    feature_type: FeatureType = field(default=FeatureType.NUMERIC, init=False)


@dataclass(frozen=True)
class CategoricalFeature:
    """Category feature, stored as the category's integer ID."""

    value_id: int
    feature_type: FeatureType = field(default=FeatureType.CATEGORICAL, init=False)


@dataclass(frozen=True)
class IgnoredFeature:
    """Placeholder for columns that take no part in prediction."""

    feature_type: FeatureType = field(default=FeatureType.IGNORED, init=False)


IGNORED = IgnoredFeature()

Feature = Union[NumericFeature, CategoricalFeature, IgnoredFeature]


@dataclass(frozen=True)
class Example:
    """
    A feature vector submitted for classification.

    Attributes:
        features: One feature per schema column, in column order.
        target: Known target value; None at prediction time.
    """

    features: tuple[Feature, ...]
    target: Feature | None = None

    def __len__(self) -> int:
        return len(self.features)

    def __getitem__(self, column: int) -> Feature:
        return self.features[column]

    def active_features(self) -> Iterator[tuple[int, Feature]]:
        """Yield (column, feature) for every non-ignored feature."""
        for column, feature in enumerate(self.features):
            if feature.feature_type is not FeatureType.IGNORED:
                yield column, feature
