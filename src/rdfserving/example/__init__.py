"""
Data model for inference requests.

Features, examples, predictions and the category mappings that translate
between category names and IDs.
"""

from rdfserving.example.features import (
    IGNORED,
    CategoricalFeature,
    Example,
    Feature,
    FeatureType,
    IgnoredFeature,
    NumericFeature,
)
from rdfserving.example.mapping import CategoryMapping
from rdfserving.example.prediction import (
    CategoricalPrediction,
    NumericPrediction,
    Prediction,
)

__all__ = [
    "IGNORED",
    "CategoricalFeature",
    "CategoricalPrediction",
    "CategoryMapping",
    "Example",
    "Feature",
    "FeatureType",
    "IgnoredFeature",
    "NumericFeature",
    "NumericPrediction",
    "Prediction",
]
