"""
Classifier interface and scikit-learn adapter.

A classifier turns one ``Example`` into exactly one ``Prediction``.
"""

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from rdfserving.errors import InternalInconsistencyError
from rdfserving.example import (
    CategoricalPrediction,
    Example,
    FeatureType,
    NumericPrediction,
    Prediction,
)


class Classifier(ABC):
    """Abstract base class for trained models served by a generation."""

    @abstractmethod
    def classify(self, example: Example) -> Prediction:
        """Predict the target of one example.

        Args:
            example: Unlabeled feature vector of schema width.

        Returns:
            Categorical prediction for classification models, numeric
            prediction for regression models.
        """
        ...


class SklearnClassifier(Classifier):
    """Adapter over a fitted scikit-learn estimator or pipeline.

    The estimator must have been fitted on rows holding the active
    (non-ignored) features in column order, with numeric features as
    floats and categorical features as their category IDs. Classifiers
    must be fitted on target category IDs.

    Args:
        estimator: Fitted estimator. Classifiers need ``predict_proba``.
        n_categories: Number of known target categories. Required for
            classifiers whose training data did not contain every category.
    """

    def __init__(self, estimator: Any, n_categories: int | None = None) -> None:
        self.estimator = estimator
        self.n_categories = n_categories

    @property
    def is_classifier(self) -> bool:
        return hasattr(self.estimator, "predict_proba")

    def classify(self, example: Example) -> Prediction:
        row = self._to_row(example)
        if not self.is_classifier:
            value = self.estimator.predict(row)[0]
            return NumericPrediction(value=float(value))

        proba = np.asarray(self.estimator.predict_proba(row)[0])
        if not np.issubdtype(proba.dtype, np.floating):
            proba = proba.astype(np.float64)
        class_ids = np.asarray(self.estimator.classes_).astype(int)
        n_categories = self.n_categories
        if n_categories is None:
            n_categories = int(class_ids.max()) + 1 if len(class_ids) else 0

        if len(class_ids) and int(class_ids.max()) >= n_categories:
            raise InternalInconsistencyError(
                f"Model knows category ID {int(class_ids.max())} "
                f"but only {n_categories} categories are mapped"
            )

        # Scatter into a dense array indexed by category ID
        probabilities = np.zeros(n_categories, dtype=proba.dtype)
        probabilities[class_ids] = proba
        return CategoricalPrediction(probabilities=probabilities)

    @staticmethod
    def _to_row(example: Example) -> np.ndarray:
        values = []
        for _, feature in example.active_features():
            if feature.feature_type is FeatureType.NUMERIC:
                values.append(feature.value)
            else:
                values.append(float(feature.value_id))
        return np.asarray([values], dtype=np.float64)
