"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from rdfserving.config import InboundConfig
from rdfserving.example import CategoricalPrediction, CategoryMapping, Example, Prediction
from rdfserving.generation import Classifier, Generation, GenerationManager


class FixedClassifier(Classifier):
    """Classifier returning a fixed prediction and recording its inputs."""

    def __init__(self, prediction: Prediction) -> None:
        self.prediction = prediction
        self.examples: list[Example] = []

    def classify(self, example: Example) -> Prediction:
        self.examples.append(example)
        return self.prediction


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def inbound() -> InboundConfig:
    """Four-column schema: color (categorical), size, weight, label (target)."""
    return InboundConfig(
        column_names=["color", "size", "weight", "label"],
        categorical_columns=["color", "label"],
        target_column="label",
    )


@pytest.fixture
def regression_inbound() -> InboundConfig:
    """Same columns, but with a numeric target."""
    return InboundConfig(
        column_names=["color", "size", "weight", "price"],
        categorical_columns=["color"],
        target_column="price",
    )


@pytest.fixture
def category_mappings() -> dict[int, CategoryMapping]:
    """Category mappings for the color and label columns."""
    return {
        0: CategoryMapping({"red": 0, "green": 1, "blue": 2}),
        3: CategoryMapping({"yes": 0, "no": 1}),
    }


@pytest.fixture
def fixed_classifier() -> FixedClassifier:
    """Classifier answering yes=0.7, no=0.3."""
    return FixedClassifier(CategoricalPrediction(probabilities=[0.7, 0.3]))


@pytest.fixture
def generation(
    fixed_classifier: FixedClassifier,
    category_mappings: dict[int, CategoryMapping],
) -> Generation:
    return Generation(
        classifier=fixed_classifier,
        category_mappings=category_mappings,
        generation_id="00001",
    )


@pytest.fixture
def manager(generation: Generation) -> GenerationManager:
    """Manager with the fixed generation loaded."""
    return GenerationManager(generation)
