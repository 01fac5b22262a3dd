"""
Model generations: trained classifier snapshots and their lifecycle.

Provides the classifier interface, the atomically swappable
current-generation reference, and generation persistence.
"""

from rdfserving.generation.classifier import Classifier, SklearnClassifier
from rdfserving.generation.generation import Generation, GenerationManager
from rdfserving.generation.persistence import (
    load_category_mappings,
    load_generation,
    save_generation,
)

__all__ = [
    "Classifier",
    "Generation",
    "GenerationManager",
    "SklearnClassifier",
    "load_category_mappings",
    "load_generation",
    "save_generation",
]
