"""
Request-time inference: feature building, classification and
distribution output, plus the HTTP surface.
"""

from rdfserving.serving.distribution import (
    encode_distribution,
    format_decimal,
    iter_distribution_lines,
)
from rdfserving.serving.features import build_feature, build_features
from rdfserving.serving.service import ClassificationService

__all__ = [
    "ClassificationService",
    "build_feature",
    "build_features",
    "encode_distribution",
    "format_decimal",
    "iter_distribution_lines",
]
