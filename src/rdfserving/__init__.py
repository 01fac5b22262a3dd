"""
rdf-serving: Classification Distribution Serving.

This package decodes delimited input records into typed feature vectors,
classifies them with the currently loaded model generation, and renders
the probability of every target category.
"""

from importlib.metadata import version

__version__ = version("rdf-serving")

__all__ = ["__version__"]
