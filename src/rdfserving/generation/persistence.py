"""
Generation persistence (save/load).

A generation directory contains:
    - model.joblib: Pickled classifier or scikit-learn estimator
    - categories.json: {"<column index>": {"<category name>": <id>, ...}}
    - generation.json: Optional metadata (target_column, saved_at, ...)

A bare ``.joblib`` file is also accepted, with ``.categories.json`` and
``.meta.json`` sidecars next to it. MLflow URIs (runs:/, models:/) load
the estimator through MLflow and need an explicit categories file.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import joblib

from rdfserving.example import CategoryMapping
from rdfserving.generation.classifier import Classifier, SklearnClassifier
from rdfserving.generation.generation import Generation
from rdfserving.utils.logging import get_logger

log = get_logger(__name__)

MODEL_FILE = "model.joblib"
CATEGORIES_FILE = "categories.json"
METADATA_FILE = "generation.json"


def save_generation(
    output_dir: Path,
    model: Any,
    category_mappings: dict[int, CategoryMapping],
    target_column: int | None = None,
    generation_id: str | None = None,
) -> Path:
    """Save a model and its category mappings as a generation directory.

    Args:
        output_dir: Directory to create.
        model: ``Classifier`` or fitted scikit-learn estimator.
        category_mappings: Column index -> category mapping.
        target_column: Index of the target column, stored in metadata.
        generation_id: Identifier; defaults to the directory name.

    Returns:
        Path to the generation directory.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    joblib.dump(model, output_dir / MODEL_FILE)
    log.info("Saved model", path=str(output_dir / MODEL_FILE))

    categories = {
        str(column): mapping.to_dict()
        for column, mapping in sorted(category_mappings.items())
    }
    with open(output_dir / CATEGORIES_FILE, "w", encoding="utf-8") as f:
        json.dump(categories, f, indent=2, ensure_ascii=False)

    metadata: dict[str, Any] = {
        "generation_id": generation_id or output_dir.name,
        "target_column": target_column,
        "model_type": type(model).__name__,
        "saved_at": datetime.now().isoformat(),
    }
    with open(output_dir / METADATA_FILE, "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2)
    log.info("Saved generation", path=str(output_dir), **metadata)

    return output_dir


def load_category_mappings(path: Path) -> dict[int, CategoryMapping]:
    """Load per-column category mappings from JSON.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If a column key is not an integer or a mapping is
            not a bijection.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Category mappings not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    mappings: dict[int, CategoryMapping] = {}
    for column, name_to_id in data.items():
        try:
            column_index = int(column)
        except ValueError as e:
            msg = f"Category mapping key must be a column index, got {column!r}"
            raise ValueError(msg) from e
        mappings[column_index] = CategoryMapping(name_to_id)
    return mappings


def _load_metadata(path: Path) -> dict[str, Any]:
    if not path.exists():
        log.debug("Generation metadata not found", path=str(path))
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _as_classifier(
    model: Any,
    category_mappings: dict[int, CategoryMapping],
    target_column: int | None,
) -> Classifier:
    """Wrap a raw estimator so it speaks the Classifier interface."""
    if isinstance(model, Classifier):
        return model
    n_categories = None
    if target_column is not None and target_column in category_mappings:
        n_categories = len(category_mappings[target_column])
    return SklearnClassifier(model, n_categories=n_categories)


def load_generation(
    model_path: str | Path,
    categories_path: Path | None = None,
    target_column: int | None = None,
) -> Generation:
    """
    Load a generation.

    Args:
        model_path: Generation directory, ``.joblib`` file, or MLflow URI.
        categories_path: Category mapping JSON. Overrides the file found
            next to the model; required for MLflow URIs.
        target_column: Index of the target column. Overrides the stored
            metadata; sizes the probability array of raw estimators.

    Returns:
        Loaded Generation.

    Raises:
        FileNotFoundError: If the model or category file doesn't exist.
        ValueError: If an MLflow URI is given without a categories file.
    """
    model_path_str = str(model_path)

    if model_path_str.startswith("runs:/") or model_path_str.startswith("models:/"):
        if categories_path is None:
            msg = "MLflow models need an explicit category mapping file"
            raise ValueError(msg)
        import mlflow

        model = mlflow.sklearn.load_model(model_path_str)
        metadata: dict[str, Any] = {"generation_id": model_path_str}
    else:
        path = Path(model_path)
        if path.is_dir():
            model_file = path / MODEL_FILE
            default_categories = path / CATEGORIES_FILE
            metadata = _load_metadata(path / METADATA_FILE)
            metadata.setdefault("generation_id", path.name)
        else:
            model_file = path
            default_categories = path.with_suffix(".categories.json")
            metadata = _load_metadata(path.with_suffix(".meta.json"))
            metadata.setdefault("generation_id", path.stem)
        if not model_file.exists():
            raise FileNotFoundError(f"Model file not found: {model_file}")
        if categories_path is None:
            categories_path = default_categories

        model = joblib.load(model_file)
        log.info("Loaded model", path=str(model_file))

    category_mappings = load_category_mappings(categories_path)
    if target_column is None:
        target_column = metadata.get("target_column")
    classifier = _as_classifier(model, category_mappings, target_column)

    generation = Generation(
        classifier=classifier,
        category_mappings=category_mappings,
        generation_id=str(metadata["generation_id"]),
    )
    log.info(
        "Loaded generation",
        generation_id=generation.generation_id,
        n_mapped_columns=len(category_mappings),
    )
    return generation
