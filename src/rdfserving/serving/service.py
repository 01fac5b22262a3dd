"""
Request orchestration for classification endpoints.

Per request the pipeline runs:
    1. fetch the current generation (once)  -> ServiceUnavailableError
    2. check the target column type         -> UnsupportedTargetTypeError
    3. decode the record                    -> MalformedRequestError
    4. build the feature vector             -> InvalidFeatureValueError
    5. classify and encode the output

Failures in steps 1-4 are raised before any output is produced.
"""

from collections.abc import Iterator

from rdfserving.config.settings import InboundConfig
from rdfserving.errors import (
    InternalInconsistencyError,
    ServiceUnavailableError,
    UnsupportedTargetTypeError,
)
from rdfserving.example import (
    Example,
    FeatureType,
    Prediction,
)
from rdfserving.generation.generation import Generation, GenerationManager
from rdfserving.io.delimited import decode_record
from rdfserving.serving.distribution import format_decimal, iter_distribution_lines
from rdfserving.serving.features import build_features
from rdfserving.utils.logging import get_logger

log = get_logger(__name__)


class ClassificationService:
    """
    Stateless request handling over the current model generation.

    Safe to share between threads: per-request state lives on the stack,
    and the generation is read exactly once per call.

    Args:
        manager: Holder of the current generation.
        inbound: Inbound column schema.
    """

    def __init__(self, manager: GenerationManager, inbound: InboundConfig) -> None:
        self.manager = manager
        self.inbound = inbound

    def classification_distribution(self, line: str | None) -> Iterator[str]:
        """
        Probability of every target category for one input record.

        Args:
            line: Delimited input record, or None if none was supplied.

        Returns:
            Iterator of ``"<name>,<probability>\\n"`` lines in ascending
            category ID order.

        Raises:
            ServiceUnavailableError: No generation loaded.
            UnsupportedTargetTypeError: Target column is not categorical.
            MalformedRequestError: Missing line or wrong column count.
            InvalidFeatureValueError: A token is invalid for its column.
            InternalInconsistencyError: Classifier output does not match
                the generation's target mapping.
        """
        generation = self._current_generation()
        if not self.inbound.is_classification:
            raise UnsupportedTargetTypeError("Only supported for classification")

        example = self._build_example(generation, line)
        prediction = self._predict(generation, example)

        target_mapping = generation.mapping_for(self.inbound.target_index)
        log.debug(
            "Classified distribution",
            generation_id=generation.generation_id,
            n_categories=len(prediction.probabilities),
        )
        return iter_distribution_lines(prediction.probabilities, target_mapping)

    def classify(self, line: str | None) -> str:
        """
        Most probable category name, or the predicted value for a
        numeric target.
        """
        generation = self._current_generation()
        example = self._build_example(generation, line)
        prediction = self._predict(generation, example)

        if prediction.feature_type is FeatureType.NUMERIC:
            return format_decimal(prediction.value)

        target_mapping = generation.mapping_for(self.inbound.target_index)
        category_id = prediction.most_probable_category_id
        name = target_mapping.name_of(category_id)
        if name is None:
            raise InternalInconsistencyError(
                f"No name for target category ID {category_id}"
            )
        return name

    def _current_generation(self) -> Generation:
        generation = self.manager.current
        if generation is None:
            raise ServiceUnavailableError(
                "API method unavailable until model has been built and loaded"
            )
        return generation

    def _build_example(self, generation: Generation, line: str | None) -> Example:
        tokens = decode_record(
            line, self.inbound.total_columns, delimiter=self.inbound.delimiter
        )
        features = build_features(tokens, self.inbound, generation.category_mappings)
        return Example(features=features)

    def _predict(self, generation: Generation, example: Example) -> Prediction:
        """Classify once and check the outcome matches the target type."""
        prediction = generation.classifier.classify(example)

        if self.inbound.is_classification:
            if prediction.feature_type is not FeatureType.CATEGORICAL:
                raise InternalInconsistencyError(
                    "Classifier returned a numeric prediction for a categorical target"
                )
            target_mapping = generation.mapping_for(self.inbound.target_index)
            n_probabilities = len(prediction.probabilities)
            if n_probabilities != len(target_mapping):
                raise InternalInconsistencyError(
                    f"Classifier returned {n_probabilities} probabilities "
                    f"for {len(target_mapping)} target categories"
                )
        elif prediction.feature_type is not FeatureType.NUMERIC:
            raise InternalInconsistencyError(
                "Classifier returned a categorical prediction for a numeric target"
            )
        return prediction
