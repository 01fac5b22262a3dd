"""
Feature building from decoded tokens.

Each token becomes a typed feature according to its column's type in
the inbound schema. The target column is always ignored at prediction
time.
"""

from collections.abc import Mapping

from rdfserving.config.settings import InboundConfig
from rdfserving.errors import InternalInconsistencyError, InvalidFeatureValueError
from rdfserving.example import (
    IGNORED,
    CategoricalFeature,
    CategoryMapping,
    Feature,
    NumericFeature,
)


def build_feature(
    column: int,
    token: str,
    inbound: InboundConfig,
    category_mappings: Mapping[int, CategoryMapping],
) -> Feature:
    """
    Convert one token into the feature for its column.

    Args:
        column: Column index.
        token: Decoded token for that column.
        inbound: Inbound schema.
        category_mappings: Column index -> category mapping.

    Returns:
        Numeric, categorical or ignored feature.

    Raises:
        InvalidFeatureValueError: If a numeric token does not parse or a
            category name is unknown for its column.
    """
    if column == inbound.target_index:
        return IGNORED

    if inbound.is_numeric(column):
        try:
            if "_" in token:
                raise ValueError(f"digit separators not allowed: {token!r}")
            value = float(token)
        except ValueError as e:
            raise InvalidFeatureValueError(
                f"Bad numeric value {token!r} for column {inbound.column_name(column)}",
                column=column,
            ) from e
        return NumericFeature(value=value)

    if inbound.is_categorical(column):
        mapping = category_mappings.get(column)
        if mapping is None:
            raise InternalInconsistencyError(
                f"No category mapping for categorical column {column}"
            )
        category_id = mapping.id_of(token)
        if category_id is None:
            raise InvalidFeatureValueError(
                f"Unknown category {token!r} for column {inbound.column_name(column)}",
                column=column,
            )
        return CategoricalFeature(value_id=category_id)

    return IGNORED


def build_features(
    tokens: list[str],
    inbound: InboundConfig,
    category_mappings: Mapping[int, CategoryMapping],
) -> tuple[Feature, ...]:
    """Build the full feature vector; any invalid token fails the whole vector."""
    if len(tokens) != inbound.total_columns:
        msg = f"Expected {inbound.total_columns} tokens, got {len(tokens)}"
        raise ValueError(msg)
    return tuple(
        build_feature(column, token, inbound, category_mappings)
        for column, token in enumerate(tokens)
    )
