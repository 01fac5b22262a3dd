"""
Error taxonomy for the serving layer.

Each error carries the HTTP status it maps to. Bad requests are raised
eagerly by the pipeline stage that detects them; internal inconsistencies
signal that a model and its category mappings disagree.
"""


class ServingError(Exception):
    """Base class for all request-level serving errors."""

    status_code: int = 500

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ServiceUnavailableError(ServingError):
    """No model generation is loaded yet. Callers may retry later."""

    status_code = 503


class BadRequestError(ServingError):
    """The request cannot be satisfied by the current schema and mappings."""

    status_code = 400


class UnsupportedTargetTypeError(BadRequestError):
    """The target column is numeric but the operation requires classification."""


class MalformedRequestError(BadRequestError):
    """Input line is missing or has the wrong number of columns."""


class InvalidFeatureValueError(BadRequestError):
    """A token is not a valid value for its column."""

    def __init__(self, reason: str, column: int | None = None) -> None:
        super().__init__(reason)
        self.column = column


class InternalInconsistencyError(ServingError):
    """Classifier output disagrees with the generation's category mappings."""

    status_code = 500
