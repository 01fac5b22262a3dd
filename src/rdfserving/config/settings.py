"""
Typed configuration models using Pydantic.

The inbound column schema, model location, HTTP server and logging are
all configured here. Columns may be referenced by index or, when
``column_names`` is given, by name.
"""

from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ColumnRef = int | str


class InboundConfig(BaseModel):
    """Schema of inbound records: width, column types and target column.

    Every column is exactly one of: target, categorical, numeric, ignored.
    ``id_columns`` and ``ignored_columns`` are both decoded as ignored.
    When ``numeric_columns`` is omitted, all remaining columns are numeric.
    """

    model_config = ConfigDict(frozen=True)

    column_names: list[str] = Field(
        default_factory=list, description="Optional column names, in order"
    )
    num_columns: int | None = Field(
        default=None, ge=1, description="Schema width when column_names is not given"
    )
    target_column: ColumnRef = Field(description="Column holding the target")
    categorical_columns: list[ColumnRef] = Field(default_factory=list)
    numeric_columns: list[ColumnRef] | None = Field(
        default=None, description="Numeric columns (default: all other columns)"
    )
    ignored_columns: list[ColumnRef] = Field(default_factory=list)
    id_columns: list[ColumnRef] = Field(default_factory=list)
    delimiter: str = Field(default=",", description="Field separator of input lines")

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Ensure the delimiter is a single character."""
        if len(v) != 1:
            msg = f"Delimiter must be a single character, got: {v!r}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_columns(self) -> "InboundConfig":
        """Resolve all column references and check they are consistent."""
        if not self.column_names and self.num_columns is None:
            msg = "Either column_names or num_columns must be set"
            raise ValueError(msg)
        if self.column_names and self.num_columns is not None:
            if self.num_columns != len(self.column_names):
                msg = (
                    f"num_columns ({self.num_columns}) does not match "
                    f"column_names ({len(self.column_names)} names)"
                )
                raise ValueError(msg)

        target = self.target_index
        categorical = self.categorical_indices
        ignored = self.ignored_indices
        if target in ignored:
            msg = "Target column cannot be an ignored or id column"
            raise ValueError(msg)
        if self.numeric_columns is not None:
            numeric = self._resolve_all(self.numeric_columns)
            overlap = numeric & categorical
            if overlap:
                msg = f"Columns are both numeric and categorical: {sorted(overlap)}"
                raise ValueError(msg)
            if target not in numeric | categorical:
                msg = "Target column must be numeric or categorical"
                raise ValueError(msg)
        if categorical & ignored:
            msg = f"Columns are both categorical and ignored: {sorted(categorical & ignored)}"
            raise ValueError(msg)
        return self

    def _resolve(self, ref: ColumnRef) -> int:
        """Resolve a column name or index to an index."""
        if isinstance(ref, str):
            if ref.isdigit():
                ref = int(ref)
            elif ref in self.column_names:
                return self.column_names.index(ref)
            else:
                msg = f"Unknown column name: {ref!r}"
                raise ValueError(msg)
        if not 0 <= ref < self.total_columns:
            msg = f"Column index {ref} out of range for {self.total_columns} columns"
            raise ValueError(msg)
        return ref

    def _resolve_all(self, refs: list[ColumnRef]) -> frozenset[int]:
        return frozenset(self._resolve(ref) for ref in refs)

    @property
    def total_columns(self) -> int:
        """Number of columns in every inbound record."""
        if self.column_names:
            return len(self.column_names)
        assert self.num_columns is not None
        return self.num_columns

    @cached_property
    def target_index(self) -> int:
        return self._resolve(self.target_column)

    @cached_property
    def categorical_indices(self) -> frozenset[int]:
        return self._resolve_all(self.categorical_columns)

    @cached_property
    def ignored_indices(self) -> frozenset[int]:
        return self._resolve_all(self.ignored_columns) | self._resolve_all(
            self.id_columns
        )

    @cached_property
    def numeric_indices(self) -> frozenset[int]:
        if self.numeric_columns is not None:
            return self._resolve_all(self.numeric_columns)
        return frozenset(
            col
            for col in range(self.total_columns)
            if col not in self.categorical_indices and col not in self.ignored_indices
        )

    def is_categorical(self, column: int) -> bool:
        return column in self.categorical_indices

    def is_numeric(self, column: int) -> bool:
        return column in self.numeric_indices

    def is_ignored(self, column: int) -> bool:
        """Whether a non-target column takes no part in prediction."""
        return not self.is_categorical(column) and not self.is_numeric(column)

    @property
    def is_classification(self) -> bool:
        """True when the target column is categorical."""
        return self.is_categorical(self.target_index)

    def column_name(self, column: int) -> str:
        """Human-readable column label for messages."""
        if self.column_names:
            return self.column_names[column]
        return str(column)


class ModelConfig(BaseModel):
    """Location of the model generation to serve."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        description="Generation directory, .joblib file, or MLflow model URI"
    )
    categories: Path | None = Field(
        default=None,
        description="Category mapping JSON (required for MLflow URIs)",
    )

    @property
    def is_mlflow_uri(self) -> bool:
        return self.path.startswith(("runs:/", "models:/"))


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8091, ge=0, le=65535)
    context_path: str = Field(
        default="", description="Path prefix in front of all endpoints"
    )

    @field_validator("context_path")
    @classmethod
    def normalize_context_path(cls, v: str) -> str:
        """Strip trailing slashes and ensure a leading one."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return level


class ServingConfig(BaseModel):
    """Complete serving configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'covtype')")

    inbound: InboundConfig
    model: ModelConfig
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def total_columns(self) -> int:
        """Convenience accessor for the schema width."""
        return self.inbound.total_columns
