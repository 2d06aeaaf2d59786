"""
Feature transforms for trip tables.

Every step follows the same two-call contract: ``fit(table)`` learns whatever
state the step needs and returns the step, ``transform(table)`` returns a new
table with the step's output column added. Input tables are never modified.

Vector valued columns (one-hot encodings, the concatenated feature vector)
store one 1-d float array per row so the row count stays unchanged.
"""

import logging
from typing import List, Optional, Protocol, Sequence

import numpy as np
import pandas as pd

from taxifare.backend.errors import SchemaError
from taxifare.utils.constants import (
    CATEGORICAL_COLUMNS,
    ENCODED_SUFFIX,
    FEATURES_COLUMN,
    FEATURES_ORDER,
    LABEL_COLUMN,
    TRIP_COLUMNS,
)

logger = logging.getLogger(__name__)


class TransformStep(Protocol):
    inputs: Sequence[str]
    output: str

    def fit(self, table: pd.DataFrame) -> "TransformStep": ...

    def transform(self, table: pd.DataFrame) -> pd.DataFrame: ...


def _require_columns(table: pd.DataFrame, columns: Sequence[str], step: str):
    missing = [name for name in columns if name not in table.columns]
    if missing:
        raise SchemaError(f"{step}: input column(s) {missing} not found in table")


def _vectors_to_matrix(values: pd.Series, width: int) -> np.ndarray:
    if len(values) == 0:
        return np.empty((0, width))
    return np.vstack(values.to_numpy())


def _matrix_to_vectors(matrix: np.ndarray, index: pd.Index) -> pd.Series:
    vectors = np.empty(len(matrix), dtype=object)
    for i, row in enumerate(matrix):
        vectors[i] = row
    return pd.Series(vectors, index=index)


class CopyColumn:
    def __init__(self, source: str, target: str):
        self.inputs = [source]
        self.output = target

    def fit(self, table):
        _require_columns(table, self.inputs, "CopyColumn")
        return self

    def transform(self, table):
        _require_columns(table, self.inputs, "CopyColumn")
        return table.assign(**{self.output: table[self.inputs[0]].copy()})


class OneHotEncode:
    """Encodes one categorical column into a fixed width indicator vector.

    The vocabulary is taken from the table passed to ``fit`` and never changes
    afterwards. Categories not seen during fit encode to all zeros.
    """

    def __init__(self, source: str, target: str):
        self.inputs = [source]
        self.output = target
        self.categories_: Optional[List[str]] = None

    @property
    def width(self) -> int:
        self._check_fitted()
        return len(self.categories_)

    def fit(self, table):
        _require_columns(table, self.inputs, "OneHotEncode")
        dummies = pd.get_dummies(table[self.inputs[0]].astype(str))
        self.categories_ = list(dummies.columns)
        logger.debug("%s vocabulary: %s", self.inputs[0], self.categories_)
        return self

    def transform(self, table):
        self._check_fitted()
        _require_columns(table, self.inputs, "OneHotEncode")
        dummies = pd.get_dummies(table[self.inputs[0]].astype(str))
        # Reindex to ensure the columns perfectly match the fitted vocabulary
        dummies = dummies.reindex(columns=self.categories_, fill_value=0)
        matrix = dummies.to_numpy(dtype=np.float64).reshape(len(table), len(self.categories_))
        return table.assign(**{self.output: _matrix_to_vectors(matrix, table.index)})

    def _check_fitted(self):
        if self.categories_ is None:
            raise SchemaError(f"OneHotEncode({self.inputs[0]}) used before fit")


class Concatenate:
    """Joins scalar and vector columns into one feature vector, in input order."""

    def __init__(self, target: str, inputs: Sequence[str]):
        self.inputs = list(inputs)
        self.output = target
        self.widths_: Optional[List[int]] = None

    @property
    def width(self) -> int:
        if self.widths_ is None:
            raise SchemaError(f"Concatenate({self.output}) used before fit")
        return sum(self.widths_)

    def fit(self, table):
        _require_columns(table, self.inputs, "Concatenate")
        self.widths_ = [self._column_width(table[name]) for name in self.inputs]
        return self

    def transform(self, table):
        if self.widths_ is None:
            raise SchemaError(f"Concatenate({self.output}) used before fit")
        _require_columns(table, self.inputs, "Concatenate")
        blocks = []
        for name, width in zip(self.inputs, self.widths_):
            column = table[name]
            if column.dtype == object:
                block = _vectors_to_matrix(column, width)
            else:
                block = column.to_numpy(dtype=np.float64).reshape(-1, 1)
            if block.shape[1] != width:
                raise SchemaError(f"Concatenate: column {name} has width {block.shape[1]}, expected {width}")
            blocks.append(block)
        matrix = np.hstack(blocks) if blocks else np.empty((len(table), 0))
        return table.assign(**{self.output: _matrix_to_vectors(matrix, table.index)})

    @staticmethod
    def _column_width(column: pd.Series) -> int:
        if column.dtype != object:
            return 1
        if len(column) == 0:
            raise SchemaError(f"Concatenate: cannot infer width of empty vector column {column.name}")
        return len(column.iloc[0])


class FeaturePipeline:
    """Ordered chain of transform steps fitted and applied in sequence."""

    def __init__(self, steps: Sequence[TransformStep]):
        self.steps = list(steps)
        self.is_fitted = False

    @property
    def input_columns(self) -> List[str]:
        produced = set()
        required = []
        for step in self.steps:
            for name in step.inputs:
                if name not in produced and name not in required:
                    required.append(name)
            produced.add(step.output)
        return required

    @property
    def output_width(self) -> int:
        return self.steps[-1].width

    def fit(self, table: pd.DataFrame) -> "FeaturePipeline":
        # Each step is fitted on the output of the steps before it
        for step in self.steps:
            step.fit(table)
            table = step.transform(table)
        self.is_fitted = True
        logger.info("Fitted feature pipeline on %d rows, %d features", len(table), self.output_width)
        return self

    def transform(self, table: pd.DataFrame) -> pd.DataFrame:
        if not self.is_fitted:
            raise SchemaError("feature pipeline used before fit")
        _require_columns(table, self.input_columns, "FeaturePipeline")
        for step in self.steps:
            table = step.transform(table)
        return table

    def fit_transform(self, table: pd.DataFrame) -> pd.DataFrame:
        return self.fit(table).transform(table)


class PipelineBuilder:
    def __init__(self):
        self._steps: List[TransformStep] = []

    def append(self, step: TransformStep) -> "PipelineBuilder":
        self._steps.append(step)
        return self

    def copy_column(self, source: str, target: str) -> "PipelineBuilder":
        return self.append(CopyColumn(source, target))

    def one_hot_encode(self, source: str, target: str) -> "PipelineBuilder":
        return self.append(OneHotEncode(source, target))

    def concatenate(self, target: str, *inputs: str) -> "PipelineBuilder":
        return self.append(Concatenate(target, inputs))

    def build(self) -> FeaturePipeline:
        if not self._steps:
            raise SchemaError("feature pipeline needs at least one step")
        return FeaturePipeline(self._steps)


def build_fare_pipeline() -> FeaturePipeline:
    builder = PipelineBuilder().copy_column(TRIP_COLUMNS["FARE"], LABEL_COLUMN)
    for name in CATEGORICAL_COLUMNS:
        builder.one_hot_encode(name, name + ENCODED_SUFFIX)
    return builder.concatenate(FEATURES_COLUMN, *FEATURES_ORDER).build()
