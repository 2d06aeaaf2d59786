from typing import Optional


class TaxiFareError(Exception):
    """Base class for failures of one pipeline stage."""

    stage = "pipeline"


class LoadError(TaxiFareError):
    stage = "load"

    def __init__(self, message: str, path=None, line: Optional[int] = None):
        self.path = path
        self.line = line
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class SchemaError(TaxiFareError):
    stage = "features"


class TrainingError(TaxiFareError):
    stage = "train"


class EvaluationError(TaxiFareError):
    stage = "evaluate"
