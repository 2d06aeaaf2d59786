import logging
import math

import pandas as pd
from pydantic import BaseModel
from sklearn.metrics import r2_score, root_mean_squared_error

from taxifare.backend.errors import EvaluationError
from taxifare.backend.training import FareModel
from taxifare.utils.constants import LABEL_COLUMN, SCORE_COLUMN
from taxifare.utils.formatting import format_decimal

logger = logging.getLogger(__name__)


class RegressionMetrics(BaseModel):
    r_squared: float
    root_mean_squared_error: float


def evaluate(model: FareModel, table: pd.DataFrame) -> RegressionMetrics:
    """Scores every row of a held-out table and aggregates label/score pairs.

    An empty table has no defined R squared, so it raises EvaluationError
    instead of returning NaN.
    """
    if table.empty:
        raise EvaluationError("evaluation table is empty")

    scored = model.transform(table)
    y_true = scored[LABEL_COLUMN]
    y_pred = scored[SCORE_COLUMN]
    metrics = RegressionMetrics(
        r_squared=r2_score(y_true=y_true, y_pred=y_pred),
        root_mean_squared_error=root_mean_squared_error(y_true=y_true, y_pred=y_pred),
    )
    if not all(math.isfinite(value) for value in metrics.model_dump().values()):
        raise EvaluationError(f"evaluation produced non-finite metrics: {metrics.model_dump()}")

    logger.info("Evaluated %d rows: %s", len(scored), metrics.model_dump())
    return metrics


def format_metrics(metrics: RegressionMetrics) -> str:
    lines = [
        "",
        "*************************************************",
        "*       Model quality metrics evaluation         ",
        "*------------------------------------------------",
        f"*       RSquared Score:      {format_decimal(metrics.r_squared, 2)}",
        "*       Root Mean Squared Error:      "
        f"{format_decimal(metrics.root_mean_squared_error, 2, leading_zero=False)}",
        "*************************************************",
    ]
    return "\n".join(lines)


def print_metrics(metrics: RegressionMetrics):
    print(format_metrics(metrics))
