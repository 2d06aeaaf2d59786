import logging
import pickle
from pathlib import Path

import joblib
import numpy as np
import pandas as pd
from sklearn.ensemble import GradientBoostingRegressor

from taxifare.backend.errors import LoadError, TrainingError
from taxifare.backend.transforms import FeaturePipeline, build_fare_pipeline
from taxifare.utils.constants import DEFAULT_SEED, FEATURES_COLUMN, LABEL_COLUMN, SCORE_COLUMN

logger = logging.getLogger(__name__)


class FareModel:
    """A fitted feature pipeline plus the regressor trained on its output.

    Batch evaluation and single trip prediction both go through ``transform``,
    which appends a ``Score`` column holding the predicted fare.
    """

    def __init__(self, pipeline: FeaturePipeline, regressor: GradientBoostingRegressor):
        self._pipeline = pipeline
        self._regressor = regressor

    @property
    def pipeline(self) -> FeaturePipeline:
        return self._pipeline

    @property
    def regressor(self) -> GradientBoostingRegressor:
        return self._regressor

    def transform(self, table: pd.DataFrame) -> pd.DataFrame:
        features = self._pipeline.transform(table)
        if features.empty:
            scores = np.empty(0)
        else:
            X = feature_matrix(features[FEATURES_COLUMN])
            scores = self._regressor.predict(X)
        return features.assign(**{SCORE_COLUMN: scores})

    def save(self, path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self, path)
        logger.info("Saved model to %s", path)
        return path

    @staticmethod
    def load(path) -> "FareModel":
        path = Path(path)
        if not path.is_file():
            raise LoadError("model file not found", path=path)
        try:
            model = joblib.load(path)
        except (pickle.UnpicklingError, EOFError, KeyError, ValueError, AttributeError, ImportError) as exc:
            raise LoadError(f"cannot read model artifact: {exc!r}", path=path) from exc
        if not isinstance(model, FareModel):
            raise LoadError(f"expected a FareModel, found {type(model).__name__}", path=path)
        logger.info("Loaded model from %s", path)
        return model


def feature_matrix(features: pd.Series) -> np.ndarray:
    return np.vstack(features.to_numpy()).astype(np.float64)


def fit_regressor(table: pd.DataFrame, seed: int, width: int) -> GradientBoostingRegressor:
    """Fits gradient boosted trees on the ``Features`` and ``Label`` columns."""
    if table.empty:
        raise TrainingError("training table is empty")
    missing = [name for name in (FEATURES_COLUMN, LABEL_COLUMN) if name not in table.columns]
    if missing:
        raise TrainingError(f"training table lacks column(s) {missing}")

    try:
        X = feature_matrix(table[FEATURES_COLUMN])
        y = table[LABEL_COLUMN].to_numpy(dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise TrainingError(f"training table has malformed features or labels: {exc}") from exc

    if X.ndim != 2 or X.shape[1] != width:
        raise TrainingError(f"feature vectors have shape {X.shape}, expected width {width}")
    if not (np.isfinite(X).all() and np.isfinite(y).all()):
        raise TrainingError("training table contains non-finite values")

    regressor = GradientBoostingRegressor(random_state=seed)
    regressor.fit(X, y)
    logger.info("Trained %d trees on %d rows", regressor.n_estimators_, len(y))
    return regressor


def train(table: pd.DataFrame, seed: int = DEFAULT_SEED, pipeline: FeaturePipeline = None) -> FareModel:
    if table.empty:
        raise TrainingError("training table is empty")
    pipeline = pipeline or build_fare_pipeline()
    features = pipeline.fit_transform(table)
    regressor = fit_regressor(features, seed, pipeline.output_width)
    return FareModel(pipeline, regressor)
