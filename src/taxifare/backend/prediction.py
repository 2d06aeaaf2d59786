import logging

import pandas as pd

from taxifare.backend.training import FareModel
from taxifare.backend.trip import FarePrediction, Trip
from taxifare.utils.constants import SCORE_COLUMN
from taxifare.utils.formatting import format_decimal

logger = logging.getLogger(__name__)


def predict_fare(model: FareModel, trip: Trip) -> FarePrediction:
    # Create a one-row DataFrame from the input and reuse the batch transform chain
    trip_df = pd.DataFrame([trip.model_dump()])
    scored = model.transform(trip_df)
    predicted = float(scored[SCORE_COLUMN].iloc[0])
    logger.debug("Predicted %.4f for %s", predicted, trip)
    return FarePrediction(trip=trip, predicted_fare=predicted)


def format_prediction(prediction: FarePrediction, actual_fare: float) -> str:
    rule = "*" * 70
    line = f"Predicted fare: {format_decimal(prediction.predicted_fare, 4)}, actual fare: {actual_fare}"
    return "\n".join([rule, line, rule])


def print_prediction(prediction: FarePrediction, actual_fare: float):
    print(format_prediction(prediction, actual_fare))
