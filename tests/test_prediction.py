import math

import pandas as pd
import pytest
from pydantic import ValidationError

from taxifare.backend.prediction import format_prediction, predict_fare
from taxifare.backend.trip import FarePrediction, Trip
from taxifare.main import SAMPLE_TRIP
from taxifare.utils.constants import SCORE_COLUMN


def test_sample_trip_prediction_is_plausible(trained_model):
    prediction = predict_fare(trained_model, SAMPLE_TRIP)

    assert prediction.trip == SAMPLE_TRIP
    assert 0.0 <= prediction.predicted_fare <= 100.0


def test_prediction_matches_batch_score(trained_model, test_table):
    trip = Trip(**test_table.iloc[[0]].to_dict(orient="records")[0])

    batch_score = trained_model.transform(test_table)[SCORE_COLUMN].iloc[0]
    assert predict_fare(trained_model, trip).predicted_fare == pytest.approx(batch_score)


def test_unseen_vendor_uses_zero_encoding(trained_model):
    trip = SAMPLE_TRIP.model_copy(update={"vendor_id": "DDS", "payment_type": "UNK"})
    prediction = predict_fare(trained_model, trip)

    encoded = trained_model.pipeline.transform(pd.DataFrame([trip.model_dump()]))["vendor_id_encoded"]
    assert not encoded.iloc[0].any()
    assert math.isfinite(prediction.predicted_fare)


def test_trip_is_immutable():
    with pytest.raises(ValidationError):
        SAMPLE_TRIP.vendor_id = "CMT"


def test_format_prediction_uses_four_decimals():
    prediction = FarePrediction(trip=SAMPLE_TRIP, predicted_fare=15.123456)
    assert "Predicted fare: 15.1235, actual fare: 15.5" in format_prediction(prediction, 15.5)
