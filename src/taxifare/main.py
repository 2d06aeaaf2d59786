"""
Taxi fare regression workflow.

Trains a gradient boosted fare model on ``Data/taxi-fare-train.csv``,
evaluates it on ``Data/taxi-fare-test.csv`` and prints one sample
prediction. Paths are resolved against the working directory.

Usage:
    python -m taxifare.main
"""

import logging
import sys
from pathlib import Path

from taxifare.backend.data_loading import load_trips
from taxifare.backend.errors import TaxiFareError
from taxifare.backend.evaluation import RegressionMetrics, evaluate, print_metrics
from taxifare.backend.prediction import predict_fare, print_prediction
from taxifare.backend.training import FareModel, train
from taxifare.backend.trip import FarePrediction, Trip
from taxifare.utils.config import PipelineConfig
from taxifare.utils.constants import SAMPLE_ACTUAL_FARE

logger = logging.getLogger("taxifare")

SAMPLE_TRIP = Trip(
    vendor_id="VTS",
    rate_code="1",
    passenger_count=1,
    trip_time_in_secs=1140,
    trip_distance=3.75,
    payment_type="CRD",
    fare_amount=0,
)


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def train_from_file(config: PipelineConfig) -> FareModel:
    table = load_trips(config.train_path, config)

    print("=============== Create and Train the Model ===============")
    model = train(table, seed=config.seed)
    print("=============== End of training ===============")
    print()

    if config.save_model:
        model.save(config.model_path)
    return model


def evaluate_from_file(model: FareModel, config: PipelineConfig) -> RegressionMetrics:
    table = load_trips(config.test_path, config)
    metrics = evaluate(model, table)
    print_metrics(metrics)
    return metrics


def run_single_prediction(
    model: FareModel, trip: Trip = SAMPLE_TRIP, actual_fare: float = SAMPLE_ACTUAL_FARE
) -> FarePrediction:
    prediction = predict_fare(model, trip)
    print_prediction(prediction, actual_fare=actual_fare)
    return prediction


def run(config: PipelineConfig = None) -> FarePrediction:
    config = config or PipelineConfig.from_working_directory()
    print(Path.cwd())

    model = train_from_file(config)
    evaluate_from_file(model, config)
    return run_single_prediction(model)


def main():
    setup_logging()
    try:
        run()
    except TaxiFareError as exc:
        logger.error("%s stage failed: %s", exc.stage, exc)
        raise


if __name__ == "__main__":
    main()
