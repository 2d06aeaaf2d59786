import numpy as np
import pandas as pd
import pytest

from taxifare.backend.data_loading import load_trips
from taxifare.backend.training import train
from taxifare.utils.config import PipelineConfig
from taxifare.utils.constants import TRIP_SCHEMA

HEADER = ",".join(TRIP_SCHEMA)


def make_trips(n_rows: int, seed: int = 42) -> pd.DataFrame:
    """Synthetic trips with a fare roughly linear in distance and time."""
    rng = np.random.default_rng(seed)
    rate_code = rng.choice(["1", "2", "5"], size=n_rows, p=[0.85, 0.1, 0.05])
    distance = np.round(rng.uniform(0.3, 15.0, size=n_rows), 2)
    trip_time = (distance * rng.uniform(180, 300, size=n_rows)).astype(int) + 60
    fare = 2.5 + 2.0 * distance + 0.005 * trip_time + rng.normal(0, 0.5, size=n_rows)
    fare = np.where(rate_code == "2", 52.0, fare)
    return pd.DataFrame({
        "vendor_id": rng.choice(["CMT", "VTS"], size=n_rows),
        "rate_code": rate_code,
        "passenger_count": rng.integers(1, 6, size=n_rows),
        "trip_time_in_secs": trip_time,
        "trip_distance": distance,
        "payment_type": rng.choice(["CRD", "CSH"], size=n_rows),
        "fare_amount": np.round(fare, 2),
    })


def write_csv(path, trips: pd.DataFrame):
    trips.to_csv(path, index=False)
    return path


@pytest.fixture(scope="session")
def data_dir(tmp_path_factory):
    data_dir = tmp_path_factory.mktemp("workdir") / "Data"
    data_dir.mkdir()
    write_csv(data_dir / "taxi-fare-train.csv", make_trips(600, seed=1))
    write_csv(data_dir / "taxi-fare-test.csv", make_trips(150, seed=2))
    return data_dir


@pytest.fixture(scope="session")
def config(data_dir):
    return PipelineConfig.from_working_directory(data_dir.parent, save_model=False)


@pytest.fixture(scope="session")
def train_table(config):
    return load_trips(config.train_path, config)


@pytest.fixture(scope="session")
def test_table(config):
    return load_trips(config.test_path, config)


@pytest.fixture(scope="session")
def trained_model(train_table, config):
    return train(train_table, seed=config.seed)
