from pathlib import Path

DATA_DIR_NAME = "Data"
TRAIN_CSV_NAME = "taxi-fare-train.csv"
TEST_CSV_NAME = "taxi-fare-test.csv"
MODEL_FILE_NAME = "Model.joblib"

TRIP_COLUMNS = {
    "VENDOR": "vendor_id",
    "RATE_CODE": "rate_code",
    "PASSENGERS": "passenger_count",
    "TRIP_TIME": "trip_time_in_secs",
    "DISTANCE": "trip_distance",
    "PAYMENT": "payment_type",
    "FARE": "fare_amount",
}

# Column order of the input csv files
TRIP_SCHEMA = {
    TRIP_COLUMNS["VENDOR"]: str,
    TRIP_COLUMNS["RATE_CODE"]: str,
    TRIP_COLUMNS["PASSENGERS"]: int,
    TRIP_COLUMNS["TRIP_TIME"]: int,
    TRIP_COLUMNS["DISTANCE"]: float,
    TRIP_COLUMNS["PAYMENT"]: str,
    TRIP_COLUMNS["FARE"]: float,
}

CATEGORICAL_COLUMNS = [
    TRIP_COLUMNS["VENDOR"],
    TRIP_COLUMNS["RATE_CODE"],
    TRIP_COLUMNS["PAYMENT"],
]

LABEL_COLUMN = "Label"
FEATURES_COLUMN = "Features"
SCORE_COLUMN = "Score"
ENCODED_SUFFIX = "_encoded"

# Features vector layout
FEATURES_ORDER = [
    TRIP_COLUMNS["VENDOR"] + ENCODED_SUFFIX,
    TRIP_COLUMNS["RATE_CODE"] + ENCODED_SUFFIX,
    TRIP_COLUMNS["PASSENGERS"],
    TRIP_COLUMNS["TRIP_TIME"],
    TRIP_COLUMNS["DISTANCE"],
    TRIP_COLUMNS["PAYMENT"] + ENCODED_SUFFIX,
]

DEFAULT_SEED = 0

# VTS,1,1,1140,3.75,CRD,15.5
SAMPLE_ACTUAL_FARE = 15.5


def default_data_path(cwd=None) -> Path:
    return Path(cwd or Path.cwd()) / DATA_DIR_NAME
