from pydantic import BaseModel, ConfigDict


class Trip(BaseModel):
    model_config = ConfigDict(frozen=True)

    vendor_id: str
    rate_code: str
    passenger_count: int
    trip_time_in_secs: int
    trip_distance: float
    payment_type: str
    # Unknown when predicting
    fare_amount: float = 0.0


class FarePrediction(BaseModel):
    trip: Trip
    predicted_fare: float
