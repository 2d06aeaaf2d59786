from functools import lru_cache
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException

from taxifare.backend.errors import LoadError
from taxifare.backend.prediction import predict_fare
from taxifare.backend.training import FareModel
from taxifare.backend.trip import FarePrediction, Trip
from taxifare.utils.config import PipelineConfig

app = FastAPI()


@lru_cache(maxsize=1)
def get_config() -> PipelineConfig:
    return PipelineConfig.from_working_directory()


@lru_cache(maxsize=1)
def _load_model(path: Path) -> FareModel:
    return FareModel.load(path)


def get_model(config: PipelineConfig = Depends(get_config)) -> FareModel:
    try:
        return _load_model(config.model_path)
    except LoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@app.get("/health")
async def health():
    return {"status": "ok", "model_loaded": _load_model.cache_info().currsize > 0}


@app.post("/taxi/predict", response_model=FarePrediction)
async def predict(trip: Trip, model: FareModel = Depends(get_model)) -> FarePrediction:
    return predict_fare(model, trip)
