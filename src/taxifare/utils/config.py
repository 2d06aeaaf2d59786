from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taxifare.utils.constants import (
    DEFAULT_SEED,
    MODEL_FILE_NAME,
    TEST_CSV_NAME,
    TRAIN_CSV_NAME,
    default_data_path,
)


class PipelineConfig(BaseModel):
    """Paths and settings handed to every stage of the fare pipeline."""

    model_config = ConfigDict(frozen=True)

    train_path: Path
    test_path: Path
    model_path: Path
    seed: int = DEFAULT_SEED
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    has_header: bool = True
    save_model: bool = True

    @classmethod
    def from_working_directory(cls, cwd: Optional[Path] = None, **overrides) -> "PipelineConfig":
        data_path = default_data_path(cwd)
        values = {
            "train_path": data_path / TRAIN_CSV_NAME,
            "test_path": data_path / TEST_CSV_NAME,
            "model_path": data_path / MODEL_FILE_NAME,
        }
        values.update(overrides)
        return cls(**values)
