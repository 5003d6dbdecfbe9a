# forestlab/config/data_config.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class DataConfig(BaseModel):
    path: str
    target: str

    # None → every column except target / ignore_columns
    features: Optional[List[str]] = None
    ignore_columns: List[str] = Field(default_factory=list)
    categorical_columns: List[str] = Field(default_factory=list)
    target_as_factor: bool = True

    # two fractions; the remainder is the third (test) split
    split_ratios: List[float] = Field(default_factory=lambda: [0.6, 0.2])
    split_seed: int = 1234

    @field_validator("split_ratios")
    @classmethod
    def _check_ratios(cls, v: List[float]) -> List[float]:
        if len(v) != 2:
            raise ValueError(f"split_ratios needs exactly 2 fractions, got {v}")
        if any(r <= 0 or r >= 1 for r in v):
            raise ValueError(f"split_ratios must lie in (0, 1), got {v}")
        if sum(v) >= 1:
            raise ValueError(f"split_ratios must sum to < 1, got {v}")
        return v
