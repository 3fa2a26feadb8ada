from pydantic import BaseModel, field_validator, model_validator
from datetime import date
from typing import List, Optional

# Allowed drift between the recorded total and the sum of the individual weights
TOTAL_WEIGHT_TOLERANCE = 0.01


class WeightSample(BaseModel):
    flock_id: str
    date: date
    sample_size: int
    sample_weights: List[float]
    total_weight: float
    average_weight: Optional[float] = None
    notes: Optional[str] = None

    @field_validator('sample_size')
    @classmethod
    def validate_sample_size(cls, v):
        if v <= 0:
            raise ValueError('Sample size must be greater than 0')
        return v

    @field_validator('sample_weights')
    @classmethod
    def validate_sample_weights(cls, v):
        if not v:
            raise ValueError('Sample weights are required')
        if any(weight <= 0 for weight in v):
            raise ValueError('All sample weights must be greater than 0')
        return v

    @model_validator(mode='after')
    def validate_totals(self):
        if len(self.sample_weights) != self.sample_size:
            raise ValueError('Number of sample weights must match sample size')
        if abs(sum(self.sample_weights) - self.total_weight) > TOTAL_WEIGHT_TOLERANCE:
            raise ValueError('Total weight must match sum of sample weights')
        if self.average_weight is None:
            self.average_weight = self.total_weight / self.sample_size
        return self

    class Config:
        from_attributes = True


class WeightTrendPoint(BaseModel):
    date: date
    average_weight: float
    sample_size: int
    total_weight: float

    class Config:
        from_attributes = True


class LatestSampling(BaseModel):
    date: date
    average_weight: float
    sample_size: int
    flock_batch_code: str


class WeightSamplingStats(BaseModel):
    total_samplings: int
    average_weight: float
    latest_sampling: Optional[LatestSampling] = None
