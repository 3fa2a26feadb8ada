from pydantic import BaseModel, field_validator
from datetime import date


class FeedUsageRecord(BaseModel):
    flock_id: str
    date: date
    amount_used: float  # kg

    @field_validator('amount_used')
    @classmethod
    def validate_amount_used(cls, v):
        if v < 0:
            raise ValueError('Amount used must be greater than or equal to 0')
        return v

    class Config:
        from_attributes = True
