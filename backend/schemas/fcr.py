from pydantic import BaseModel
from datetime import date
from typing import List, Optional


class FCRResult(BaseModel):
    """FCR figures derived for one weight sampling. Recomputed on every query."""
    flock_id: str
    date: date
    sample_size: int
    total_weight: float
    average_weight: float
    fcr_lifetime: float = 0.0
    fcr_previous: float = 0.0
    weight_gain_lifetime: float = 0.0
    weight_gain_previous: float = 0.0
    is_first_recording: bool = False


class WeightGainDetails(BaseModel):
    initial_weight: float = 0.0
    final_weight: float = 0.0
    weight_gain: float = 0.0
    sample_count: int = 0
    first_sampling_date: Optional[date] = None
    last_sampling_date: Optional[date] = None
    average_daily_gain: float = 0.0
    initial_average_weight: float = 0.0
    final_average_weight: float = 0.0


class FlockFCRSummary(BaseModel):
    flock_id: str
    batch_code: str
    feed_used: float
    weight_gain: float
    fcr: float
    has_weight_data: bool
    sample_count: int
    initial_weight: float = 0.0
    final_weight: float = 0.0
    average_daily_gain: float = 0.0
    first_sampling_date: Optional[date] = None
    last_sampling_date: Optional[date] = None


class FCRReport(BaseModel):
    start_date: date
    end_date: date
    total_feed_used: float
    weight_gain: float
    fcr: float
    has_weight_data: bool
    sample_count: int
    weight_gain_details: Optional[WeightGainDetails] = None
    per_flock: List[FlockFCRSummary] = []
    weight_sampling_insights: List[FCRResult] = []


class MonthlyEfficiency(BaseModel):
    monthly_fcr: float
    feed_used: float
    monthly_weight_gain: float
    has_monthly_weight_data: bool
    active_flocks: int
    avg_feed_per_bird_per_day: float
    birds: int
    weight_sampling_count: int
