from models.flock import Flock
from models.weight_sampling import WeightSampling
from models.feed_usage import FeedUsage

__all__ = ['FeedUsage', 'Flock', 'WeightSampling',]
