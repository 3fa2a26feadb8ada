from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class WeightSampling(Base, TimestampMixin):
    __tablename__ = "weight_sampling"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    flock_id = Column(String, ForeignKey("flocks.id"), index=True, nullable=False)
    flock = relationship("Flock", back_populates="weight_samplings")
    date = Column(Date, index=True, nullable=False)
    sample_size = Column(Integer, nullable=False)
    sample_weights = Column(JSON, nullable=False)  # per-bird weights in kg
    total_weight = Column(Float, nullable=False)
    average_weight = Column(Float, nullable=False)
    notes = Column(String, nullable=True)
