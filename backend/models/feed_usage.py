from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class FeedUsage(Base, TimestampMixin):
    __tablename__ = "feed_usage"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    flock_id = Column(String, ForeignKey("flocks.id"), index=True, nullable=False)
    flock = relationship("Flock", back_populates="feed_usages")
    date = Column(Date, index=True, nullable=False)
    amount_used = Column(Float, default=0.0, nullable=False)  # kg
    notes = Column(String, nullable=True)
