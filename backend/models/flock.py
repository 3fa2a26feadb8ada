from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from database import Base
from models.audit_mixin import TimestampMixin


class Flock(Base, TimestampMixin):
    __tablename__ = "flocks"

    id = Column(String, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    batch_code = Column(String, nullable=False)
    # Bird count at query time, not historical
    current_count = Column(Integer, default=0, nullable=False)
    weight_samplings = relationship("WeightSampling", back_populates="flock")
    feed_usages = relationship("FeedUsage", back_populates="flock")

    @hybrid_property
    def is_active(self):
        return (self.current_count or 0) > 0

    @is_active.expression
    def is_active(cls):
        return cls.current_count > 0

    def __repr__(self):
        return f"<Flock(id={self.id}, batch_code={self.batch_code}, current_count={self.current_count})>"
