import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "fcr-analytics-logs"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models
from database import Base, get_db
from main import app

TENANT_ID = "tenant-1"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def add_flock(db, flock_id, current_count, batch_code=None, tenant_id=TENANT_ID):
    flock = models.Flock(
        id=flock_id,
        tenant_id=tenant_id,
        batch_code=batch_code or f"B-{flock_id}",
        current_count=current_count,
    )
    db.add(flock)
    db.commit()
    return flock


def add_sampling(db, flock_id, day, average_weight, sample_size=2, tenant_id=TENANT_ID):
    weights = [average_weight] * sample_size
    sampling = models.WeightSampling(
        tenant_id=tenant_id,
        flock_id=flock_id,
        date=day,
        sample_size=sample_size,
        sample_weights=weights,
        total_weight=sum(weights),
        average_weight=average_weight,
    )
    db.add(sampling)
    db.commit()
    return sampling


def add_feed(db, flock_id, day, amount_used, tenant_id=TENANT_ID):
    usage = models.FeedUsage(tenant_id=tenant_id, flock_id=flock_id, date=day, amount_used=amount_used)
    db.add(usage)
    db.commit()
    return usage
