import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from barberhub.config import get_now, settings
from barberhub.database import get_db
from barberhub.main import app
from barberhub.models.generated import (
    Appointments,
    Base,
    BlockedTimes,
    BusinessHours,
    Professionals,
    Services,
    Tenants,
)
from barberhub.redis_client import get_redis

# Monday 2026-10-19, 10:05 in the business timezone
NOW = datetime(2026, 10, 19, 10, 5, tzinfo=settings.tzinfo)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = SessionTesting()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    app.dependency_overrides[get_now] = lambda: NOW
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def tenant(db):
    obj = Tenants(name="Barbearia Central", slug="central")
    db.add(obj)
    db.commit()
    return obj


@pytest.fixture
def professionals(db, tenant):
    joao = Professionals(tenant_id=tenant.id, name="Joao")
    pedro = Professionals(tenant_id=tenant.id, name="Pedro")
    db.add_all([joao, pedro])
    db.commit()
    return joao, pedro


@pytest.fixture
def services(db, tenant):
    corte = Services(tenant_id=tenant.id, name="Corte", duration_min=20, price=35.0)
    barba = Services(tenant_id=tenant.id, name="Barba", duration_min=25, price=25.5)
    db.add_all([corte, barba])
    db.commit()
    return corte, barba


def add_business_hours(db, tenant_id, **fields):
    values = {
        "open_time": "08:00",
        "close_time": "20:00",
        "slot_interval": 20,
        "open_days": json.dumps(["mon", "tue", "wed", "thu", "fri", "sat"]),
    }
    values.update(fields)
    obj = BusinessHours(tenant_id=tenant_id, **values)
    db.add(obj)
    db.commit()
    return obj


def add_appointment(db, tenant_id, professional, starts_at, services, status="confirmed"):
    obj = Appointments(
        tenant_id=tenant_id,
        professional_id=professional.id,
        starts_at=starts_at,
        status=status,
        client_name="Cliente",
    )
    obj.services = list(services)
    db.add(obj)
    db.commit()
    return obj


def add_block(db, tenant_id, day, start, end, professional=None):
    obj = BlockedTimes(
        tenant_id=tenant_id,
        professional_id=professional.id if professional else None,
        date=day,
        start_time=start,
        end_time=end,
    )
    db.add(obj)
    db.commit()
    return obj
