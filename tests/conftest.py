import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# must be set before app.database is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CLIENT_API_KEY"] = "test-key"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base, get_db
from app.main import app
from app.models.client import Client
from app.models.order import Order, ServiceStatus, DELIVERED_STATUS
from app.models.service import Service
from app.models.employee import Employee
from app.models.service_detail import ServiceDetail
from app.models.location_history import LocationHistory
from app.utils.dates import utcnow

AUTH_HEADERS = {"Authorization": "Bearer test-key"}
URL = "/api/admin/storage-locations"


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'storage.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db_session):
    """Shop with two open orders, one delivered order and a few pairs of shoes.

    - order 5 (ORD-0005, received): detail 10 Nike Air Max, detail 11 Adidas
      Samba, both unplaced
    - order 6 (ORD-0006, in progress): detail 12 Vans placed in B2/B2-01
      three days ago, detail 14 without brand or model
    - order 7 (ORD-0007, delivered): detail 13 Converse still marked in Z9/Z9-01
    """
    now = utcnow()
    db_session.add_all([
        ServiceStatus(id=1, name="Recibido"),
        ServiceStatus(id=2, name="En proceso"),
        ServiceStatus(id=3, name=DELIVERED_STATUS),
        Client(id=1, first_name="María", last_names="García", phone="5550001"),
        Client(id=2, first_name="Jorge", last_names="Pérez", phone="5550002"),
        Service(id=1, name="Limpieza profunda"),
        Employee(id=1, first_name="Luis", last_names="Ramírez", email="luis@example.com"),
        Employee(id=2, first_name="Ana", last_names="López", email="ana@example.com"),
    ])
    db_session.flush()
    db_session.add_all([
        Order(id=5, code="ORD-0005", client_id=1, status_id=1, received_at=now - timedelta(days=1)),
        Order(id=6, code="ORD-0006", client_id=2, status_id=2, received_at=now - timedelta(days=4)),
        Order(id=7, code="ORD-0007", client_id=1, status_id=3, received_at=now - timedelta(days=12)),
    ])
    db_session.flush()
    db_session.add_all([
        ServiceDetail(id=10, order_id=5, service_id=1, brand="Nike", model="Air Max 90"),
        ServiceDetail(id=11, order_id=5, service_id=1, brand="Adidas", model="Samba"),
        ServiceDetail(
            id=12, order_id=6, service_id=1, brand="Vans", model="Old Skool",
            box_code="B2", slot_code="B2-01", stored_at=now - timedelta(days=3), stored_by_id=1,
        ),
        ServiceDetail(
            id=13, order_id=7, service_id=1, brand="Converse", model="Chuck 70",
            box_code="Z9", slot_code="Z9-01", stored_at=now - timedelta(days=10), stored_by_id=1,
        ),
        ServiceDetail(id=14, order_id=6, service_id=1, shoe_description="Botas sin marca"),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def client(session_factory, seeded):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        test_client.headers.update(AUTH_HEADERS)
        yield test_client
    app.dependency_overrides.clear()


def get_detail(session, detail_id):
    session.expire_all()
    return session.query(ServiceDetail).filter(ServiceDetail.id == detail_id).first()


def history_for(session, detail_id):
    session.expire_all()
    return session.query(LocationHistory)\
        .filter(LocationHistory.service_detail_id == detail_id)\
        .order_by(LocationHistory.id)\
        .all()
