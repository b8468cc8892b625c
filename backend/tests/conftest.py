"""
Pytest fixtures for Hari ERP backend tests.

Provides the test application, a fresh database per test, one user per job
role and the master data (ledger accounts, products, tanks) most flows need.
"""

import pytest

from harierp import create_app
from harierp.cli import ensure_tank_materials
from harierp.extensions import db
from harierp.models import LedgerAccount, Product, RawMaterial
from harierp.services.auth_service import create_user


PASSWORD = "Password123!"

# username -> job role
ROLE_USERS = {
    "admin": "DirectorGeneral",
    "finance": "FinanceManager",
    "sales": "SalesManager",
    "lab": "Laboratory",
    "production": "ProductionManager",
}


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_ENGINE_OPTIONS': {},
        'BCRYPT_ROUNDS': 4,
        'UPLOAD_FOLDER': str(tmp_path_factory.mktemp('uploads')),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


@pytest.fixture(scope='function')
def users(db_session):
    """One active user per job role, all with PASSWORD."""
    return {
        username: create_user(username=username, password=PASSWORD, role=role)
        for username, role in ROLE_USERS.items()
    }


@pytest.fixture(scope='function')
def login(client, users):
    """Return a helper that logs a user in and returns auth headers."""
    def _login(username: str) -> dict:
        token = get_auth_token(client, username, PASSWORD)
        assert token, f"login failed for {username}"
        return auth_headers(token)
    return _login


@pytest.fixture(scope='function')
def admin_headers(login):
    return login("admin")


@pytest.fixture(scope='function')
def sales_headers(login):
    return login("sales")


@pytest.fixture(scope='function')
def production_headers(login):
    return login("production")


@pytest.fixture(scope='function')
def finance_headers(login):
    return login("finance")


@pytest.fixture(scope='function')
def lab_headers(login):
    return login("lab")


@pytest.fixture(scope='function')
def customer(db_session):
    account = LedgerAccount(
        account_code="CUST-001",
        name="Zaria Retail Ltd",
        account_type="Customer",
        price_level="R-RETAILER-Z1/RTL",
        credit_period=30,
        email="accounts@zariaretail.ng",
        address="12 Station Road, Zaria",
    )
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture(scope='function')
def supplier(db_session):
    account = LedgerAccount(
        account_code="SUP-001",
        name="Kaduna Packaging Co",
        account_type="Supplier",
    )
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture(scope='function')
def product(db_session):
    """Bottled water with 100 units in stock."""
    item = Product(
        sku="BW-75CL",
        name="Hari Bottled Water 75cl",
        category="Bottled Water",
        unit_of_measure="Carton",
        price_cents=150000,
        stock=100.0,
        low_stock_threshold=20.0,
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def material(db_session):
    """Preform bottles with 500 units in stock."""
    item = RawMaterial(
        sku="PREFORM-75",
        name="Preform 75cl",
        category="Bottles & Caps",
        unit_of_measure="PCS",
        stock=500.0,
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def tanks(db_session):
    """Milk and raw-water tank materials."""
    ensure_tank_materials()
    return {
        "milk": db_session.query(RawMaterial).filter_by(sku="MILK-TANK-001").one(),
        "water": db_session.query(RawMaterial).filter_by(sku="RAW-WATER-TANK-001").one(),
    }


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
