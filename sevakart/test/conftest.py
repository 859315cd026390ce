"""
Pytest configuration and fixtures for SevaKart tests

Each test gets a fresh application on an in-memory SQLite database. Tests of
the business layer use `ctx` (an active app context); API tests use the test
clients without an outer context so each request gets its own.
"""
import pytest

from sevakart import create_app
from sevakart import db as _db
from sevakart.buisness.core.identity import Identity
from sevakart.buisness.core.record_store import get_record_store
from sevakart.data.catalog.category import Category
from sevakart.data.catalog.product import Product
from sevakart.data.core.user import ROLE_SUPPLIER, ROLE_VENDOR, User

TEST_PASSWORD = 'market-password-1'

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'WTF_CSRF_ENABLED': False,
    'RATELIMIT_ENABLED': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
}


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing"""
    app = create_app(dict(TEST_CONFIG))
    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def ctx(app):
    """Active application context for business layer tests"""
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def store(ctx):
    return get_record_store()


def create_user(username, role, display_name=None):
    """Insert a user in the current app context and return it"""
    user = User(
        username=username,
        email=f'{username}@example.com',
        role=role,
        display_name=display_name,
    )
    user.set_password(TEST_PASSWORD)
    _db.session.add(user)
    _db.session.commit()
    return user


def create_product(supplier, name, price, unit='kg', category='Vegetables', stock=100, image=None):
    """Insert a catalog product owned by `supplier` (an Identity) in the current app context"""
    if Category.query.filter_by(name=category).first() is None:
        _db.session.add(Category(name=category))
    product = Product(
        name=name,
        price=price,
        unit=unit,
        category=category,
        supplier=supplier.label,
        supplier_id=supplier.id,
        stock=stock,
        image=image,
    )
    _db.session.add(product)
    _db.session.commit()
    return product


def _identity_for(app, username, role, display_name):
    with app.app_context():
        return Identity.from_user(create_user(username, role, display_name))


@pytest.fixture(scope='function')
def vendor(app):
    return _identity_for(app, 'ramchaat', ROLE_VENDOR, 'Ram Chaat Stall')


@pytest.fixture(scope='function')
def other_vendor(app):
    return _identity_for(app, 'sharmafoods', ROLE_VENDOR, 'Sharma Foods')


@pytest.fixture(scope='function')
def supplier(app):
    return _identity_for(app, 'freshmandi', ROLE_SUPPLIER, 'Fresh Mandi')


@pytest.fixture(scope='function')
def other_supplier(app):
    return _identity_for(app, 'masalahouse', ROLE_SUPPLIER, 'Masala House')


@pytest.fixture(scope='function')
def make_product(app, supplier):
    """Factory inserting products from outside any app context; returns the product id"""
    def _make(name, price, owner=None, **fields):
        with app.app_context():
            return create_product(owner or supplier, name, price, **fields).id
    return _make


@pytest.fixture(scope='function')
def add_product(ctx, supplier):
    """Factory inserting products inside the test's app context; returns the Product"""
    def _add(name, price, owner=None, **fields):
        return create_product(owner or supplier, name, price, **fields)
    return _add


def login_user(client, username, password=TEST_PASSWORD):
    """Helper function to login a user"""
    return client.post('/auth/login', json={'username': username, 'password': password})


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def vendor_client(app, vendor):
    client = app.test_client()
    assert login_user(client, 'ramchaat').status_code == 200
    return client


@pytest.fixture(scope='function')
def supplier_client(app, supplier):
    client = app.test_client()
    assert login_user(client, 'freshmandi').status_code == 200
    return client


@pytest.fixture(scope='function')
def other_supplier_client(app, other_supplier):
    client = app.test_client()
    assert login_user(client, 'masalahouse').status_code == 200
    return client
