import pytest
from flask import template_rendered
from werkzeug.security import generate_password_hash

from shopfront.app.config import TestConfig
from shopfront.app.extensions import db
from shopfront.app.factory import create_app
from shopfront.app.models import Admin, Address, Category, Product, User

USER_PASSWORD = "Test1234!"
ADMIN_PASSWORD = "Admin1234!"


@pytest.fixture()
def app():
    # Use in-memory SQLite in tests for simplicity.
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def captured_templates(app):
    """Record (template, context) for every render during the test."""
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template, context))

    template_rendered.connect(record, app)
    try:
        yield recorded
    finally:
        template_rendered.disconnect(record, app)


@pytest.fixture()
def catalog(app):
    """Two listed products and one unlisted product in a listed category."""
    shoes = Category(name="Shoes")
    db.session.add(shoes)
    db.session.flush()
    sneaker = Product(name="Canvas Sneaker", description="Low-top", price_cents=5000, stock=10, category_id=shoes.id)
    runner = Product(name="Trail Runner", description="Grippy", price_cents=9000, stock=2, category_id=shoes.id)
    hidden = Product(name="Old Boot", description="Retired", price_cents=3000, stock=5, category_id=shoes.id, is_listed=False)
    db.session.add_all([sneaker, runner, hidden])
    db.session.commit()
    return {"category": shoes, "sneaker": sneaker, "runner": runner, "hidden": hidden}


@pytest.fixture()
def user(app):
    u = User(name="Test User", email="test@test.com", password_hash=generate_password_hash(USER_PASSWORD))
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture()
def address(app, user):
    a = Address(user_id=user.id, line1="1 Main St", city="Springfield", postal_code="12345", country="US")
    db.session.add(a)
    db.session.commit()
    return a


@pytest.fixture()
def admin(app):
    a = Admin(email="admin@test.com", password_hash=generate_password_hash(ADMIN_PASSWORD))
    db.session.add(a)
    db.session.commit()
    return a


def login_as(client, user):
    with client.session_transaction() as sess:
        sess["user"] = user.identity()


def login_as_admin(client, admin):
    with client.session_transaction() as sess:
        sess["admin"] = admin.identity()


def reload(model, pk):
    """Fresh row, bypassing anything cached in the test's session."""
    db.session.expire_all()
    return db.session.get(model, pk)


@pytest.fixture()
def logged_in(client, user):
    login_as(client, user)
    return client


@pytest.fixture()
def admin_client(client, admin):
    login_as_admin(client, admin)
    return client
