from datetime import date, timedelta

import pytest
from flask_jwt_extended import create_access_token

from lendbox import create_app
from lendbox.config import TestConfig
from lendbox.extensions import db
from lendbox.models import Item, ItemStatus, User


@pytest.fixture
def app(tmp_path):
    # file database so the stale-write test can open a second connection
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'lendbox.db'}"

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(username):
    user = User(username=username, email=f"{username}@example.com")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def lender(app):
    return _user("lender")


@pytest.fixture
def borrower(app):
    return _user("borrower")


@pytest.fixture
def stranger(app):
    return _user("stranger")


@pytest.fixture
def item(lender):
    item = Item(owner_id=lender.id, title="Cordless drill", status=ItemStatus.AVAILABLE)
    db.session.add(item)
    db.session.commit()
    return item


@pytest.fixture
def make_item(lender):
    def _make(status=ItemStatus.AVAILABLE, owner=None, title="Camping tent"):
        it = Item(owner_id=(owner or lender).id, title=title, status=status)
        db.session.add(it)
        db.session.commit()
        return it
    return _make


@pytest.fixture
def tomorrow():
    return date.today() + timedelta(days=1)


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}
    return _headers
