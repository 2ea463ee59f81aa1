import os

os.environ.setdefault("JWT_SECRET", "test-secret-for-quoteportal-lock-tests-0123456789")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quoteportal.main import app
from quoteportal.deps import get_db
from quoteportal.shared.db import Base
from quoteportal.auth.models import User
from quoteportal.auth.utils import create_token
from quoteportal.articles.models import Article
from quoteportal.blocks.models import Block
from quoteportal.quotes.models import Quote, QuoteVersion
from quoteportal.sales_opportunities.models import SalesOpportunity


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )

    @event.listens_for(engine, "connect")
    def _enable_fks(dbapi_conn, _):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _user(db, email, name):
    user = User(email=email, name=name, password_hash="!")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def anna(db):
    return _user(db, "anna@quoteportal.de", "Anna Berger")


@pytest.fixture
def ben(db):
    return _user(db, "ben@quoteportal.de", "Ben Krause")


@pytest.fixture
def auth():
    def _headers(user):
        return {"Authorization": f"Bearer {create_token(user.id)}"}

    return _headers


@pytest.fixture
def article(db):
    row = Article(number="A-1000", price=Decimal("125.50"))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def block(db):
    row = Block(name="Payment terms", standard=True)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def sales_opportunity(db, anna):
    row = SalesOpportunity(client_name="Stadtwerke Nord", created_by=anna.id)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def quote_version(db, anna, sales_opportunity):
    quote = Quote(sales_opportunity_id=sales_opportunity.id, title="Network upgrade")
    db.add(quote)
    db.flush()
    row = QuoteVersion(quote_id=quote.id, version_number=1, is_latest=True, created_by=anna.id)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
