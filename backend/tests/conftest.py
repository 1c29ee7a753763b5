# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile

# Must be set before portfolio_reporting.config is imported anywhere.
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.gettempdir(), "portfolio_reporting_test.db"),
)

import pytest

from portfolio_reporting.db import Base, engine, init_db


@pytest.fixture()
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)
