"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from streampub.core.parse import parse_buffer
from streampub.crud.documents import commit_doc


RAW = "[TITLE: Archived]\nBody text\n[LIST: a]\n[LIST: b]\n[封面锚点: skyline]"


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="raw")
def raw_fixture():
    return RAW


@pytest.fixture(name="doc")
def doc_fixture(session):
    """A Document archived from a small run."""
    d, _ = commit_doc(session, "archived", RAW, parse_buffer(RAW))
    return d
