import os

# Must be set before planner.core.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import fitz
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from planner.core.database import Base
import planner.models  # noqa: F401


def make_pdf(pages):
    """Build a text PDF with one page per string."""
    document = fitz.open()
    for text in pages:
        page = document.new_page()
        page.insert_text((72, 72), text, fontsize=10)
    data = document.tobytes()
    document.close()
    return data


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
