from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.api.deps import get_db, get_llm_client
from app.main import app as fastapi_app
from app.models import Project


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def project(session: Session) -> Project:
    db_project = Project(
        brand_name="rb7",
        domain="rb7.example",
        focus_type="หวย + คาสิโน",
        focus_percentages={"lottery": 60, "casino": 40},
        url_style="nested",
        output_language="thai",
        total_pages=8,
    )
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


@pytest.fixture()
def fake_llm() -> MagicMock:
    llm = MagicMock()
    llm.generate_with_retry = AsyncMock()
    return llm


@pytest.fixture()
def client(engine, fake_llm) -> Generator[TestClient, None, None]:
    def _get_db():
        with Session(engine) as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_llm_client] = lambda: fake_llm
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


def make_completion(content: str | None) -> MagicMock:
    """Mock object mapping the OpenAI chat completion response structure."""
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def make_openai_client(create: AsyncMock) -> AsyncMock:
    mock_completions = MagicMock()
    mock_completions.create = create

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance
