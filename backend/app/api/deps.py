from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from app.agent.llm_client import LLMClient
from app.core.db import engine


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def get_llm_client() -> LLMClient:
    return LLMClient()


SessionDep = Annotated[Session, Depends(get_db)]
LLMClientDep = Annotated[LLMClient, Depends(get_llm_client)]
