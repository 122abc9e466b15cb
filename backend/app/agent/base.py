from abc import ABC, abstractmethod
from typing import Any

from app.agent.llm_client import LLMClient


class BaseAgent(ABC):
    """Abstract base class for the generation pipeline stages."""

    def __init__(self, llm: LLMClient | None = None, model_name: str | None = None):
        self.llm = llm or LLMClient(model_name=model_name)

    @abstractmethod
    async def run(self, *args: Any, **kwargs: Any) -> Any:
        """Run the stage and return what it persisted."""
        pass
