from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseClient(ABC, Generic[T]):
    """Abstract base class for social API clients."""

    def __init__(self, instance_id: str, config: T):
        self.instance_id = instance_id
        self.config: T = config

    async def start(self):
        """Open connections / authenticate. Default: nothing to do."""

    async def close(self):
        """Release connections. Default: nothing to do."""

    @abstractmethod
    async def favorite(self, status_id: int):
        """Mark *status_id* as a favorite."""

    @abstractmethod
    async def unfavorite(self, status_id: int):
        """Remove the favorite mark from *status_id*."""

    @abstractmethod
    async def retweet(self, status_id: int):
        """Retweet *status_id*."""
