"""Application use cases - Business logic orchestration."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")


class UseCase(ABC, Generic[TRequest, TResponse]):
    """Base class for all use cases following command pattern."""

    @abstractmethod
    async def execute(self, request: TRequest) -> TResponse:
        """Execute the use case with the given request."""
        pass


# Import concrete use cases (after UseCase definition to avoid circular imports)
from albumshelf.application.use_cases.import_album import (  # noqa: E402
    ImportAlbumRequest,
    ImportAlbumResponse,
    ImportAlbumUseCase,
)

__all__ = [
    "UseCase",
    "ImportAlbumRequest",
    "ImportAlbumResponse",
    "ImportAlbumUseCase",
]
