"""Transaction boundary shared by multi-step services."""

from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import Protocol


class UnitOfWork(Protocol):
    """Groups several repository writes into one atomic step."""

    def atomic(self) -> AbstractContextManager[None]:
        """Return a context that commits on success and rolls back on error."""


@dataclass
class PassThroughUnitOfWork(UnitOfWork):
    """Unit of work for stores without multi-table transactions."""

    def atomic(self) -> AbstractContextManager[None]:
        """Run the block with each write applied immediately."""
        return nullcontext()
