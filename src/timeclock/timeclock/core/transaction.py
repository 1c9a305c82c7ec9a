from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Unit-of-work boundary shared by repositories.

    Every repository call made inside ``transaction()`` commits or rolls back
    together. Implemented by ``database.connection.DatabaseConnection``.
    """

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
