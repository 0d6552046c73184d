"""Explicit transaction boundary for mutating workflows.

A service receives a unit-of-work factory through its constructor and wraps
each command in ``with self._unit_of_work() as uow:``.  Every write issued
through the default connection inside the block commits or rolls back as
one unit; an exception escaping the block discards all of them.
"""

from __future__ import annotations

from types import TracebackType
from typing import Callable, Optional, Protocol, Type

import structlog
from django.db import DEFAULT_DB_ALIAS, transaction

logger = structlog.get_logger(__name__)


class IUnitOfWork(Protocol):
    """Transaction scope contract used by the services."""

    def __enter__(self) -> "IUnitOfWork": ...

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> Optional[bool]: ...

    def on_commit(self, callback: Callable[[], None]) -> None: ...


class DjangoUnitOfWork:
    """``transaction.atomic`` exposed as an explicit scope object.

    Nested use joins the outer transaction as a savepoint, so a workflow
    called from within another atomic block still rolls back with it.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using
        self._atomic: Optional[transaction.Atomic] = None

    def __enter__(self) -> DjangoUnitOfWork:
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> Optional[bool]:
        atomic, self._atomic = self._atomic, None
        if exc_type is not None:
            logger.info(
                "unit_of_work.rolled_back",
                database=self.using,
                error=exc_type.__name__,
            )
        return atomic.__exit__(exc_type, exc, tb)

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run *callback* once the outermost transaction commits."""
        transaction.on_commit(callback, using=self.using)
