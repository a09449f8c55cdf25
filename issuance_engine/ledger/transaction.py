"""All-or-nothing wrapper around a multi-step engine operation."""
from __future__ import annotations

import logging
from types import TracebackType
from typing import Awaitable, Callable

from ..models import Event
from .positions import PositionStore

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[object]]


class Transaction:
    """Snapshot the ledger on entry; undo everything if the body raises.

    External effects (token transfers, mints, burns) cannot be snapshotted, so
    each successful one registers a compensating action with ``on_rollback``.
    On failure the compensations run newest-first, then the ledger snapshot is
    restored and pending events are dropped. The original exception always
    propagates; a compensation that fails is logged and noted on it.

    Usage::

        async with Transaction(store, "deposit") as tx:
            store.deposit(account, asset, qty)
            await pull(...)
            tx.on_rollback(lambda: push_back(...))
            tx.emit(CollateralDeposited(account, asset, qty))
    """

    def __init__(self, store: PositionStore, name: str = "") -> None:
        self._store = store
        self.name = name
        self._snapshot = store.snapshot()
        self._compensations: list[tuple[str, Compensation]] = []
        self.events: list[Event] = []
        self.committed = False
        self.failed_compensations: list[str] = []

    def on_rollback(self, action: Compensation, label: str = "") -> None:
        self._compensations.append((label, action))

    def emit(self, event: Event) -> None:
        self.events.append(event)

    async def __aenter__(self) -> Transaction:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.committed = True
            return
        await self._rollback(exc)

    async def _rollback(self, cause: BaseException | None) -> None:
        name = self.name or "transaction"
        logger.warning("Rolling back %s: %s", name, cause)
        for label, action in reversed(self._compensations):
            try:
                await action()
            except Exception as e:
                logger.exception("Compensation '%s' failed while rolling back %s", label, name)
                self.failed_compensations.append(label)
                if cause is not None:
                    cause.add_note(f"rollback of {name}: compensation '{label}' failed: {e!r}")
        self._store.restore(self._snapshot)
        self.events.clear()
        if self.failed_compensations:
            logger.error(
                "Rollback of %s incomplete; custody may not match the ledger (%s)",
                name, ", ".join(self.failed_compensations),
            )
