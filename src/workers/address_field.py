"""
Address Field Worker
====================

Drives one address input through its request lifecycle::

    IDLE -> DEBOUNCING -> GEOCODING -> RESOLVED | FAILED

Every edit re-enters DEBOUNCING and supersedes whatever was in flight.

Concurrency safety
------------------
* The pending debounce/geocode task is **cancelled** on each edit.
* Each edit also takes a new **generation token**; a resolution whose token
  is no longer current is discarded, so a slow earlier request can never
  overwrite the result of a faster later one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from src.config import settings
from src.domain.entities import AddressField, Coordinate
from src.domain.enums import FieldState

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[Optional[Coordinate]]]
ResultCallback = Callable[[str, Optional[Coordinate]], None]


class AddressFieldWorker:
    def __init__(
        self,
        resolver: Resolver,
        debounce_seconds: float = settings.address_debounce_seconds,
        on_result: Optional[ResultCallback] = None,
    ):
        self.resolver = resolver
        self.debounce_seconds = debounce_seconds
        self.on_result = on_result
        self.field = AddressField()
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> FieldState:
        return self.field.state

    @property
    def coordinate(self) -> Optional[Coordinate]:
        return self.field.coordinate

    # ── Public API ────────────────────────────────────────────────────

    def edit(self, text: str) -> int:
        """Record a keystroke; returns the generation token it was issued."""
        token = self.field.generation.next()
        self.field.text = text
        self._cancel_pending()

        if not text.strip():
            self.field.coordinate = None
            self.field.transition_to(FieldState.IDLE)
            return token

        self.field.transition_to(FieldState.DEBOUNCING)
        self._task = asyncio.create_task(self._run(token, text))
        return token

    async def settle(self) -> None:
        """Wait for the current request (if any) to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def close(self) -> None:
        self._cancel_pending()
        await self.settle()

    # ── Internals ─────────────────────────────────────────────────────

    def _cancel_pending(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()

    async def _run(self, token: int, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if not self.field.generation.is_current(token):
            return

        self.field.transition_to(FieldState.GEOCODING)
        try:
            coordinate = await self.resolver(text)
        except Exception:
            logger.exception("Resolver failed for %r", text)
            coordinate = None

        if not self.field.generation.is_current(token):
            logger.debug("Discarding superseded result for %r", text)
            return

        self.field.coordinate = coordinate
        self.field.transition_to(
            FieldState.RESOLVED if coordinate is not None else FieldState.FAILED
        )
        if self.on_result:
            self.on_result(text, coordinate)
