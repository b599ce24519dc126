"""
Tests for the address field lifecycle: the state machine on
``AddressField`` and the debounce / supersede behaviour of the worker.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.domain.entities import AddressField, Coordinate, InvalidStateTransition
from src.domain.enums import FieldState
from src.workers.address_field import AddressFieldWorker
from tests.conftest import NEARBY


class TestAddressFieldStateMachine:
    def test_initial_state_is_idle(self):
        assert AddressField().state == FieldState.IDLE

    # ── Valid transitions ─────────────────────────────────────────

    def test_idle_to_debouncing(self):
        field = AddressField()
        field.transition_to(FieldState.DEBOUNCING)
        assert field.state == FieldState.DEBOUNCING

    def test_debouncing_restarts_on_edit(self):
        field = AddressField(state=FieldState.DEBOUNCING)
        field.transition_to(FieldState.DEBOUNCING)
        assert field.state == FieldState.DEBOUNCING

    @pytest.mark.parametrize("outcome", [FieldState.RESOLVED, FieldState.FAILED])
    def test_geocoding_outcomes(self, outcome):
        field = AddressField(state=FieldState.GEOCODING)
        field.transition_to(outcome)
        assert field.state == outcome

    def test_edit_while_geocoding(self):
        field = AddressField(state=FieldState.GEOCODING)
        field.transition_to(FieldState.DEBOUNCING)
        assert field.state == FieldState.DEBOUNCING

    @pytest.mark.parametrize("state", list(FieldState))
    def test_clearing_always_allowed(self, state):
        field = AddressField(state=state)
        field.transition_to(FieldState.IDLE)
        assert field.state == FieldState.IDLE

    # ── Invalid transitions ───────────────────────────────────────

    def test_idle_to_geocoding_fails(self):
        """A request is only issued after the debounce window."""
        with pytest.raises(InvalidStateTransition):
            AddressField().transition_to(FieldState.GEOCODING)

    def test_debouncing_to_resolved_fails(self):
        field = AddressField(state=FieldState.DEBOUNCING)
        with pytest.raises(InvalidStateTransition):
            field.transition_to(FieldState.RESOLVED)

    def test_resolved_to_geocoding_fails(self):
        field = AddressField(state=FieldState.RESOLVED)
        with pytest.raises(InvalidStateTransition):
            field.transition_to(FieldState.GEOCODING)

    # ── Generation token ──────────────────────────────────────────

    def test_older_token_is_stale(self):
        field = AddressField()
        first = field.generation.next()
        second = field.generation.next()
        assert not field.generation.is_current(first)
        assert field.generation.is_current(second)


class Resolver:
    """Async resolver that can be held open to simulate a slow provider."""

    def __init__(self, known: dict[str, Coordinate] | None = None, hold: bool = False):
        self.known = known or {}
        self.calls: list[str] = []
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        if not hold:
            self.release.set()

    async def __call__(self, text: str):
        self.calls.append(text)
        self.started.set()
        await self.release.wait()
        return self.known.get(text)


class TestAddressFieldWorker:
    @pytest.mark.asyncio
    async def test_resolves_after_debounce(self):
        results = []
        resolver = Resolver({"Mabini": NEARBY})
        worker = AddressFieldWorker(
            resolver, debounce_seconds=0, on_result=lambda t, c: results.append((t, c))
        )

        worker.edit("Mabini")
        assert worker.state == FieldState.DEBOUNCING
        await worker.settle()

        assert worker.state == FieldState.RESOLVED
        assert worker.coordinate == NEARBY
        assert results == [("Mabini", NEARBY)]

    @pytest.mark.asyncio
    async def test_rapid_edits_issue_one_request(self):
        resolver = Resolver({"Mab": NEARBY})
        worker = AddressFieldWorker(resolver, debounce_seconds=0.05)

        for text in ("M", "Ma", "Mab"):
            worker.edit(text)
        await worker.settle()

        assert resolver.calls == ["Mab"]
        assert worker.state == FieldState.RESOLVED

    @pytest.mark.asyncio
    async def test_not_found_marks_failed(self):
        results = []
        worker = AddressFieldWorker(
            Resolver(), debounce_seconds=0, on_result=lambda t, c: results.append((t, c))
        )
        worker.edit("nowhere")
        await worker.settle()

        assert worker.state == FieldState.FAILED
        assert worker.coordinate is None
        assert results == [("nowhere", None)]

    @pytest.mark.asyncio
    async def test_resolver_error_marks_failed(self):
        async def boom(text):
            raise RuntimeError("provider exploded")

        worker = AddressFieldWorker(boom, debounce_seconds=0)
        worker.edit("Mabini")
        await worker.settle()
        assert worker.state == FieldState.FAILED

    @pytest.mark.asyncio
    async def test_clearing_goes_idle_without_request(self):
        resolver = Resolver({"Mabini": NEARBY})
        worker = AddressFieldWorker(resolver, debounce_seconds=0)
        worker.edit("Mabini")
        await worker.settle()

        worker.edit("   ")
        await worker.settle()

        assert worker.state == FieldState.IDLE
        assert worker.coordinate is None
        assert resolver.calls == ["Mabini"]

    @pytest.mark.asyncio
    async def test_edit_during_geocoding_supersedes(self):
        slow = Resolver({"Valdez": Coordinate(14.9, 120.5)}, hold=True)
        worker = AddressFieldWorker(slow, debounce_seconds=0)

        worker.edit("Valdez")
        await slow.started.wait()
        assert worker.state == FieldState.GEOCODING

        slow.known["Mabini"] = NEARBY
        worker.edit("Mabini")
        assert worker.state == FieldState.DEBOUNCING
        slow.release.set()
        await worker.settle()

        assert worker.coordinate == NEARBY
        assert worker.state == FieldState.RESOLVED

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self):
        """A response arriving after a newer token was issued is not applied."""
        results = []
        slow = Resolver({"Valdez": Coordinate(14.9, 120.5)}, hold=True)
        worker = AddressFieldWorker(
            slow, debounce_seconds=0, on_result=lambda t, c: results.append((t, c))
        )

        worker.edit("Valdez")
        await slow.started.wait()
        worker.field.generation.next()
        slow.release.set()
        await worker.settle()

        assert worker.coordinate is None
        assert results == []

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self):
        resolver = Resolver()
        worker = AddressFieldWorker(resolver, debounce_seconds=10)
        worker.edit("Mabini")
        await worker.close()
        assert resolver.calls == []

    @pytest.mark.asyncio
    async def test_resolver_receives_raw_text(self):
        resolver = AsyncMock(return_value=NEARBY)
        worker = AddressFieldWorker(resolver, debounce_seconds=0)
        worker.edit("brgy valdez")
        await worker.settle()
        resolver.assert_awaited_once_with("brgy valdez")
