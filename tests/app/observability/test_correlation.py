"""Testes do correlation_id em ContextVar."""

from __future__ import annotations

import asyncio

import pytest

from app.observability import (
    bind_correlation_id,
    ensure_correlation_id,
    get_correlation_id,
    new_correlation_id,
)


def test_default_is_empty() -> None:
    assert get_correlation_id() == ""


def test_bind_sets_and_restores() -> None:
    with bind_correlation_id("evt-123") as value:
        assert value == "evt-123"
        assert get_correlation_id() == "evt-123"
    assert get_correlation_id() == ""


def test_bind_without_value_generates_uuid() -> None:
    with bind_correlation_id() as value:
        assert len(value) == 36
        assert get_correlation_id() == value


def test_ensure_does_not_store_generated_id() -> None:
    generated = ensure_correlation_id()
    assert generated
    assert get_correlation_id() == ""
    with bind_correlation_id("fixed"):
        assert ensure_correlation_id() == "fixed"


def test_new_ids_are_unique() -> None:
    assert new_correlation_id() != new_correlation_id()


@pytest.mark.asyncio
async def test_isolated_between_tasks() -> None:
    async def worker(name: str) -> str:
        with bind_correlation_id(name):
            await asyncio.sleep(0.01)
            return get_correlation_id()

    results = await asyncio.gather(worker("a"), worker("b"))
    assert results == ["a", "b"]
