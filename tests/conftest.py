"""Shared pytest fixtures for the ElasticSense test suite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on the path so all service imports resolve.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


class FakeModelClient:
    """Scripted stand-in for LLMProcessor.

    Each queued reply is returned in order; an Exception instance is raised
    instead. Every call is recorded for assertions.
    """

    def __init__(self, replies: list[Any] | None = None) -> None:
        self.replies: list[Any] = list(replies or [])
        self.converse_calls: list[dict[str, Any]] = []
        self.structured_calls: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None

    def _next(self) -> Any:
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def converse(self, system_instruction: str, history: list[dict[str, Any]], message: str) -> str:
        self.converse_calls.append(
            {"system_instruction": system_instruction, "history": [dict(h) for h in history], "message": message}
        )
        if self.gate is not None:
            await self.gate.wait()
        return self._next()

    async def generate_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        system_instruction: str | None = None,
    ) -> str:
        self.structured_calls.append(
            {"prompt": prompt, "schema": schema, "system_instruction": system_instruction}
        )
        return self._next()


@pytest.fixture
def fake_client():
    """Factory: ``fake_client("reply", RuntimeError("boom"))``."""

    def _make(*replies: Any) -> FakeModelClient:
        return FakeModelClient(list(replies))

    return _make


@pytest.fixture
def fixed_clock():
    """Monotonic fake wall clock starting at 1000.0."""
    ticks = iter(range(1000, 10**6))
    return lambda: float(next(ticks))
