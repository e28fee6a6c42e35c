import asyncio
from typing import Optional

import pytest


class FakeRenderer:
    """In-process stand-in for the Mermaid CLI."""

    def __init__(
        self,
        result: Optional[bytes] = None,
        delay: float = 0.0,
        error: Optional[BaseException] = None,
    ):
        self.result = result
        self.delay = delay
        self.error = error
        self.calls: list[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def check_available(self) -> tuple[bool, str]:
        return True, "fake-mmdc 0.0.0"

    async def render(self, source: str) -> bytes:
        self.calls.append(source)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return b"png:" + source.encode("utf-8")


@pytest.fixture
def make_renderer():
    return FakeRenderer


@pytest.fixture
def renderer():
    return FakeRenderer()
