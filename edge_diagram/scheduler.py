"""Debounced, cached diagram generation.

States:
    IDLE     nothing submitted yet.
    PENDING  a source is waiting out the debounce period.
    LOADING  the renderer is working on a source.
    READY    an image is available (from the renderer or the cache).
    FAILED   the last render failed; the next submit starts over.

All methods must be called from the event loop that owns the scheduler.
Superseding a request invalidates its token before the next one is
scheduled, so a late result from an old request is always discarded.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .cache import GenerationCache
from .constants import DEBOUNCE_SECONDS_DEFAULT, RENDER_TIMEOUT_SECONDS_DEFAULT
from .errors import OutputMissing, RenderError, RenderProcessError, RenderTimeout
from .renderer import Renderer

logger = logging.getLogger(__name__)


class GenerationStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationState:
    status: GenerationStatus
    source: Optional[str] = None
    image: Optional[bytes] = None
    error: Optional[RenderError] = None


StateListener = Callable[[GenerationState], None]


class CancelToken:
    """Flag checked before a finished render is allowed to change state."""

    __slots__ = ("cancelled",)

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class GenerationScheduler:
    def __init__(
        self,
        renderer: Renderer,
        cache: Optional[GenerationCache] = None,
        *,
        debounce: float = DEBOUNCE_SECONDS_DEFAULT,
        timeout: float = RENDER_TIMEOUT_SECONDS_DEFAULT,
        on_state: Optional[StateListener] = None,
    ):
        self.renderer = renderer
        self.cache = cache if cache is not None else GenerationCache()
        self.debounce = debounce
        self.timeout = timeout
        self.on_state = on_state

        self._state = GenerationState(GenerationStatus.IDLE)
        self._token: Optional[CancelToken] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._disposed = False

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a request is waiting out the debounce or rendering."""
        return self._task is not None and not self._task.done()

    def submit(self, source: str) -> None:
        """Request an image for `source`, superseding any earlier request."""
        if self._disposed:
            raise RuntimeError("GenerationScheduler has been disposed")
        loop = asyncio.get_running_loop()

        self.cancel()

        cached = self.cache.get(source)
        if cached is not None:
            logger.debug("Cache hit for %d chars of source", len(source))
            self._transition(GenerationState(GenerationStatus.READY, source=source, image=cached))
            return

        token = CancelToken()
        self._token = token
        self._transition(GenerationState(GenerationStatus.PENDING, source=source))
        self._task = loop.create_task(self._generate(source, token))

    def cancel(self) -> None:
        """Drop the pending or in-flight request without changing state."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None

    def dispose(self) -> None:
        """Cancel outstanding work; no listener is called after this."""
        self.cancel()
        self._disposed = True
        self.on_state = None

    async def wait(self) -> GenerationState:
        """Wait until no request is pending or in flight, then return the state."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def _generate(self, source: str, token: CancelToken) -> None:
        await asyncio.sleep(self.debounce)
        if token.cancelled:
            return

        self._transition(GenerationState(GenerationStatus.LOADING, source=source))

        error: RenderError
        try:
            image = await asyncio.wait_for(self.renderer.render(source), timeout=self.timeout)
            if not image:
                raise OutputMissing()
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            error = RenderTimeout(self.timeout)
        except RenderError as e:
            error = e
        except Exception as e:
            error = RenderProcessError(f"Renderer failed: {e}")
            error.__cause__ = e
        else:
            if token.cancelled:
                logger.debug("Discarding render result for a superseded request")
                return
            self.cache.put(source, image)
            self._transition(GenerationState(GenerationStatus.READY, source=source, image=image))
            return

        if token.cancelled:
            return
        logger.warning("Diagram generation failed: %s", error)
        self._transition(GenerationState(GenerationStatus.FAILED, source=source, error=error))

    def _transition(self, state: GenerationState) -> None:
        if self._disposed:
            return
        self._state = state
        logger.debug("Generation state -> %s", state.status.value)
        if self.on_state is not None:
            self.on_state(state)
