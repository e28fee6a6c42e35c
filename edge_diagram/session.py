from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Mapping, Optional

from .compiler import compile_graph, reconcile
from .errors import GraphSyntaxError
from .parser import split_lines
from .scheduler import GenerationScheduler, GenerationState, GenerationStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramState:
    """Snapshot of one editing session, replaced on every change."""

    lines: tuple[str, ...] = ()
    vertex_states: Mapping[str, bool] = field(default_factory=dict)
    image: Optional[bytes] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def code(self) -> str:
        return compile_graph(self.lines, self.vertex_states)

    @property
    def vertices(self) -> list[str]:
        return list(self.vertex_states)


StateObserver = Callable[[DiagramState], None]


class DiagramSession:
    """Owns the edge list, the vertex toggles and the generation pipeline.

    Edits and toggles recompile the diagram source and hand it to the
    scheduler; scheduler transitions are folded back into `state`.
    """

    def __init__(
        self,
        scheduler: GenerationScheduler,
        *,
        on_change: Optional[StateObserver] = None,
    ):
        self.scheduler = scheduler
        self.on_change = on_change
        self._state = DiagramState()
        scheduler.on_state = self._on_generation

    @property
    def state(self) -> DiagramState:
        return self._state

    def _set_state(self, state: DiagramState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)

    def update_edges(self, text: str) -> None:
        """Replace the edge list, keeping toggle flags of surviving vertices."""
        lines = tuple(split_lines(text))
        vertex_states = reconcile(lines, self._state.vertex_states)
        self._set_state(replace(self._state, lines=lines, vertex_states=vertex_states, error=None))
        self._regenerate()

    def toggle_vertex(self, vertex: str, is_active: bool) -> None:
        self.bulk_toggle_vertices([vertex], is_active)

    def bulk_toggle_vertices(self, vertices: Iterable[str], is_active: bool) -> None:
        """Set the flag of every listed vertex; names not in the edge list are ignored."""
        vertex_states = dict(self._state.vertex_states)
        for vertex in vertices:
            if vertex not in vertex_states:
                logger.debug("Ignoring toggle of unknown vertex %r", vertex)
                continue
            vertex_states[vertex] = is_active
        self._set_state(replace(self._state, vertex_states=vertex_states))
        self._regenerate()

    def dispose(self) -> None:
        self.scheduler.dispose()
        self.scheduler.cache.clear()
        self.on_change = None

    def _regenerate(self) -> None:
        try:
            code = self._state.code
        except GraphSyntaxError as e:
            logger.debug("Edge list rejected: %s", e.message)
            self.scheduler.cancel()
            self._set_state(replace(self._state, error=str(e), is_loading=False))
            return
        self.scheduler.submit(code)

    def _on_generation(self, generation: GenerationState) -> None:
        if generation.status is GenerationStatus.LOADING:
            self._set_state(replace(self._state, is_loading=True, error=None))
        elif generation.status is GenerationStatus.READY:
            self._set_state(
                replace(self._state, image=generation.image, is_loading=False, error=None)
            )
        elif generation.status is GenerationStatus.FAILED:
            self._set_state(
                replace(self._state, is_loading=False, error=str(generation.error))
            )
