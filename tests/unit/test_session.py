import pytest

from edge_diagram.compiler import extract_vertices
from edge_diagram.errors import RenderProcessError
from edge_diagram.scheduler import GenerationScheduler
from edge_diagram.session import DiagramSession, DiagramState


def make_session(renderer, **kwargs):
    scheduler = GenerationScheduler(renderer, debounce=0.01, **kwargs)
    changes = []
    return DiagramSession(scheduler, on_change=changes.append), changes


def test_default_state():
    state = DiagramState()
    assert state.lines == ()
    assert state.vertex_states == {}
    assert state.image is None
    assert not state.is_loading
    assert state.error is None
    assert state.code == "flowchart TD\n"


@pytest.mark.asyncio
async def test_update_edges_preserves_toggle_states(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B\nB->C")
    session.toggle_vertex("B", False)
    session.update_edges("A->B\nB->C\nC->D")

    assert session.state.vertex_states == {"A": True, "B": False, "C": True, "D": True}
    session.dispose()


@pytest.mark.asyncio
async def test_update_edges_renders_compiled_source(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B\n\nB<-C")
    await session.scheduler.wait()

    assert renderer.calls == ["flowchart TD\n  A --> B\n  C --> B\n"]
    assert session.state.image == b"png:" + renderer.calls[0].encode()
    assert not session.state.is_loading
    assert session.state.error is None
    assert session.state.vertices == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_syntax_error_is_reported_and_nothing_renders(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B\nC<->D")
    await session.scheduler.wait()

    assert renderer.calls == []
    assert session.state.error == (
        "Error on line 2: Bidirectional connections are not supported\nC<->D"
    )
    # Extraction is lenient, so the valid line still contributes vertices.
    assert session.state.vertex_states == {"A": True, "B": True}


@pytest.mark.asyncio
async def test_fixing_the_error_clears_it(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A B->C")
    assert session.state.error is not None

    session.update_edges("A->C")
    assert session.state.error is None
    await session.scheduler.wait()
    assert session.state.image is not None


@pytest.mark.asyncio
async def test_toggle_changes_the_rendered_source(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B")
    await session.scheduler.wait()
    session.toggle_vertex("A", False)
    await session.scheduler.wait()

    assert renderer.calls == ["flowchart TD\n  A --> B\n", "flowchart TD\n  B\n"]


@pytest.mark.asyncio
async def test_toggling_back_hits_the_cache(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B")
    await session.scheduler.wait()
    session.toggle_vertex("A", False)
    await session.scheduler.wait()
    session.toggle_vertex("A", True)

    assert len(renderer.calls) == 2
    assert session.state.image == b"png:flowchart TD\n  A --> B\n"


@pytest.mark.asyncio
async def test_bulk_toggle(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B\nB->C\nC->D")
    session.bulk_toggle_vertices(["A", "D"], False)
    await session.scheduler.wait()

    assert session.state.vertex_states == {"A": False, "B": True, "C": True, "D": False}
    assert renderer.calls == ["flowchart TD\n  B\n  B --> C\n  C\n"]


@pytest.mark.asyncio
async def test_render_failure_sets_error(make_renderer):
    renderer = make_renderer(error=RenderProcessError("mmdc exited with status 1"))
    session, changes = make_session(renderer)

    session.update_edges("A->B")
    await session.scheduler.wait()

    assert session.state.error == "mmdc exited with status 1"
    assert not session.state.is_loading
    assert any(change.is_loading for change in changes)


@pytest.mark.asyncio
async def test_dispose_clears_cache_and_stops_notifications(renderer):
    session, changes = make_session(renderer)

    session.update_edges("A->B")
    await session.scheduler.wait()
    assert len(session.scheduler.cache) == 1

    seen = len(changes)
    session.dispose()
    assert len(session.scheduler.cache) == 0
    with pytest.raises(RuntimeError):
        session.update_edges("A->C")
    assert len(changes) == seen


@pytest.mark.asyncio
async def test_toggling_unknown_vertex_keeps_states_in_sync_with_edges(renderer):
    session, _ = make_session(renderer)

    session.update_edges("A->B")
    session.toggle_vertex("Ghost", False)
    session.bulk_toggle_vertices(["B", "Phantom"], False)

    state = session.state
    assert list(state.vertex_states) == extract_vertices(state.lines)
    assert state.vertex_states == {"A": True, "B": False}
    session.dispose()
