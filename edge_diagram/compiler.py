from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .mermaid_fmt import mm_flow_edge, mm_flow_node, mm_flowchart_header
from .parser import iter_edges


def compile_graph(
    lines: Sequence[str], vertex_states: Optional[Mapping[str, bool]] = None
) -> str:
    """Compile an edge list into Mermaid flowchart source.

    Vertices missing from `vertex_states` count as active. An edge between two
    active vertices becomes a connection; an edge with one inactive end keeps
    only the active vertex; an edge with both ends inactive is dropped.

    Raises the first GraphSyntaxError found; no partial output is produced.
    """
    states = vertex_states or {}
    out: list[str] = [mm_flowchart_header()]

    for _, edge in iter_edges(lines, strict=True):
        source_active = states.get(edge.source, True)
        target_active = states.get(edge.target, True)

        if source_active and target_active:
            out.append(mm_flow_edge(edge.source, edge.target))
        elif source_active:
            out.append(mm_flow_node(edge.source))
        elif target_active:
            out.append(mm_flow_node(edge.target))

    return "\n".join(out) + "\n"


def extract_vertices(lines: Sequence[str]) -> list[str]:
    """Return the sorted unique vertex names of every well-formed edge line.

    Never raises: lines the compiler would reject are skipped.
    """
    vertices: set[str] = set()
    for _, edge in iter_edges(lines, strict=False):
        vertices.add(edge.source)
        vertices.add(edge.target)
    return sorted(vertices)


def reconcile(
    lines: Sequence[str], previous_states: Mapping[str, bool]
) -> dict[str, bool]:
    """Vertex states for a new edge list.

    Vertices that survive the edit keep their flag, new vertices start active,
    and vertices no longer referenced are dropped.
    """
    return {vertex: previous_states.get(vertex, True) for vertex in extract_vertices(lines)}
