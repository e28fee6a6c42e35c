from __future__ import annotations

import hashlib
import html
import re

from .constants import FLOWCHART_HEADER

# Mermaid node IDs must be alphanumeric/underscore and must not start with a
# digit.
MERMAID_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Flowchart keywords that are parsed as statements when used as a bare node id.
# Compared lowercased.
MERMAID_RESERVED_IDS = frozenset(
    {
        "end",
        "subgraph",
        "graph",
        "flowchart",
        "direction",
        "style",
        "class",
        "classdef",
        "click",
        "linkstyle",
    }
)


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def mm_text(text: str) -> str:
    """Escape text for Mermaid labels."""
    normalized = re.sub(r"\s+", " ", html.unescape(str(text))).strip()
    return (
        normalized.replace("&", "#amp;")
        .replace("<", "#lt;")
        .replace(">", "#gt;")
        .replace('"', "#quot;")
        .replace("|", "#124;")
    )


def is_mm_safe_id(value: str) -> bool:
    return bool(MERMAID_ID_RE.match(value)) and value.lower() not in MERMAID_RESERVED_IDS


def mm_derived_id(name: str) -> str:
    """Stable Mermaid id for a vertex name that cannot be used verbatim."""
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:10]
    return f"v_{digest}"


def mm_vertex(name: str) -> str:
    """Format a vertex reference for a flowchart directive.

    Safe names are emitted as-is; anything else gets a derived id and a quoted
    label so the original name is still what the diagram shows.
    """
    if is_mm_safe_id(name):
        return name
    return f'{mm_derived_id(name)}["{mm_text(name)}"]'


def mm_flowchart_header() -> str:
    return FLOWCHART_HEADER


def mm_flow_edge(src: str, dst: str) -> str:
    return f"  {mm_vertex(src)} --> {mm_vertex(dst)}"


def mm_flow_node(name: str) -> str:
    return f"  {mm_vertex(name)}"
