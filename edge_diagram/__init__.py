"""Compile edge lists into Mermaid flowcharts and render them with debouncing and caching."""

from .cache import GenerationCache
from .compiler import compile_graph, extract_vertices, reconcile
from .config import EditorConfig
from .errors import (
    BidirectionalNotSupported,
    ConfigError,
    EdgeDiagramError,
    EmptyEndpoint,
    GraphSyntaxError,
    InvalidNotation,
    MultipleTransitionsPerLine,
    NameContainsSpace,
    NoArrowFound,
    OutputMissing,
    RenderError,
    RenderProcessError,
    RenderTimeout,
)
from .parser import Edge, parse_line, split_lines
from .renderer import MermaidCliRenderer, Renderer
from .scheduler import GenerationScheduler, GenerationState, GenerationStatus
from .session import DiagramSession, DiagramState

__all__ = [
    "BidirectionalNotSupported",
    "ConfigError",
    "DiagramSession",
    "DiagramState",
    "Edge",
    "EdgeDiagramError",
    "EditorConfig",
    "EmptyEndpoint",
    "GenerationCache",
    "GenerationScheduler",
    "GenerationState",
    "GenerationStatus",
    "GraphSyntaxError",
    "InvalidNotation",
    "MermaidCliRenderer",
    "MultipleTransitionsPerLine",
    "NameContainsSpace",
    "NoArrowFound",
    "OutputMissing",
    "Renderer",
    "RenderError",
    "RenderProcessError",
    "RenderTimeout",
    "compile_graph",
    "extract_vertices",
    "parse_line",
    "reconcile",
    "split_lines",
]
