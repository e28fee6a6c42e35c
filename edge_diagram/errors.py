"""Typed exceptions for the edge-list compiler and the render pipeline."""

from __future__ import annotations

from typing import Optional


class EdgeDiagramError(Exception):
    """Base exception for all edge-diagram errors."""


class ConfigError(EdgeDiagramError):
    """Invalid or unreadable configuration."""


class GraphSyntaxError(EdgeDiagramError):
    """A line of the edge list could not be parsed.

    Always carries the 1-based line number and the raw line text so the
    message can be shown to the user verbatim.
    """

    code = "E_INVALID_NOTATION"
    default_message = "Invalid graph notation"

    def __init__(
        self,
        line_content: str,
        line_number: int,
        message: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.line_content = line_content
        self.line_number = line_number
        super().__init__(f"Error on line {line_number}: {self.message}\n{line_content}")


class BidirectionalNotSupported(GraphSyntaxError):
    code = "E_BIDIRECTIONAL"
    default_message = "Bidirectional connections are not supported"


class MultipleTransitionsPerLine(GraphSyntaxError):
    code = "E_MULTIPLE_TRANSITIONS"
    default_message = "Only one transition per line allowed"


class NoArrowFound(GraphSyntaxError):
    code = "E_NO_ARROW"
    default_message = "Expected '->' or '<-' were not found"


class NameContainsSpace(GraphSyntaxError):
    code = "E_NAME_CONTAINS_SPACE"
    default_message = "Node names cannot contain spaces"


class EmptyEndpoint(GraphSyntaxError):
    code = "E_EMPTY_ENDPOINT"
    default_message = "Source or target vertex is empty"


class InvalidNotation(GraphSyntaxError):
    """Catch-all for unexpected failures while parsing a line."""


class RenderError(EdgeDiagramError):
    """The external renderer could not produce an image."""


class RenderTimeout(RenderError):
    """The renderer did not finish within the allowed time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Diagram generation timed out after {timeout:g}s.")


class RenderProcessError(RenderError):
    """The renderer process failed to start or exited with an error."""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class OutputMissing(RenderError):
    """The renderer finished but produced no image."""

    def __init__(self, message: str = ""):
        super().__init__(
            message
            or "Output graph file was not created. Consider lowering number of vertices."
        )
