from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple

from .errors import GraphSyntaxError
from .mermaid_fmt import is_mm_safe_id, mm_derived_id
from .parser import Edge, parse_line

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured validation issue for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    line_number: int = 0
    line_content: str = ""
    hint: Optional[str] = None

    def format(self) -> str:
        if self.line_number:
            return f"line {self.line_number}: {self.message}: {self.line_content.strip()}"
        return self.message


def validate_edges_issues(lines: Sequence[str]) -> list[ValidationIssue]:
    """Check the whole edge list and report every problem found.

    Unlike compile_graph() this does not stop at the first syntax error.
    """
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        line_number: int = 0,
        line_content: str = "",
        hint: Optional[str] = None,
    ) -> None:
        issues.append(
            ValidationIssue(
                severity=severity,
                code=code,
                message=message,
                line_number=line_number,
                line_content=line_content,
                hint=hint,
            )
        )

    seen_edges: dict[Edge, int] = {}
    warned_vertices: set[str] = set()

    for line_number, line in enumerate(lines, start=1):
        try:
            edge = parse_line(line, line_number)
        except GraphSyntaxError as e:
            emit("error", e.code, e.message, line_number, line)
            continue
        if edge is None:
            continue

        if edge in seen_edges:
            emit(
                "warning",
                "W_DUPLICATE_EDGE",
                f"edge {edge.source} -> {edge.target} already declared on line "
                f"{seen_edges[edge]}",
                line_number,
                line,
            )
        else:
            seen_edges[edge] = line_number

        for vertex in (edge.source, edge.target):
            if vertex in warned_vertices or is_mm_safe_id(vertex):
                continue
            warned_vertices.add(vertex)
            emit(
                "warning",
                "W_VERTEX_NOT_MERMAID_SAFE",
                f"vertex {vertex!r} is not a Mermaid-safe id; rendered as "
                f"{mm_derived_id(vertex)}",
                line_number,
                line,
                hint="Use [A-Za-z0-9_] and do not start with a digit",
            )

    return issues


def validate_edges(lines: Sequence[str]) -> Tuple[list[str], list[str]]:
    """Return (errors, warnings) as display strings."""
    issues = validate_edges_issues(lines)
    errors = [iss.format() for iss in issues if iss.severity == "error"]
    warnings = [iss.format() for iss in issues if iss.severity == "warning"]
    return errors, warnings
